from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from doccrawl.domain.crawl_progress import CrawlProgress, CrawlStatus
from doccrawl.domain.document import CrawledDocument
from doccrawl.exceptions import InvalidConfiguration

from .store import ProgressRecordStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryProgressTracker:
    """Thread-safe owner of every crawl's progress record and document list.

    The crawl loop is the only writer of counters and documents; status
    changes may also come from callers (cancel, pause, resume). Everything goes
    through one condition variable, so readers never observe a half-applied
    update and a paused loop wakes as soon as its status changes.
    """

    def __init__(self, *, max_completed_records: int = 1000, now: Callable[[], datetime] = _utcnow):
        self._cond = threading.Condition()
        self._records = ProgressRecordStore(max_completed_records=max_completed_records)
        self._now = now

    def register(self, crawl_id: str, total_pages: int) -> CrawlProgress:
        with self._cond:
            if crawl_id in self._records:
                raise InvalidConfiguration(f"crawl {crawl_id} is already registered")
            return self._records.create(crawl_id=crawl_id, total_pages=total_pages, now=self._now())

    def transition(self, crawl_id: str, status: CrawlStatus, error: Optional[str] = None) -> bool:
        """Move a crawl to `status`; returns False if the transition is not allowed."""
        with self._cond:
            current = self._records.get(crawl_id)
            ok = self._records.transition(crawl_id, status=status, error=error, now=self._now())
            if ok:
                logger.info("Crawl %s: %s -> %s", crawl_id, current.status.value, status.value)
                if status.is_terminal:
                    self._records.evict_completed_overflow()
                self._cond.notify_all()
            elif current is not None:
                logger.debug("Crawl %s: refused transition %s -> %s", crawl_id, current.status.value, status.value)
            return ok

    def update(self, crawl_id: str, *, pages_processed: Optional[int] = None, current_depth: Optional[int] = None) -> bool:
        with self._cond:
            return self._records.update(
                crawl_id,
                pages_processed=pages_processed,
                current_depth=current_depth,
                now=self._now(),
            )

    def add_document(self, crawl_id: str, document: CrawledDocument) -> bool:
        with self._cond:
            return self._records.add_document(crawl_id, document)

    def get(self, crawl_id: str) -> Optional[CrawlProgress]:
        with self._cond:
            return self._records.get(crawl_id)

    def status(self, crawl_id: str) -> Optional[CrawlStatus]:
        progress = self.get(crawl_id)
        return progress.status if progress else None

    def get_documents(self, crawl_id: str) -> List[CrawledDocument]:
        with self._cond:
            return self._records.documents(crawl_id)

    def wait_while_paused(self, crawl_id: str) -> Optional[CrawlStatus]:
        """Block while the crawl is paused; return the status that ended the wait."""
        with self._cond:
            while True:
                progress = self._records.get(crawl_id)
                if progress is None or progress.status is not CrawlStatus.PAUSED:
                    return progress.status if progress else None
                self._cond.wait()

    def list_active(self) -> List[CrawlProgress]:
        with self._cond:
            return self._records.list_active()
