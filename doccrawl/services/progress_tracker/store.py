from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from doccrawl.domain.crawl_progress import CrawlProgress, CrawlStatus, can_transition
from doccrawl.domain.document import CrawledDocument


@dataclass
class _CrawlEntry:
    progress: CrawlProgress
    documents: List[CrawledDocument] = field(default_factory=list)


class ProgressRecordStore:
    """Progress snapshots and document collections, keyed by crawl id.

    Not thread-safe; `InMemoryProgressTracker` serializes all access. Terminal
    crawls are retained up to `max_completed_records`, oldest evicted first.
    """

    def __init__(self, *, max_completed_records: int):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._entries: Dict[str, _CrawlEntry] = {}
        self._max_completed_records = max_completed_records
        self._completed_order = deque()

    def __contains__(self, crawl_id: str) -> bool:
        return crawl_id in self._entries

    def create(self, *, crawl_id: str, total_pages: int, now: datetime) -> CrawlProgress:
        progress = CrawlProgress(
            crawl_id=crawl_id,
            total_pages=total_pages,
            started_at=now,
            last_update=now,
        )
        self._entries[crawl_id] = _CrawlEntry(progress=progress)
        return progress

    def get(self, crawl_id: str) -> Optional[CrawlProgress]:
        entry = self._entries.get(crawl_id)
        return entry.progress if entry else None

    def documents(self, crawl_id: str) -> List[CrawledDocument]:
        entry = self._entries.get(crawl_id)
        return list(entry.documents) if entry else []

    def transition(self, crawl_id: str, *, status: CrawlStatus, error: Optional[str], now: datetime) -> bool:
        entry = self._entries.get(crawl_id)
        if not entry or not can_transition(entry.progress.status, status):
            return False
        entry.progress = entry.progress.with_changes(
            status=status,
            error=error if error else entry.progress.error,
            last_update=now,
        )
        if status.is_terminal:
            self._completed_order.append(crawl_id)
        return True

    def update(self, crawl_id: str, *, pages_processed: Optional[int], current_depth: Optional[int], now: datetime) -> bool:
        entry = self._entries.get(crawl_id)
        if not entry or entry.progress.status.is_terminal:
            return False
        changes = {"last_update": now}
        if pages_processed is not None:
            changes["pages_processed"] = min(pages_processed, entry.progress.total_pages)
        if current_depth is not None:
            changes["current_depth"] = current_depth
        entry.progress = entry.progress.with_changes(**changes)
        return True

    def add_document(self, crawl_id: str, document: CrawledDocument) -> bool:
        entry = self._entries.get(crawl_id)
        if not entry or entry.progress.status.is_terminal:
            return False
        entry.documents.append(document)
        return True

    def evict_completed_overflow(self) -> List[str]:
        evicted: List[str] = []
        while len(self._completed_order) > self._max_completed_records:
            oldest = self._completed_order.popleft()
            if oldest in self._entries:
                del self._entries[oldest]
                evicted.append(oldest)
        return evicted

    def list_active(self) -> List[CrawlProgress]:
        return [e.progress for e in self._entries.values() if not e.progress.status.is_terminal]
