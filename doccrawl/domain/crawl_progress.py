from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class CrawlStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({CrawlStatus.COMPLETED, CrawlStatus.FAILED, CrawlStatus.CANCELLED})

# pause/resume is the only pair that may go back and forth
_ALLOWED_TRANSITIONS = {
    CrawlStatus.PENDING: frozenset({CrawlStatus.RUNNING, CrawlStatus.FAILED, CrawlStatus.CANCELLED}),
    CrawlStatus.RUNNING: frozenset({CrawlStatus.PAUSED, CrawlStatus.COMPLETED, CrawlStatus.FAILED, CrawlStatus.CANCELLED}),
    CrawlStatus.PAUSED: frozenset({CrawlStatus.RUNNING, CrawlStatus.FAILED, CrawlStatus.CANCELLED}),
    CrawlStatus.COMPLETED: frozenset(),
    CrawlStatus.FAILED: frozenset(),
    CrawlStatus.CANCELLED: frozenset(),
}


def can_transition(current: CrawlStatus, new: CrawlStatus) -> bool:
    return new in _ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class CrawlProgress:
    """Snapshot of one crawl's status and counters.

    The tracker replaces its stored snapshot on every update, so pollers can
    hold on to the object they received without seeing it change.
    """

    crawl_id: str
    total_pages: int
    started_at: datetime
    last_update: datetime
    pages_processed: int = 0
    current_depth: int = 0
    status: CrawlStatus = CrawlStatus.PENDING
    error: Optional[str] = None

    @property
    def fraction(self) -> float:
        if self.total_pages <= 0:
            return 0.0
        return self.pages_processed / self.total_pages

    def with_changes(self, **changes) -> "CrawlProgress":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "crawl_id": self.crawl_id,
            "pages_processed": self.pages_processed,
            "total_pages": self.total_pages,
            "current_depth": self.current_depth,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "last_update": self.last_update.isoformat(),
            "error": self.error,
        }
