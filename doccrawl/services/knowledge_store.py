"""Storage contract for extracted knowledge records."""

import threading
from typing import Dict, List, Optional, Protocol

from doccrawl.domain.knowledge import FrameworkKnowledge


class KnowledgeStore(Protocol):
    """The single write operation the extraction pipeline depends on."""

    def save(self, record: FrameworkKnowledge) -> None:
        ...


class InMemoryKnowledgeStore:
    """Keeps the latest record per subject; used by the API process and tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[str, FrameworkKnowledge] = {}

    def save(self, record: FrameworkKnowledge) -> None:
        with self._lock:
            self._records[record.subject_id] = record

    def get(self, subject_id: str) -> Optional[FrameworkKnowledge]:
        with self._lock:
            return self._records.get(subject_id)

    def list_subjects(self) -> List[str]:
        with self._lock:
            return sorted(self._records)
