from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class DocumentType(str, Enum):
    API_REFERENCE = "api_reference"
    TUTORIAL = "tutorial"
    GUIDE = "guide"
    SAMPLE_CODE = "sample_code"
    SESSION_RECORDING = "session_recording"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DocumentMetadata:
    """Derived facts about a document. Type defaults to UNKNOWN."""

    document_type: DocumentType = DocumentType.UNKNOWN
    framework: Optional[str] = None
    api_kind: Optional[str] = None
    code_language: Optional[str] = None


@dataclass(frozen=True)
class CrawledDocument:
    url: str
    title: str
    content: str
    html: str
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    depth: int = 0
    crawled_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __repr__(self):
        return f"<CrawledDocument url={self.url} type={self.metadata.document_type.value}>"

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "depth": self.depth,
            "document_type": self.metadata.document_type.value,
            "framework": self.metadata.framework,
            "crawled_at": self.crawled_at.isoformat(),
        }
