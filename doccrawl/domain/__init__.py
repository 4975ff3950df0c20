"""Domain objects for DocCrawl - explicit re-exports to satisfy linters."""
from .config import CrawlConfig as CrawlConfig
from .config import CrawlConfigBuilder as CrawlConfigBuilder
from .crawl_progress import CrawlProgress as CrawlProgress
from .crawl_progress import CrawlStatus as CrawlStatus
from .document import CrawledDocument as CrawledDocument
from .document import DocumentMetadata as DocumentMetadata
from .document import DocumentType as DocumentType
from .knowledge import CodeExample as CodeExample
from .knowledge import ComplexityTier as ComplexityTier
from .knowledge import FrameworkCapability as FrameworkCapability
from .knowledge import FrameworkKnowledge as FrameworkKnowledge
from .subject import Subject as Subject

__all__ = [
    "CrawlConfig",
    "CrawlConfigBuilder",
    "CrawlProgress",
    "CrawlStatus",
    "CrawledDocument",
    "DocumentMetadata",
    "DocumentType",
    "CodeExample",
    "ComplexityTier",
    "FrameworkCapability",
    "FrameworkKnowledge",
    "Subject",
]
