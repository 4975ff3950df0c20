from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Subject:
    """A documentation subject (typically a framework) that can be crawled as a unit.

    When `path_patterns` is empty the crawl is restricted to the subject's
    documentation and tutorial paths, derived from its slug.
    """

    name: str
    start_url: str
    allowed_hosts: Tuple[str, ...] = ()
    path_patterns: Tuple[str, ...] = ()
    category: Optional[str] = None
    max_depth: Optional[int] = None
    max_pages: Optional[int] = None
    rate_limit: Optional[float] = None
    source_path: Optional[str] = field(default=None, compare=False)

    @property
    def slug(self) -> str:
        return self.name.lower().replace(" ", "")

    @property
    def subject_id(self) -> str:
        return self.slug

    def effective_path_patterns(self) -> Tuple[str, ...]:
        if self.path_patterns:
            return tuple(self.path_patterns)
        return (f"/documentation/{self.slug}", f"/tutorials/{self.slug}")
