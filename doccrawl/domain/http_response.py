from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Raw transport result: status, undecoded body and the headers needed to decode it."""
    url: str
    status_code: int
    content: bytes
    content_type: Optional[str] = None
    encoding: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
