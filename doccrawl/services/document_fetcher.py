import logging
from typing import Optional

from bs4 import ParserRejectedMarkup

from doccrawl.domain.document import CrawledDocument
from doccrawl.domain.http_response import HttpResponse
from doccrawl.exceptions import DecodingError, TransportError
from doccrawl.services.classifier import DocumentClassifier, fallback_title
from doccrawl.services.html_text_extractor import HtmlTextExtractor
from doccrawl.services.http_service import HttpService

logger = logging.getLogger(__name__)


def _is_text_content_type(content_type: Optional[str]) -> bool:
    ct = (content_type or "").lower()
    # Supported: text/html, application/xhtml+xml, any text/*; missing header is accepted
    return ct == "" or ct.startswith("text/") or "application/xhtml+xml" in ct


class DocumentFetcher:
    """Retrieves a single location and turns it into a classified `CrawledDocument`.

    Raises `TransportError` for non-2xx responses and network failures, and
    `DecodingError` when the body is not text or the parser rejects the markup.
    The engine treats both as a skip.
    """

    def __init__(
        self,
        http_service: HttpService,
        classifier: Optional[DocumentClassifier] = None,
        text_extractor: Optional[HtmlTextExtractor] = None,
    ):
        self.http_service = http_service
        self.classifier = classifier or DocumentClassifier()
        self.text_extractor = text_extractor or HtmlTextExtractor()

    def fetch(self, url: str, user_agent: Optional[str] = None, depth: int = 0) -> CrawledDocument:
        response = self.http_service.fetch(url, user_agent=user_agent)
        if not response.is_success:
            raise TransportError(url, f"HTTP {response.status_code}", status_code=response.status_code)
        html = self.decode(response)
        return self.build_document(url, html, depth=depth)

    def decode(self, response: HttpResponse) -> str:
        if not _is_text_content_type(response.content_type):
            raise DecodingError(response.url, f"unsupported content type {response.content_type}")
        encoding = response.encoding or "utf-8"
        try:
            return response.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise DecodingError(response.url, f"cannot decode body as {encoding}: {e}") from e

    def build_document(self, url: str, html: str, depth: int = 0) -> CrawledDocument:
        try:
            soup = self.text_extractor.parse(html)
            title = self.text_extractor.extract_title(soup) or fallback_title(url)
            content = self.text_extractor.extract_from_soup(soup)
            metadata = self.classifier.classify(url, soup)
        except (ParserRejectedMarkup, AssertionError) as e:
            raise DecodingError(url, f"markup rejected by parser: {e}") from e
        return CrawledDocument(
            url=url,
            title=title,
            content=content,
            html=html,
            metadata=metadata,
            depth=depth,
        )
