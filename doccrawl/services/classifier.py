from typing import Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from doccrawl.domain.document import DocumentMetadata, DocumentType

# Checked in order; the first path marker found decides the type.
_PATH_MARKERS = (
    ("/documentation/", DocumentType.API_REFERENCE),
    ("/tutorials/", DocumentType.TUTORIAL),
    ("/videos/", DocumentType.SESSION_RECORDING),
    ("/sample-code/", DocumentType.SAMPLE_CODE),
    ("/guides/", DocumentType.GUIDE),
    ("/articles/", DocumentType.GUIDE),
)

_LANGUAGE_CLASS_PREFIXES = ("language-", "lang-")


def classify_path(path: str) -> DocumentType:
    for marker, doc_type in _PATH_MARKERS:
        if marker in path:
            return doc_type
    return DocumentType.UNKNOWN


def _path_segments(path: str) -> list:
    return [unquote(s) for s in path.split("/") if s]


def fallback_title(url: str) -> str:
    """Last path segment, or the host for a bare site root."""
    parsed = urlparse(url)
    segments = _path_segments(parsed.path)
    if segments:
        return segments[-1]
    return parsed.hostname or url


class DocumentClassifier:
    """Derives document type and lightweight metadata from URL shape and markup."""

    def __init__(self, default_code_language: Optional[str] = None):
        self.default_code_language = default_code_language

    def classify(self, url: str, soup: Optional[BeautifulSoup] = None) -> DocumentMetadata:
        path = urlparse(url).path
        doc_type = classify_path(path)

        framework = None
        api_kind = None
        segments = _path_segments(path)
        if "documentation" in segments:
            idx = segments.index("documentation")
            if idx + 1 < len(segments):
                framework = segments[idx + 1]
            if doc_type is DocumentType.API_REFERENCE and idx + 2 < len(segments):
                api_kind = segments[idx + 2]

        code_language = self._detect_code_language(soup) if soup is not None else None
        return DocumentMetadata(
            document_type=doc_type,
            framework=framework,
            api_kind=api_kind,
            code_language=code_language or self.default_code_language,
        )

    def _detect_code_language(self, soup: BeautifulSoup) -> Optional[str]:
        for block in soup.find_all(["code", "pre"]):
            declared = block.get("data-language")
            if declared:
                return declared.strip().lower()
            for css_class in block.get("class") or []:
                for prefix in _LANGUAGE_CLASS_PREFIXES:
                    if css_class.startswith(prefix) and len(css_class) > len(prefix):
                        return css_class[len(prefix):].lower()
        return None
