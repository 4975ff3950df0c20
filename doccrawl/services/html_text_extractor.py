import logging
import re
from typing import Callable, Optional, Protocol

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_HORIZONTAL_WS = re.compile(r"[ \t\r\f\v\u00a0]+")

_BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "figcaption", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header",
    "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table", "td",
    "th", "tr", "ul",
]


class TextExtractor(Protocol):
    def extract(self, html: Optional[str]) -> str: ...


def collapse_whitespace(text: str) -> str:
    """Collapse runs of spaces inside each line and drop blank lines.

    Line breaks are kept so line-oriented scanners (declarations, comments)
    still see one statement per line.
    """
    lines = (_HORIZONTAL_WS.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


class HtmlTextExtractor:
    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def parse(self, html: str) -> BeautifulSoup:
        return self._soup_factory(html)

    def extract(self, html: Optional[str]) -> str:
        if not html:
            return ""
        return self.extract_from_soup(self._soup_factory(html))

    def extract_from_soup(self, soup: BeautifulSoup) -> str:
        # Work on a copy; callers keep using the original tree for titles and links
        soup = self._soup_factory(str(soup))
        for element in soup.find_all(["script", "style", "noscript", "template", "svg"]):
            element.decompose()
        for br in soup.find_all("br"):
            br.replace_with("\n")
        # Inline markup (code spans, links) stays on its line; blocks start new ones
        for element in soup.find_all(_BLOCK_TAGS):
            element.insert_before("\n")
            element.insert_after("\n")
        return collapse_whitespace(soup.get_text())

    def extract_title(self, soup: BeautifulSoup) -> Optional[str]:
        if soup.title is None:
            return None
        title = collapse_whitespace(soup.title.get_text()).replace("\n", " ").strip()
        return title or None
