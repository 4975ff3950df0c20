"""Turns a batch of crawled documents into one `FrameworkKnowledge` record.

The scanners are heuristics over extracted text and markup: declaration-like
lines become capabilities, a fixed vocabulary of design-pattern names is
matched in tutorials, and code blocks become examples. Extraction is pure:
the same documents always produce the same record contents.
"""
import logging
import re
from typing import Callable, Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup

from doccrawl.domain.document import CrawledDocument, DocumentType
from doccrawl.domain.knowledge import (
    MIN_CODE_LENGTH,
    CodeExample,
    ComplexityTier,
    FrameworkCapability,
    FrameworkKnowledge,
)
from doccrawl.exceptions import StorageError

logger = logging.getLogger(__name__)

DECLARATION_KEYWORDS = ("func", "class", "struct", "protocol", "enum")

PATTERN_VOCABULARY = (
    "MVVM", "MVC", "Repository", "Singleton", "Factory",
    "Observer", "Delegate", "Strategy", "Coordinator",
)

# lines searched on each side of a declaration for its doc comment
DESCRIPTION_WINDOW = 3


def _declaration_regex(keywords: Sequence[str]) -> "re.Pattern":
    alternatives = "|".join(re.escape(k) for k in keywords)
    # the name may not itself be a keyword ("class func make" declares make)
    return re.compile(
        rf"\b(?:{alternatives})\s+(?!(?:{alternatives})\b)([A-Za-z_][A-Za-z0-9_]*)(.*)$"
    )


def _comment_text(line: str) -> Optional[str]:
    stripped = line.strip()
    if not stripped.startswith("//"):
        return None
    return stripped.lstrip("/").strip()


class KnowledgeExtractor:
    def __init__(
        self,
        knowledge_store=None,
        *,
        declaration_keywords: Sequence[str] = DECLARATION_KEYWORDS,
        pattern_vocabulary: Sequence[str] = PATTERN_VOCABULARY,
        default_code_language: str = "swift",
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self.knowledge_store = knowledge_store
        self._declaration = _declaration_regex(declaration_keywords)
        self._patterns = [(name, re.compile(rf"\b{re.escape(name)}\b")) for name in pattern_vocabulary]
        self.default_code_language = default_code_language
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract(self, subject_id: str, documents: Iterable[CrawledDocument]) -> FrameworkKnowledge:
        capabilities: List[FrameworkCapability] = []
        seen_capabilities = set()
        pattern_names = set()
        examples: List[CodeExample] = []

        for document in documents:
            doc_type = document.metadata.document_type
            if doc_type is DocumentType.API_REFERENCE:
                for capability in self.extract_capabilities(document):
                    if capability.name in seen_capabilities:
                        continue
                    seen_capabilities.add(capability.name)
                    capabilities.append(capability)
            if doc_type is DocumentType.TUTORIAL:
                pattern_names.update(self.extract_pattern_names(document))
            examples.extend(self.extract_code_examples(document))

        knowledge = FrameworkKnowledge(
            subject_id=subject_id,
            capabilities=capabilities,
            pattern_names=pattern_names,
            examples=examples,
        )
        logger.info(
            "Extracted %s capabilities, %s patterns, %s examples for %s",
            len(capabilities), len(pattern_names), len(examples), subject_id,
        )
        return knowledge

    def extract_and_store(self, subject_id: str, documents: Iterable[CrawledDocument]) -> FrameworkKnowledge:
        """Extract a record and hand it to the knowledge store.

        A store failure surfaces as `StorageError`; the crawl itself is unaffected.
        """
        if self.knowledge_store is None:
            raise StorageError(subject_id, RuntimeError("no knowledge store configured"))
        knowledge = self.extract(subject_id, documents)
        try:
            self.knowledge_store.save(knowledge)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(subject_id, e) from e
        return knowledge

    def extract_capabilities(self, document: CrawledDocument) -> List[FrameworkCapability]:
        capabilities = []
        lines = document.content.splitlines()
        for index, line in enumerate(lines):
            match = self._declaration.search(line)
            if not match:
                continue
            name, rest = match.group(1), match.group(2)
            capabilities.append(
                FrameworkCapability(
                    name=name,
                    description=self._description_near(lines, index),
                    endpoints=(name,),
                    complexity=self._complexity(line, rest),
                )
            )
        return capabilities

    def _description_near(self, lines: List[str], index: int) -> str:
        start = max(0, index - DESCRIPTION_WINDOW)
        end = min(len(lines), index + DESCRIPTION_WINDOW)
        parts = [_comment_text(lines[i]) for i in range(start, end)]
        return " ".join(p for p in parts if p)

    def _complexity(self, line: str, rest: str) -> ComplexityTier:
        if rest.lstrip().startswith("<") or re.search(r"\basync\b", line):
            return ComplexityTier.ADVANCED
        return ComplexityTier.INTERMEDIATE

    def extract_pattern_names(self, document: CrawledDocument) -> List[str]:
        return [name for name, regex in self._patterns if regex.search(document.content)]

    def extract_code_examples(self, document: CrawledDocument) -> List[CodeExample]:
        if not document.html:
            return []
        soup = self._soup_factory(document.html)
        language = document.metadata.code_language or self.default_code_language
        examples = []
        seen = set()
        for block in soup.find_all(["code", "pre"]):
            # a <pre><code> pair is one snippet; take it from the <code>
            if block.name == "pre" and block.find("code") is not None:
                continue
            code = block.get_text().strip()
            if len(code) < MIN_CODE_LENGTH or code in seen:
                continue
            seen.add(code)
            examples.append(
                CodeExample(
                    title=f"Code Example from {document.title}",
                    code=code,
                    language=language,
                    description=f"Extracted from {document.url}",
                    source_url=document.url,
                )
            )
        return examples
