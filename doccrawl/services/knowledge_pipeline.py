import logging
import threading
import time
from typing import Callable, Dict, Iterable, Optional

from doccrawl.domain.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES,
    DEFAULT_RATE_LIMIT,
    DEFAULT_USER_AGENT,
    CrawlConfig,
    CrawlConfigBuilder,
)
from doccrawl.domain.knowledge import FrameworkKnowledge
from doccrawl.domain.subject import Subject
from doccrawl.exceptions import DocCrawlError
from doccrawl.services.completion_waiter import CompletionWaiter
from doccrawl.services.crawl_engine import CrawlEngine
from doccrawl.services.knowledge_extractor import KnowledgeExtractor
from doccrawl.utils.url_utils import get_host

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class KnowledgePipeline:
    """Crawls a subject's documentation and stores the extracted knowledge.

    Subjects in a batch run one after another with a fixed pause between them,
    on top of the per-host pacing the engine already applies.
    """

    def __init__(
        self,
        engine: CrawlEngine,
        waiter: CompletionWaiter,
        extractor: KnowledgeExtractor,
        *,
        subject_delay: float = 2.0,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_pages: int = DEFAULT_MAX_PAGES,
        rate_limit: float = DEFAULT_RATE_LIMIT,
        user_agent: str = DEFAULT_USER_AGENT,
        sleep: Callable[[float], None] = time.sleep,
        thread_factory: Callable[..., threading.Thread] = threading.Thread,
    ):
        self.engine = engine
        self.waiter = waiter
        self.extractor = extractor
        self.subject_delay = subject_delay
        self.max_depth = max_depth
        self.max_pages = max_pages
        self.rate_limit = rate_limit
        self.user_agent = user_agent
        self._sleep = sleep
        self._thread_factory = thread_factory

    def config_for_subject(self, subject: Subject) -> CrawlConfig:
        allowed_hosts = subject.allowed_hosts or tuple(h for h in [get_host(subject.start_url)] if h)
        return (
            CrawlConfigBuilder(subject.start_url)
            .with_name(subject.name)
            .with_max_depth(subject.max_depth or self.max_depth)
            .with_max_pages(subject.max_pages or self.max_pages)
            .with_rate_limit(subject.rate_limit or self.rate_limit)
            .with_allowed_hosts(allowed_hosts)
            .with_path_patterns(subject.effective_path_patterns())
            .with_user_agent(self.user_agent)
            .build()
        )

    def crawl_and_store(self, subject: Subject) -> FrameworkKnowledge:
        """Crawl `subject`, wait for completion, then extract and store its knowledge.

        Raises InvalidConfiguration, the completion-wait errors, or StorageError.
        """
        crawl_id = self.engine.start_crawl(self.config_for_subject(subject))
        return self._finish(subject, crawl_id)

    def _finish(self, subject: Subject, crawl_id: str) -> FrameworkKnowledge:
        documents = self.waiter.wait(crawl_id)
        logger.info("Crawl %s for %s returned %s documents", crawl_id, subject.name, len(documents))
        return self.extractor.extract_and_store(subject.subject_id, documents)

    def submit(self, subject: Subject) -> str:
        """Start a crawl for `subject` and extract in the background once it finishes."""
        crawl_id = self.engine.start_crawl(self.config_for_subject(subject))
        thread = self._thread_factory(
            target=self._finish_quietly,
            args=(subject, crawl_id),
            name=f"extract-{crawl_id}",
            daemon=True,
        )
        thread.start()
        return crawl_id

    def _finish_quietly(self, subject: Subject, crawl_id: str) -> None:
        try:
            self._finish(subject, crawl_id)
        except DocCrawlError as e:
            logger.warning("Knowledge pass for %s (crawl %s) did not finish: %s", subject.name, crawl_id, e)
        except Exception:
            logger.exception("Knowledge pass for %s (crawl %s) failed", subject.name, crawl_id)

    def crawl_and_store_batch(
        self,
        subjects: Iterable[Subject],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Dict[str, FrameworkKnowledge]:
        """Run `crawl_and_store` for each subject in order; failures are logged and skipped.

        `progress_callback(fraction, message)` is called before and after every subject.
        Returns the stored knowledge of the subjects that succeeded, by name.
        """
        subjects = list(subjects)
        total = len(subjects)
        results: Dict[str, FrameworkKnowledge] = {}

        for index, subject in enumerate(subjects):
            if index > 0 and self.subject_delay > 0:
                self._sleep(self.subject_delay)

            self._report(progress_callback, index / total, f"Crawling {subject.name}...")
            try:
                results[subject.name] = self.crawl_and_store(subject)
                message = f"Completed {subject.name}"
            except Exception as e:
                logger.error("Failed to crawl %s: %s", subject.name, e, exc_info=True)
                message = f"Failed {subject.name}: {e}"
            self._report(progress_callback, (index + 1) / total, message)

        logger.info("Batch finished: %s of %s subjects stored", len(results), total)
        return results

    def start_all(self, subjects: Iterable[Subject]) -> Dict[str, str]:
        """Start one crawl per subject without waiting; returns crawl ids by subject name."""
        started: Dict[str, str] = {}
        for index, subject in enumerate(subjects):
            if index > 0 and self.subject_delay > 0:
                self._sleep(self.subject_delay)
            try:
                started[subject.name] = self.engine.start_crawl(self.config_for_subject(subject))
            except DocCrawlError as e:
                logger.error("Could not start crawl for %s: %s", subject.name, e)
        return started

    def _report(self, callback: Optional[ProgressCallback], fraction: float, message: str) -> None:
        if callback is None:
            return
        try:
            callback(fraction, message)
        except Exception:
            logger.exception("Progress callback raised for %r", message)
