import logging
import threading
from typing import Callable, List, Optional

from doccrawl.domain.config import CrawlConfig, validate_config
from doccrawl.domain.crawl_progress import CrawlProgress, CrawlStatus
from doccrawl.domain.document import CrawledDocument
from doccrawl.domain.frontier import CrawlFrontier
from doccrawl.exceptions import ExclusionRuleDisallowed, RateLimitExceeded, TransportError
from doccrawl.services.document_fetcher import DocumentFetcher
from doccrawl.services.link_extractor import LinkExtractor
from doccrawl.services.progress_tracker import InMemoryProgressTracker
from doccrawl.services.rate_gate import RateGate
from doccrawl.services.robots_service import RobotsService
from doccrawl.utils.url_utils import get_host

logger = logging.getLogger(__name__)


class CrawlEngine:
    """Runs breadth-first crawls bounded by depth and page budgets.

    Each crawl owns its frontier and visited set inside its own thread. The
    progress tracker, robots rules and rate gate are shared by all crawls of
    this engine and are each guarded by their own lock.

    Cancellation and pause are cooperative: the loop looks at the crawl's
    status before every dequeue, so an in-flight fetch always completes.
    """

    def __init__(
        self,
        *,
        progress_tracker: InMemoryProgressTracker,
        robots_service: RobotsService,
        rate_gate: RateGate,
        document_fetcher: DocumentFetcher,
        link_extractor: LinkExtractor,
        thread_factory: Callable[..., threading.Thread] = threading.Thread,
    ):
        self.progress_tracker = progress_tracker
        self.robots_service = robots_service
        self.rate_gate = rate_gate
        self.document_fetcher = document_fetcher
        self.link_extractor = link_extractor
        self._thread_factory = thread_factory

    def _begin(self, config: CrawlConfig) -> None:
        validate_config(config)
        self.progress_tracker.register(config.id, config.max_pages)
        self.progress_tracker.transition(config.id, CrawlStatus.RUNNING)

    def start_crawl(self, config: CrawlConfig) -> str:
        """Validate `config` and crawl it on a background thread. Returns the crawl id."""
        self._begin(config)
        thread = self._thread_factory(
            target=self._run_to_completion,
            args=(config,),
            name=f"crawl-{config.id}",
            daemon=True,
        )
        thread.start()
        logger.info("Started crawl %s (%s) at %s", config.id, config.name or "unnamed", config.start_url)
        return config.id

    def run_crawl(self, config: CrawlConfig) -> CrawlProgress:
        """Validate `config` and crawl it on the calling thread; returns the final progress."""
        self._begin(config)
        self._run_to_completion(config)
        return self.progress_tracker.get(config.id)

    def _run_to_completion(self, config: CrawlConfig) -> None:
        try:
            processed = self._crawl_loop(config)
        except Exception as e:
            logger.exception("Crawl %s failed", config.id)
            self.progress_tracker.transition(config.id, CrawlStatus.FAILED, error=str(e))
            return
        # a pause requested during the last fetch holds completion until resumed
        self.progress_tracker.wait_while_paused(config.id)
        if self.progress_tracker.transition(config.id, CrawlStatus.COMPLETED):
            logger.info("Crawl %s completed with %s pages", config.id, processed)

    def _crawl_loop(self, config: CrawlConfig) -> int:
        crawl_id = config.id
        frontier = CrawlFrontier(config.start_url)
        processed = 0

        while frontier and processed < config.max_pages:
            status = self.progress_tracker.wait_while_paused(crawl_id)
            if status is not CrawlStatus.RUNNING:
                logger.info("Crawl %s stopping with %s URLs pending: status is %s", crawl_id, len(frontier), getattr(status, "value", status))
                frontier.clear()
                break

            url, depth = frontier.pop()
            if frontier.is_visited(url):
                logger.debug("Skipping (visited) %s", url)
                continue
            if depth > config.max_depth:
                logger.debug("Skipping (max depth reached) %s at depth %s", url, depth)
                continue
            frontier.mark_visited(url)

            document = self._fetch_document(url, depth, config)
            if document is None:
                continue

            self.progress_tracker.add_document(crawl_id, document)
            processed += 1
            self.progress_tracker.update(crawl_id, pages_processed=processed, current_depth=depth)

            if depth < config.max_depth:
                self._enqueue_links(frontier, document, depth, config)

        return processed

    def _fetch_document(self, url: str, depth: int, config: CrawlConfig) -> Optional[CrawledDocument]:
        """Fetch one location; every per-document failure is logged and yields None."""
        try:
            self.robots_service.ensure_allowed(url, config.user_agent, config.respect_robots)
            self.rate_gate.acquire(get_host(url), config.rate_limit)
            document = self.document_fetcher.fetch(url, user_agent=config.user_agent, depth=depth)
        except ExclusionRuleDisallowed:
            logger.info("Skipping (robots) %s", url)
            return None
        except RateLimitExceeded as e:
            logger.warning("Skipping (rate limited) %s: %s", url, e)
            return None
        except TransportError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return None

        logger.info("Fetched %s (depth %s, %s)", url, depth, document.metadata.document_type.value)
        return document

    def _enqueue_links(self, frontier: CrawlFrontier, document: CrawledDocument, depth: int, config: CrawlConfig) -> None:
        links = self.link_extractor.extract_allowed_links(
            document.url,
            document.html,
            allowed_hosts=config.allowed_hosts,
            path_patterns=config.path_patterns,
        )
        queued = sum(1 for link in links if frontier.push(link, depth + 1))
        logger.debug("Queued %s of %s links from %s", queued, len(links), document.url)

    def get_progress(self, crawl_id: str) -> Optional[CrawlProgress]:
        return self.progress_tracker.get(crawl_id)

    def get_documents(self, crawl_id: str) -> List[CrawledDocument]:
        return self.progress_tracker.get_documents(crawl_id)

    def cancel_crawl(self, crawl_id: str) -> bool:
        return self.progress_tracker.transition(crawl_id, CrawlStatus.CANCELLED)

    def pause_crawl(self, crawl_id: str) -> bool:
        return self.progress_tracker.transition(crawl_id, CrawlStatus.PAUSED)

    def resume_crawl(self, crawl_id: str) -> bool:
        return self.progress_tracker.transition(crawl_id, CrawlStatus.RUNNING)

    def list_active(self) -> List[CrawlProgress]:
        return self.progress_tracker.list_active()
