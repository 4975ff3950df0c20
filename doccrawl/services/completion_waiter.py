import logging
import time
from typing import Callable, List, Optional

from doccrawl.domain.crawl_progress import CrawlStatus
from doccrawl.domain.document import CrawledDocument
from doccrawl.exceptions import CrawlCancelled, CrawlFailed, CrawlNotFound, CrawlTimeout

logger = logging.getLogger(__name__)


class CompletionWaiter:
    """Polls a crawl until it reaches a terminal status.

    The wait is bounded by its own wall-clock timeout because a stalled crawl
    may never reach a terminal status on its own.
    """

    def __init__(
        self,
        engine,
        *,
        timeout: float = 300.0,
        poll_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def wait(self, crawl_id: str, timeout: Optional[float] = None) -> List[CrawledDocument]:
        """Return the crawl's documents once it completes.

        Raises CrawlFailed, CrawlCancelled, CrawlTimeout or CrawlNotFound.
        """
        budget = self.timeout if timeout is None else timeout
        started = self._clock()
        while True:
            progress = self.engine.get_progress(crawl_id)
            if progress is None:
                raise CrawlNotFound(crawl_id)

            if progress.status is CrawlStatus.COMPLETED:
                return self.engine.get_documents(crawl_id)
            if progress.status is CrawlStatus.FAILED:
                raise CrawlFailed(crawl_id, progress.error)
            if progress.status is CrawlStatus.CANCELLED:
                raise CrawlCancelled(crawl_id)

            if self._clock() - started > budget:
                logger.warning("Gave up waiting for crawl %s after %ss (status %s)", crawl_id, budget, progress.status.value)
                raise CrawlTimeout(crawl_id, budget)
            self._sleep(self.poll_interval)
