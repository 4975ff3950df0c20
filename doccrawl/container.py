"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from doccrawl import config as env
from doccrawl.services.classifier import DocumentClassifier
from doccrawl.services.completion_waiter import CompletionWaiter
from doccrawl.services.crawl_engine import CrawlEngine
from doccrawl.services.document_fetcher import DocumentFetcher
from doccrawl.services.html_text_extractor import HtmlTextExtractor
from doccrawl.services.http_service import HttpService
from doccrawl.services.knowledge_extractor import KnowledgeExtractor
from doccrawl.services.knowledge_pipeline import KnowledgePipeline
from doccrawl.services.knowledge_store import InMemoryKnowledgeStore
from doccrawl.services.link_extractor import LinkExtractor
from doccrawl.services.progress_tracker import InMemoryProgressTracker
from doccrawl.services.rate_gate import RateGate
from doccrawl.services.robots_cache import RobotsCache
from doccrawl.services.robots_fetcher import RobotsFetcher
from doccrawl.services.robots_service import RobotsService
from doccrawl.services.subject_catalog import SubjectCatalog


# Environment variables used by the container (read via `doccrawl.config` helpers).
#
# Notes:
# - Types are enforced by the helper used (`get_int_env`, `get_float_env`, etc.).
# - Defaults shown here are the effective defaults used when the env var is unset.
# - These are injected into services via `config = providers.Configuration(default=ENV)`.
#
# USER_AGENT (str, default: "DocCrawl/1.0")
#   Agent identifier for page requests, robots.txt fetches and robots rule matching.
#
# HTTP_TIMEOUT (float seconds, default: 30)
#   Per-request timeout for page fetches. robots.txt fetches use at most 10s.
#
# DEFAULT_MAX_DEPTH / DEFAULT_MAX_PAGES / DEFAULT_RATE_LIMIT (default: 3 / 500 / 1.0)
#   Budget and requests-per-second applied to subject crawls that do not set their own.
#
# DOCCRAWL_RATE_GATE_MAX_WAIT (float seconds | optional)
#   If set, a request whose host slot is further away than this is skipped
#   (RateLimitExceeded) instead of waiting.
#
# DOCCRAWL_ROBOTS_CACHE_MAX_SIZE (int, default: 2048)
#   Max number of hosts kept in the robots.txt cache (LRU eviction).
#
# DOCCRAWL_ROBOTS_CACHE_TTL_SECONDS (int seconds, default: 3600)
#   TTL for robots.txt cache entries.
#
# DOCCRAWL_MAX_COMPLETED_CRAWLS (int, default: 1000)
#   Finished crawls (and their documents) kept in memory, oldest evicted first.
#
# DOCCRAWL_WAIT_TIMEOUT / DOCCRAWL_POLL_INTERVAL (float seconds, default: 300 / 1.0)
#   Completion wait budget and polling interval used by the knowledge pipeline.
#
# DOCCRAWL_SUBJECT_DELAY (float seconds, default: 2.0)
#   Pause between subjects in batch runs.
#
# DOCCRAWL_DEFAULT_CODE_LANGUAGE (str, default: "swift")
#   Language recorded for code examples when the markup does not declare one.
#
# DOCCRAWL_SUBJECTS_PATH (str, default: "configs")
#   YAML file or directory of YAML files describing crawlable subjects.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.HTTP_TIMEOUT,
    "DEFAULT_MAX_DEPTH": env.DEFAULT_MAX_DEPTH,
    "DEFAULT_MAX_PAGES": env.DEFAULT_MAX_PAGES,
    "DEFAULT_RATE_LIMIT": env.DEFAULT_RATE_LIMIT,
    "DOCCRAWL_RATE_GATE_MAX_WAIT": env.get_optional_float_env("DOCCRAWL_RATE_GATE_MAX_WAIT"),
    "DOCCRAWL_ROBOTS_CACHE_MAX_SIZE": env.get_int_env("DOCCRAWL_ROBOTS_CACHE_MAX_SIZE", 2048),
    "DOCCRAWL_ROBOTS_CACHE_TTL_SECONDS": env.get_int_env("DOCCRAWL_ROBOTS_CACHE_TTL_SECONDS", 3600),
    "DOCCRAWL_MAX_COMPLETED_CRAWLS": env.get_int_env("DOCCRAWL_MAX_COMPLETED_CRAWLS", 1000),
    "DOCCRAWL_WAIT_TIMEOUT": env.get_float_env("DOCCRAWL_WAIT_TIMEOUT", 300.0),
    "DOCCRAWL_POLL_INTERVAL": env.get_float_env("DOCCRAWL_POLL_INTERVAL", 1.0),
    "DOCCRAWL_SUBJECT_DELAY": env.get_float_env("DOCCRAWL_SUBJECT_DELAY", 2.0),
    "DOCCRAWL_DEFAULT_CODE_LANGUAGE": env.get_str_env("DOCCRAWL_DEFAULT_CODE_LANGUAGE", "swift"),
    "DOCCRAWL_SUBJECTS_PATH": env.get_str_env("DOCCRAWL_SUBJECTS_PATH", "configs"),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the DocCrawl application."""

    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(float),
    )

    robots_cache = providers.Singleton(
        RobotsCache,
        max_size=config.DOCCRAWL_ROBOTS_CACHE_MAX_SIZE.as_(int),
        ttl_seconds=config.DOCCRAWL_ROBOTS_CACHE_TTL_SECONDS.as_(int),
    )

    robots_fetcher = providers.Singleton(
        RobotsFetcher,
        http_service=http_service,
    )

    robots_service = providers.Singleton(
        RobotsService,
        http_service=http_service,
        robots_fetcher=robots_fetcher,
        cache=robots_cache,
    )

    rate_gate = providers.Singleton(
        RateGate,
        max_wait=config.DOCCRAWL_RATE_GATE_MAX_WAIT,
    )

    classifier = providers.Singleton(DocumentClassifier)

    text_extractor = providers.Singleton(HtmlTextExtractor)

    document_fetcher = providers.Singleton(
        DocumentFetcher,
        http_service=http_service,
        classifier=classifier,
        text_extractor=text_extractor,
    )

    link_extractor = providers.Singleton(LinkExtractor)

    progress_tracker = providers.Singleton(
        InMemoryProgressTracker,
        max_completed_records=config.DOCCRAWL_MAX_COMPLETED_CRAWLS.as_(int),
    )

    crawl_engine = providers.Singleton(
        CrawlEngine,
        progress_tracker=progress_tracker,
        robots_service=robots_service,
        rate_gate=rate_gate,
        document_fetcher=document_fetcher,
        link_extractor=link_extractor,
    )

    completion_waiter = providers.Singleton(
        CompletionWaiter,
        engine=crawl_engine,
        timeout=config.DOCCRAWL_WAIT_TIMEOUT.as_(float),
        poll_interval=config.DOCCRAWL_POLL_INTERVAL.as_(float),
    )

    knowledge_store = providers.Singleton(InMemoryKnowledgeStore)

    knowledge_extractor = providers.Singleton(
        KnowledgeExtractor,
        knowledge_store=knowledge_store,
        default_code_language=config.DOCCRAWL_DEFAULT_CODE_LANGUAGE.as_(str),
    )

    knowledge_pipeline = providers.Singleton(
        KnowledgePipeline,
        engine=crawl_engine,
        waiter=completion_waiter,
        extractor=knowledge_extractor,
        subject_delay=config.DOCCRAWL_SUBJECT_DELAY.as_(float),
        max_depth=config.DEFAULT_MAX_DEPTH.as_(int),
        max_pages=config.DEFAULT_MAX_PAGES.as_(int),
        rate_limit=config.DEFAULT_RATE_LIMIT.as_(float),
        user_agent=config.USER_AGENT.as_(str),
    )

    subject_catalog = providers.Singleton(
        SubjectCatalog,
        path=config.DOCCRAWL_SUBJECTS_PATH.as_(str),
    )
