import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from doccrawl.domain.config import CrawlConfigBuilder
from doccrawl.exceptions import InvalidConfiguration
from doccrawl.services.crawl_engine import CrawlEngine

logger = logging.getLogger(__name__)


class CrawlRequest(BaseModel):
    start_url: str
    name: str = ""
    max_depth: Optional[int] = None
    max_pages: Optional[int] = None
    allowed_hosts: List[str] = []
    path_patterns: List[str] = []
    respect_robots: bool = True
    user_agent: Optional[str] = None
    rate_limit: Optional[float] = None


def create_crawls_router(engine: CrawlEngine, defaults: Optional[dict] = None):
    """Crawl control endpoints.

    `defaults` may carry max_depth, max_pages, rate_limit and user_agent used when
    a request leaves them out.
    """
    router = APIRouter(prefix="/crawls", tags=["Crawls"])
    defaults = defaults or {}

    def _pick(value, key):
        return value if value is not None else defaults.get(key)

    def _progress_or_404(crawl_id: str):
        progress = engine.get_progress(crawl_id)
        if progress is None:
            raise HTTPException(status_code=404, detail="crawl not found")
        return progress

    @router.post("", status_code=202)
    def start_crawl(req: CrawlRequest):
        builder = (
            CrawlConfigBuilder(req.start_url)
            .with_name(req.name)
            .with_allowed_hosts(req.allowed_hosts)
            .with_path_patterns(req.path_patterns)
            .with_respect_robots(req.respect_robots)
        )
        max_depth = _pick(req.max_depth, "max_depth")
        max_pages = _pick(req.max_pages, "max_pages")
        rate_limit = _pick(req.rate_limit, "rate_limit")
        user_agent = _pick(req.user_agent, "user_agent")
        if max_depth is not None:
            builder = builder.with_max_depth(max_depth)
        if max_pages is not None:
            builder = builder.with_max_pages(max_pages)
        if rate_limit is not None:
            builder = builder.with_rate_limit(rate_limit)
        if user_agent:
            builder = builder.with_user_agent(user_agent)

        try:
            crawl_id = engine.start_crawl(builder.build())
        except InvalidConfiguration as e:
            raise HTTPException(status_code=400, detail=e.reason)
        return {"status": "started", "crawl_id": crawl_id}

    @router.get("")
    def list_active_crawls():
        return {"active": [p.to_dict() for p in engine.list_active()]}

    @router.get("/{crawl_id}")
    def get_crawl(crawl_id: str):
        return _progress_or_404(crawl_id).to_dict()

    @router.get("/{crawl_id}/documents")
    def get_documents(crawl_id: str):
        _progress_or_404(crawl_id)
        documents = engine.get_documents(crawl_id)
        return {"crawl_id": crawl_id, "documents": [d.to_summary() for d in documents]}

    def _control(crawl_id: str, action, verb: str, status_word: str):
        progress = _progress_or_404(crawl_id)
        if not action(crawl_id):
            raise HTTPException(
                status_code=409,
                detail=f"cannot {verb} crawl in status {progress.status.value}",
            )
        return {"status": status_word, "crawl_id": crawl_id}

    @router.post("/{crawl_id}/cancel")
    def cancel_crawl(crawl_id: str):
        return _control(crawl_id, engine.cancel_crawl, "cancel", "cancelling")

    @router.post("/{crawl_id}/pause")
    def pause_crawl(crawl_id: str):
        return _control(crawl_id, engine.pause_crawl, "pause", "paused")

    @router.post("/{crawl_id}/resume")
    def resume_crawl(crawl_id: str):
        return _control(crawl_id, engine.resume_crawl, "resume", "running")

    return router
