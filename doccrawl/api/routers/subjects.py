import logging

from fastapi import APIRouter, HTTPException

from doccrawl.exceptions import InvalidConfiguration
from doccrawl.services.knowledge_formatter import knowledge_tags, render_markdown
from doccrawl.services.knowledge_pipeline import KnowledgePipeline
from doccrawl.services.subject_catalog import SubjectCatalog

logger = logging.getLogger(__name__)


def create_subjects_router(subject_catalog: SubjectCatalog, pipeline: KnowledgePipeline, knowledge_store):
    router = APIRouter(prefix="/subjects", tags=["Subjects"])

    def _subject_or_404(name: str):
        try:
            subject = subject_catalog.get(name)
        except Exception:
            logger.exception("Could not look up subject %s", name)
            subject = None
        if subject is None:
            raise HTTPException(status_code=404, detail="subject not found")
        return subject

    @router.get("")
    def list_subjects():
        return {
            "subjects": [
                {"name": s.name, "subject_id": s.subject_id, "start_url": s.start_url, "category": s.category}
                for s in subject_catalog.list_subjects()
            ]
        }

    @router.post("/{name}/crawl", status_code=202)
    def crawl_subject(name: str):
        subject = _subject_or_404(name)
        try:
            crawl_id = pipeline.submit(subject)
        except InvalidConfiguration as e:
            raise HTTPException(status_code=400, detail=e.reason)
        return {"status": "started", "subject": subject.name, "crawl_id": crawl_id}

    @router.get("/{name}/knowledge")
    def get_knowledge(name: str):
        subject = _subject_or_404(name)
        knowledge = knowledge_store.get(subject.subject_id)
        if knowledge is None:
            raise HTTPException(status_code=404, detail="no knowledge stored for subject")
        return {
            "subject_id": knowledge.subject_id,
            "extracted_at": knowledge.extracted_at.isoformat(),
            "capabilities": len(knowledge.capabilities),
            "patterns": sorted(knowledge.pattern_names),
            "examples": len(knowledge.examples),
            "tags": knowledge_tags(knowledge, subject),
            "markdown": render_markdown(knowledge, subject),
        }

    return router
