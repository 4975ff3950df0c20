from fastapi import FastAPI

from doccrawl.api.routers import create_crawls_router, create_subjects_router, create_systems_router


def create_app(container) -> FastAPI:
    """Build the control API from the services held by `container`."""
    app = FastAPI(title="DocCrawl", description="Documentation crawler control API")
    env = container.config()

    crawl_defaults = {
        "max_depth": env.get("DEFAULT_MAX_DEPTH"),
        "max_pages": env.get("DEFAULT_MAX_PAGES"),
        "rate_limit": env.get("DEFAULT_RATE_LIMIT"),
        "user_agent": env.get("USER_AGENT"),
    }

    app.include_router(create_systems_router(env))
    app.include_router(create_crawls_router(container.crawl_engine(), defaults=crawl_defaults))
    app.include_router(
        create_subjects_router(
            container.subject_catalog(),
            container.knowledge_pipeline(),
            container.knowledge_store(),
        )
    )
    return app
