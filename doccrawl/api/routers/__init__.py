"""API router factory functions."""
from .crawls import create_crawls_router
from .subjects import create_subjects_router
from .systems import create_systems_router

__all__ = [
    "create_crawls_router",
    "create_subjects_router",
    "create_systems_router",
]
