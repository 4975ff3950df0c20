from .tracker import InMemoryProgressTracker

__all__ = ["InMemoryProgressTracker"]
