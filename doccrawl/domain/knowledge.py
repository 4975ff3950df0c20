from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Tuple

MIN_CODE_LENGTH = 20


class ComplexityTier(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


@dataclass(frozen=True)
class FrameworkCapability:
    name: str
    description: str = ""
    endpoints: Tuple[str, ...] = ()
    complexity: ComplexityTier = ComplexityTier.INTERMEDIATE

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("capability name must be non-empty")
        object.__setattr__(self, "endpoints", tuple(self.endpoints))


@dataclass(frozen=True)
class CodeExample:
    title: str
    code: str
    language: str
    description: str
    source_url: str

    def __post_init__(self):
        if len(self.code) < MIN_CODE_LENGTH:
            raise ValueError(f"code example shorter than {MIN_CODE_LENGTH} characters")


@dataclass(frozen=True)
class FrameworkKnowledge:
    """Aggregated extraction result for one subject."""

    subject_id: str
    capabilities: Tuple[FrameworkCapability, ...] = ()
    pattern_names: FrozenSet[str] = frozenset()
    examples: Tuple[CodeExample, ...] = ()
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "capabilities", tuple(self.capabilities))
        object.__setattr__(self, "pattern_names", frozenset(self.pattern_names))
        object.__setattr__(self, "examples", tuple(self.examples))

    def __repr__(self):
        return (
            f"<FrameworkKnowledge subject={self.subject_id} capabilities={len(self.capabilities)} "
            f"patterns={sorted(self.pattern_names)} examples={len(self.examples)}>"
        )
