from typing import List, Optional

from doccrawl.domain.knowledge import FrameworkKnowledge
from doccrawl.domain.subject import Subject

MAX_RENDERED_EXAMPLES = 5


def render_markdown(knowledge: FrameworkKnowledge, subject: Optional[Subject] = None) -> str:
    """Human-readable summary of a knowledge record."""
    title = subject.name if subject else knowledge.subject_id
    lines = [f"# {title}", ""]
    if subject and subject.category:
        lines += [f"Category: {subject.category}", ""]

    lines += ["## Capabilities", ""]
    for capability in knowledge.capabilities:
        lines.append(f"- **{capability.name}**: {capability.description}")

    lines += ["", "## Design Patterns", ""]
    for pattern in sorted(knowledge.pattern_names):
        lines.append(f"- {pattern}")

    lines += ["", "## Code Examples", ""]
    for example in knowledge.examples[:MAX_RENDERED_EXAMPLES]:
        lines += [f"### {example.title}", "", f"```{example.language}", example.code, "```", ""]

    return "\n".join(lines)


def knowledge_tags(knowledge: FrameworkKnowledge, subject: Optional[Subject] = None) -> List[str]:
    tags = {knowledge.subject_id, "documentation"}
    if subject:
        tags.add(subject.name)
        if subject.category:
            tags.add(subject.category)
    tags.update(knowledge.pattern_names)
    return sorted(tags)
