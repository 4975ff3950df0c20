import logging
import os
import threading
from typing import Dict, List, Optional

import yaml

from doccrawl.domain.subject import Subject

logger = logging.getLogger(__name__)


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def parse_subject(data: dict, source_path: Optional[str] = None) -> Optional[Subject]:
    """Build a `Subject` from one YAML mapping; None when required keys are missing.

    Each subject must contain:
      - name: string
      - start_url: string
    Optional: allowed_hosts, path_patterns, category, max_depth, max_pages, rate_limit.
    """
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    start_url = data.get("start_url")
    if not name or not start_url:
        return None
    try:
        max_depth = int(data["max_depth"]) if data.get("max_depth") is not None else None
        max_pages = int(data["max_pages"]) if data.get("max_pages") is not None else None
        rate_limit = float(data["rate_limit"]) if data.get("rate_limit") is not None else None
    except (TypeError, ValueError):
        logger.warning("Ignoring subject %r in %s: non-numeric budget", name, source_path)
        return None
    return Subject(
        name=str(name),
        start_url=str(start_url),
        allowed_hosts=_as_tuple(data.get("allowed_hosts")),
        path_patterns=_as_tuple(data.get("path_patterns")),
        category=data.get("category"),
        max_depth=max_depth,
        max_pages=max_pages,
        rate_limit=rate_limit,
        source_path=source_path,
    )


def load_subjects_from_file(path: str) -> List[Subject]:
    """Load one YAML file holding either a single subject or a `subjects:` list."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not data:
        return []
    entries = data.get("subjects", [data]) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        logger.warning("Ignoring %s: expected a mapping or a list of subjects", path)
        return []

    subjects = []
    for entry in entries:
        subject = parse_subject(entry, source_path=os.path.basename(path))
        if subject is None:
            logger.warning("Skipping invalid subject entry in %s: %r", path, entry)
            continue
        subjects.append(subject)
    return subjects


class SubjectCatalog:
    """Subjects loaded from a YAML file or a directory of YAML files, keyed by slug."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or os.path.join(os.getcwd(), "configs")
        self._lock = threading.Lock()
        self._subjects: Dict[str, Subject] = {}
        self._loaded = False

    def _files(self) -> List[str]:
        if os.path.isfile(self.path):
            return [self.path]
        if not os.path.isdir(self.path):
            return []
        return [
            os.path.join(self.path, fname)
            for fname in sorted(os.listdir(self.path))
            if fname.endswith(".yml") or fname.endswith(".yaml")
        ]

    def reload(self) -> List[Subject]:
        subjects: Dict[str, Subject] = {}
        for full in self._files():
            try:
                loaded = load_subjects_from_file(full)
            except (OSError, yaml.YAMLError) as e:
                logger.error("Could not read subjects from %s: %s", full, e)
                continue
            for subject in loaded:
                if subject.slug in subjects:
                    logger.warning("Duplicate subject %s in %s; keeping the first", subject.name, full)
                    continue
                subjects[subject.slug] = subject
        with self._lock:
            self._subjects = subjects
            self._loaded = True
        logger.info("Loaded %s subjects from %s", len(subjects), self.path)
        return list(subjects.values())

    def list_subjects(self) -> List[Subject]:
        if not self._loaded:
            self.reload()
        with self._lock:
            return list(self._subjects.values())

    def get(self, name: str) -> Optional[Subject]:
        if not self._loaded:
            self.reload()
        with self._lock:
            return self._subjects.get(name.lower().replace(" ", ""))
