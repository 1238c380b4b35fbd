"""Read-only knowledge tables used for retrieval and evaluation.

Five JSON files back the engine:

- ``personas.json``: cognitive persona profiles
- ``prompt_exemplars.json``: few-shot task/layout exemplars
- ``ui_patterns.json``: reusable workspace patterns
- ``writing_traces.json``: observed writing behavior snippets
- ``evaluation_rubric.json``: the 5-factor scoring rubric

Tables are parsed once per directory and shared for the life of the process.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from genui.config import get_knowledge_dir

logger = logging.getLogger(__name__)

PERSONAS_FILE = "personas.json"
EXEMPLARS_FILE = "prompt_exemplars.json"
PATTERNS_FILE = "ui_patterns.json"
TRACES_FILE = "writing_traces.json"
RUBRIC_FILE = "evaluation_rubric.json"


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PersonaPreferences(_Record):
    density: str
    show_minimap: bool
    layout_style: str
    primary_tools: list[str] = Field(default_factory=list)


class CognitiveTraits(_Record):
    working_memory_support: str
    preferred_externalization: str
    task_switching_cost: str


class PersonaRecord(_Record):
    """A cognitive persona profile."""

    id: str
    name: str
    cognitive_style: str
    description: str
    preferences: PersonaPreferences
    history_snippets: list[str] = Field(default_factory=list)
    typical_workflows: list[str] = Field(default_factory=list)
    cognitive_traits: CognitiveTraits


class ExemplarRecord(_Record):
    """A few-shot example pairing a task with a layout hint."""

    id: str
    task: str
    intent: str
    persona_hint: str
    layout_hint: str
    expected_components: list[str] = Field(default_factory=list)
    rationale: str


class PatternRecord(_Record):
    """A reusable workspace pattern."""

    id: str
    name: str
    description: str
    persona_fit: list[str] | None = None
    intent_fit: list[str] | None = None
    components: list[str] = Field(default_factory=list)
    cognitive_rationale: str


class TraceRecord(_Record):
    """An observed writing behavior snippet."""

    id: str
    task: str
    persona_hint: str
    intent: str
    patterns: list[str] = Field(default_factory=list)
    cognitive_insight: str


@dataclass(frozen=True)
class KnowledgeBase:
    """All knowledge tables, in file order."""

    personas: tuple[PersonaRecord, ...] = ()
    exemplars: tuple[ExemplarRecord, ...] = ()
    patterns: tuple[PatternRecord, ...] = ()
    traces: tuple[TraceRecord, ...] = ()
    rubric: dict[str, Any] | None = None

    @property
    def rubric_json(self) -> str:
        """Rubric as pretty-printed JSON for prompt embedding."""
        return json.dumps(self.rubric or {}, indent=2)

    def summary(self) -> dict[str, int]:
        return {
            "personas": len(self.personas),
            "exemplars": len(self.exemplars),
            "patterns": len(self.patterns),
            "traces": len(self.traces),
        }


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _read_table(directory: Path, filename: str, record_type: type[_Record]) -> tuple:
    path = directory / filename
    if not path.exists():
        logger.warning(f"Knowledge table missing: {path}")
        return ()
    adapter = TypeAdapter(list[record_type])
    return tuple(adapter.validate_python(_read_json(path)))


def read_knowledge_base(directory: Path) -> KnowledgeBase:
    """Parse every knowledge table in ``directory`` (uncached).

    Missing files yield empty tables. Malformed files raise, since the tables
    ship with the package and a broken one is a packaging bug.

    Raises:
        json.JSONDecodeError: If a file is not valid JSON.
        pydantic.ValidationError: If records do not match their schema.
    """
    rubric_path = directory / RUBRIC_FILE
    rubric = _read_json(rubric_path) if rubric_path.exists() else None

    kb = KnowledgeBase(
        personas=_read_table(directory, PERSONAS_FILE, PersonaRecord),
        exemplars=_read_table(directory, EXEMPLARS_FILE, ExemplarRecord),
        patterns=_read_table(directory, PATTERNS_FILE, PatternRecord),
        traces=_read_table(directory, TRACES_FILE, TraceRecord),
        rubric=rubric,
    )
    logger.debug(f"Loaded knowledge base from {directory}: {kb.summary()}")
    return kb


@lru_cache(maxsize=None)
def _load_cached(directory: Path) -> KnowledgeBase:
    return read_knowledge_base(directory)


def load_knowledge_base(directory: Path | str | None = None) -> KnowledgeBase:
    """Load (once) the knowledge base for a directory.

    Args:
        directory: Table directory. Defaults to ``GENUI_KNOWLEDGE_DIR`` or
            the tables bundled with the package.
    """
    return _load_cached(get_knowledge_dir(directory).resolve())


def clear_knowledge_cache() -> None:
    """Forget previously loaded tables (used by tests and after edits)."""
    _load_cached.cache_clear()


__all__ = [
    "PersonaPreferences",
    "CognitiveTraits",
    "PersonaRecord",
    "ExemplarRecord",
    "PatternRecord",
    "TraceRecord",
    "KnowledgeBase",
    "read_knowledge_base",
    "load_knowledge_base",
    "clear_knowledge_cache",
]
