"""Deterministic retrieval over the knowledge tables.

Every function is pure with respect to its inputs and the (read-only)
knowledge base: no scoring, no embeddings, just ordered filters. Absent
matches produce empty or default results, never errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from genui.knowledge import (
    ExemplarRecord,
    KnowledgeBase,
    PatternRecord,
    PersonaRecord,
    TraceRecord,
    load_knowledge_base,
)
from genui.layout import RetrievedContext
from genui.schema import Persona, TaskGoal, UserProfile

MAX_EXEMPLARS = 3
MAX_PATTERNS = 2

# Pattern id fragments used when no pattern declares a fit
_FALLBACK_PATTERN_KEYS: dict[str, tuple[str, ...]] = {
    Persona.VISUAL.value: ("mindmap", "kanban"),
    Persona.RESEARCH.value: ("research", "synthesis"),
}
_DEFAULT_PATTERN_KEYS = ("sidebar", "editor")


def _text(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value


def pick_persona_context(
    persona_id: str | Persona, knowledge: KnowledgeBase | None = None
) -> PersonaRecord | None:
    """Find the persona record whose id or name equals ``persona_id``."""
    kb = knowledge or load_knowledge_base()
    key = _text(persona_id)
    for record in kb.personas:
        if record.name == key or record.id == key:
            return record
    return None


def retrieve_exemplars(
    goal: TaskGoal, persona: str | Persona, knowledge: KnowledgeBase | None = None
) -> list[ExemplarRecord]:
    """Select up to three few-shot exemplars for a goal.

    Intent matches come first, followed by keyword matches: exemplars whose
    task's first word occurs in the goal description, or whose persona hint
    equals ``persona``. Duplicates keep their first position.
    """
    kb = knowledge or load_knowledge_base()
    persona_key = _text(persona)
    intent = _text(goal.intent)
    description = goal.description.lower()

    intent_matches = [ex for ex in kb.exemplars if ex.intent == intent]
    keyword_matches = [
        ex
        for ex in kb.exemplars
        if ex.task.split(" ")[0].lower() in description or ex.persona_hint == persona_key
    ]

    unique: list[ExemplarRecord] = []
    seen: set[str] = set()
    for exemplar in intent_matches + keyword_matches:
        if exemplar.id not in seen:
            seen.add(exemplar.id)
            unique.append(exemplar)
    return unique[:MAX_EXEMPLARS]


def retrieve_patterns(
    persona: str | Persona, intent: str, knowledge: KnowledgeBase | None = None
) -> list[PatternRecord]:
    """Select up to two UI patterns fitting the persona or intent.

    When no pattern declares a fit, falls back to a persona-specific subset
    chosen by pattern id (mind map and kanban for visual writers, research and
    synthesis for research writers, sidebar and editor otherwise).
    """
    kb = knowledge or load_knowledge_base()
    persona_key = _text(persona)
    intent_key = _text(intent)

    fitting = [
        p
        for p in kb.patterns
        if persona_key in (p.persona_fit or []) or intent_key in (p.intent_fit or [])
    ]
    if fitting:
        return fitting[:MAX_PATTERNS]

    keys = _FALLBACK_PATTERN_KEYS.get(persona_key, _DEFAULT_PATTERN_KEYS)
    fallback = [p for p in kb.patterns if any(key in p.id for key in keys)]
    return fallback[:MAX_PATTERNS]


def retrieve_trace_snippet(
    persona: str | Persona, intent: str, knowledge: KnowledgeBase | None = None
) -> TraceRecord | None:
    """First trace matching persona or intent, else the first trace.

    Returns None only when the trace table is empty.
    """
    kb = knowledge or load_knowledge_base()
    persona_key = _text(persona)
    intent_key = _text(intent)
    for trace in kb.traces:
        if trace.persona_hint == persona_key or trace.intent == intent_key:
            return trace
    return kb.traces[0] if kb.traces else None


@dataclass(frozen=True)
class RetrievalBundle:
    """Everything retrieved for one personalized generation request."""

    persona: PersonaRecord | None
    exemplars: list[ExemplarRecord] = field(default_factory=list)
    patterns: list[PatternRecord] = field(default_factory=list)
    trace: TraceRecord | None = None

    def to_retrieved_context(self) -> RetrievedContext:
        """Summarize the bundle for display next to the generated layout."""
        return RetrievedContext(
            persona_traits=list(self.persona.history_snippets) if self.persona else [],
            matched_patterns=[p.name for p in self.patterns],
            behavior_insights=[self.trace.cognitive_insight] if self.trace else [],
        )


def retrieve_context(
    goal: TaskGoal, profile: UserProfile, knowledge: KnowledgeBase | None = None
) -> RetrievalBundle:
    """Run every retriever for a goal and profile."""
    kb = knowledge or load_knowledge_base()
    persona = _text(profile.persona)
    return RetrievalBundle(
        persona=pick_persona_context(persona, kb),
        exemplars=retrieve_exemplars(goal, persona, kb),
        patterns=retrieve_patterns(persona, goal.intent, kb),
        trace=retrieve_trace_snippet(persona, goal.intent, kb),
    )


__all__ = [
    "MAX_EXEMPLARS",
    "MAX_PATTERNS",
    "pick_persona_context",
    "retrieve_exemplars",
    "retrieve_patterns",
    "retrieve_trace_snippet",
    "RetrievalBundle",
    "retrieve_context",
]
