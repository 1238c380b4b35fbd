"""Static knowledge tables (personas, exemplars, patterns, traces, rubric)."""

from .lib import (
    CognitiveTraits,
    ExemplarRecord,
    KnowledgeBase,
    PatternRecord,
    PersonaPreferences,
    PersonaRecord,
    TraceRecord,
    clear_knowledge_cache,
    load_knowledge_base,
    read_knowledge_base,
)

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
