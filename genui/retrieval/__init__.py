"""Persona, exemplar, pattern and trace retrieval."""

from .lib import (
    MAX_EXEMPLARS,
    MAX_PATTERNS,
    RetrievalBundle,
    pick_persona_context,
    retrieve_context,
    retrieve_exemplars,
    retrieve_patterns,
    retrieve_trace_snippet,
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
