"""Streamlit UI: landing view and generated workspace.

Run with ``python . ui`` (or ``streamlit run genui/app/main.py``).
This package exposes only the Streamlit-free pieces; ``main`` is the script.
"""

from .lib import (
    CONDITION_LABELS,
    FACTOR_DISPLAY,
    INTENT_LABELS,
    WorkspaceQuery,
    factor_display_score,
    humanize,
    score_color,
)

__all__ = [
    "INTENT_LABELS",
    "CONDITION_LABELS",
    "FACTOR_DISPLAY",
    "WorkspaceQuery",
    "factor_display_score",
    "score_color",
    "humanize",
]
