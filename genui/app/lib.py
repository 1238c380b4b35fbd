"""UI state that does not depend on Streamlit.

The landing view and the workspace view talk only through query
parameters: ``persona``, ``goal``, ``intent`` and ``comparison``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from genui.evaluation import EvaluationSummary
from genui.schema import (
    Condition,
    Intent,
    Persona,
    TaskGoal,
    UserProfile,
    coerce_intent,
    coerce_persona,
)

INTENT_LABELS: dict[Intent, tuple[str, str]] = {
    Intent.WRITE: ("Write", "Draft content"),
    Intent.BRAINSTORM: ("Brainstorm", "Generate ideas"),
    Intent.REVIEW: ("Review", "Edit & revise"),
    Intent.RESEARCH: ("Research", "Explore sources"),
}

CONDITION_LABELS: dict[Condition, tuple[str, str]] = {
    Condition.BASELINE_CHAT: ("Baseline Chat", "Traditional chat interface"),
    Condition.GENERIC_GENUI: ("Generic GenUI", "Generated UI (no personalization)"),
    Condition.PERSONALIZED_GENUI: ("Personalized GenUI", "Generated UI + RAG personalization"),
}

# Factor display: (wire name, label, source, inverted)
FACTOR_DISPLAY: tuple[tuple[str, str, str, bool], ...] = (
    ("cognitiveLoad", "Cognitive Load", "NASA-TLX", True),
    ("clarity", "Clarity", "Nielsen Heuristics", False),
    ("efficiency", "Efficiency", "Nielsen Heuristics", False),
    ("personalizationFit", "Personalization", "User Modeling", False),
    ("aestheticAppeal", "Aesthetics", "Hartmann et al.", False),
)


@dataclass(frozen=True)
class WorkspaceQuery:
    """Decoded workspace query parameters.

    Unknown personas and intents fall back to VisualWriter and write;
    comparison mode is on only for the literal string ``"true"``.
    """

    persona: Persona = Persona.VISUAL
    goal: str = ""
    intent: Intent = Intent.WRITE
    comparison: bool = False

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> WorkspaceQuery:
        return cls(
            persona=coerce_persona(params.get("persona")),
            goal=(params.get("goal") or "").strip(),
            intent=coerce_intent(params.get("intent")),
            comparison=params.get("comparison") == "true",
        )

    def to_query_params(self) -> dict[str, str]:
        return {
            "persona": self.persona.value,
            "goal": self.goal,
            "intent": self.intent.value,
            "comparison": "true" if self.comparison else "false",
        }

    @property
    def has_goal(self) -> bool:
        return bool(self.goal)

    def task_goal(self) -> TaskGoal:
        return TaskGoal(description=self.goal, intent=self.intent)

    def user_profile(self) -> UserProfile:
        return UserProfile(persona=self.persona)


def factor_display_score(summary: EvaluationSummary, factor: str) -> float:
    """Score shown to users; cognitive load is inverted so higher is better."""
    value = summary.factor_scores()[factor]
    inverted = next(inv for name, _, _, inv in FACTOR_DISPLAY if name == factor)
    return 100 - value if inverted else value


def score_color(score: float) -> str:
    """Streamlit color name for a 0-100 score."""
    if score >= 70:
        return "green"
    if score >= 50:
        return "orange"
    return "red"


def humanize(name: str) -> str:
    """``"taskCompletion"`` -> ``"Task completion"``."""
    words = []
    for char in name:
        if char.isupper() and words:
            words.append(" ")
        words.append(char.lower())
    return "".join(words).capitalize()


__all__ = [
    "INTENT_LABELS",
    "CONDITION_LABELS",
    "FACTOR_DISPLAY",
    "WorkspaceQuery",
    "factor_display_score",
    "score_color",
    "humanize",
]
