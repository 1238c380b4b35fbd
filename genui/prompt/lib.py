"""Prompt builders for layout generation and rubric evaluation.

Both builders produce a ``PromptPair`` (system + user message). The
generation prompt carries persona, task, retrieved design context, the
component catalogue and design rules; the evaluation prompt carries the
rubric, the specification under review and scoring instructions.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from genui.knowledge import KnowledgeBase, load_knowledge_base
from genui.layout import Specification
from genui.retrieval import RetrievalBundle
from genui.schema import (
    CONDITION_DESCRIPTIONS,
    EVALUATION_FACTORS,
    Condition,
    TaskGoal,
    UserProfile,
    describe_component_types,
)

GENERATION_USER_TEMPLATE = 'Design a {mode} workspace for: "{goal}"'
EVALUATION_USER_MESSAGE = (
    "Evaluate this interface against the rubric. Be critical and use the full score range."
)

_PERSONA_RULES = """1. VisualWriter: prioritize widget-mindmap, widget-kanban, spatial layouts
2. LinearWriter: prioritize widget-outline, widget-editor, sequential layouts
3. ResearchWriter: prioritize widget-research, widget-mindmap, source-synthesis layouts
4. Match density preference (compact vs comfortable)"""

_GENERIC_RULES = """1. Use a balanced, general-purpose layout
2. Include editor as primary component"""

_SHARED_RULES = """5. Always include widget-chat for AI collaboration
6. For "brainstorm" intent: favor divergent tools (mindmap, kanban)
7. For "write" intent: favor focused tools (editor, outline)
8. For "review" intent: include stats, timeline, critique
9. For "research" intent: include research widget, mindmap"""

_OUTPUT_SCHEMA = """Return a JSON object with:
{
  "layout": UIComponent,
  "theme": string,
  "rationale": string
}

UIComponent schema:
{
  "id": string (unique within the layout),
  "type": ComponentType,
  "title": string,
  "flex": integer (1-12),
  "children": UIComponent[] (layout types only)
}"""

_FACTOR_GUIDANCE = """1. COGNITIVE LOAD (0-100, LOWER is better): Does the layout minimize mental effort?
   - For chat-only baseline: high load expected (no structure externalization)
   - For generic UI: moderate load (some structure but not personalized)
   - For personalized UI: should have lowest load if well-designed

2. CLARITY (0-100, higher is better): Is information hierarchy clear?

3. EFFICIENCY (0-100, higher is better): Can user complete task efficiently?

4. PERSONALIZATION FIT (0-100, higher is better): Does UI match persona?
   - For baseline/generic: score should be 30-50 (not personalized)
   - For personalized: score based on actual persona fit

5. AESTHETIC APPEAL (0-100, higher is better): Visual design quality?"""


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=2)


@dataclass
class PromptContext:
    """What went into a prompt, for logging and debugging.

    Attributes:
        personalized: Whether persona and retrieved context were included.
        exemplar_ids: IDs of included exemplars.
        pattern_ids: IDs of included patterns.
        trace_id: ID of the included trace, if any.
        total_tokens_estimate: Rough token count (chars / 4).
    """

    personalized: bool = False
    exemplar_ids: list[str] = field(default_factory=list)
    pattern_ids: list[str] = field(default_factory=list)
    trace_id: str | None = None
    total_tokens_estimate: int = 0


@dataclass
class PromptPair:
    """A system/user message pair ready to send to a backend."""

    system: str
    user: str
    context: PromptContext = field(default_factory=PromptContext)


class PromptBuilder:
    """Builds generation and evaluation prompts.

    Example:
        >>> builder = PromptBuilder()
        >>> pair = builder.build_generation(goal, profile, Condition.PERSONALIZED_GENUI, bundle)
        >>> request_json(lambda: backend, pair, GenerationConfig())
    """

    def __init__(self, knowledge: KnowledgeBase | None = None):
        self._knowledge = knowledge

    @property
    def knowledge(self) -> KnowledgeBase:
        if self._knowledge is None:
            self._knowledge = load_knowledge_base()
        return self._knowledge

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def build_generation(
        self,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str,
        bundle: RetrievalBundle | None = None,
    ) -> PromptPair:
        """Build the layout generation prompt.

        Personalization (persona section, retrieved context, persona rules)
        is included only for the personalized condition and only when a
        bundle is supplied.
        """
        personalized = (
            Condition(_text(condition)) == Condition.PERSONALIZED_GENUI and bundle is not None
        )
        mode = "personalized" if personalized else "generic"

        goal_line = "reduces cognitive load"
        if personalized:
            goal_line += " and matches the user's cognitive style"

        sections = [
            "You are an expert UI/UX designer implementing a Generative Interface "
            "engine for cognitive task support.\n"
            f"Your goal: design a {mode} workspace layout that {goal_line}.",
            self._user_section(profile, bundle) if personalized else self._generic_section(),
            "## Task Context\n"
            f'- Goal: "{goal.description}"\n'
            f"- Intent: {_text(goal.intent)}",
        ]
        if personalized:
            sections.append(self._retrieval_section(bundle))
        sections.extend(
            [
                "## Output Schema\n" + _OUTPUT_SCHEMA,
                "ComponentType options:\n" + describe_component_types(),
                "## Design Rules (Nielsen + Cognitive Load Theory)\n"
                + (_PERSONA_RULES if personalized else _GENERIC_RULES)
                + "\n"
                + _SHARED_RULES,
                self._rationale_section(personalized),
                "Return ONLY valid JSON, no markdown fencing.",
            ]
        )

        system = "\n\n".join(sections)
        user = GENERATION_USER_TEMPLATE.format(mode=mode, goal=goal.description)

        context = PromptContext(personalized=personalized)
        if personalized:
            context.exemplar_ids = [ex.id for ex in bundle.exemplars]
            context.pattern_ids = [p.id for p in bundle.patterns]
            context.trace_id = bundle.trace.id if bundle.trace else None
        context.total_tokens_estimate = (len(system) + len(user)) // 4

        return PromptPair(system=system, user=user, context=context)

    def _user_section(self, profile: UserProfile, bundle: RetrievalBundle) -> str:
        persona = bundle.persona
        preferences = profile.preferences.model_dump(mode="json", by_alias=True)
        return "\n".join(
            [
                "## User Context (Personalization Enabled)",
                f"- Persona: {_text(profile.persona)}",
                f"- Cognitive Style: {persona.cognitive_style if persona else 'unknown'}",
                f"- Preferences: {json.dumps(preferences)}",
                f"- Behavior History: {json.dumps(persona.history_snippets if persona else [])}",
                f"- Typical Workflows: {json.dumps(persona.typical_workflows if persona else [])}",
                "- Cognitive Traits: "
                + json.dumps(persona.cognitive_traits.to_dict() if persona else {}),
            ]
        )

    @staticmethod
    def _generic_section() -> str:
        return (
            "## Generic Mode (No Personalization)\n"
            "Design a standard workspace without user-specific adaptations."
        )

    @staticmethod
    def _retrieval_section(bundle: RetrievalBundle) -> str:
        trace = bundle.trace.to_dict() if bundle.trace else {}
        return "\n".join(
            [
                "## Retrieved Design Context",
                "### Few-Shot Exemplars",
                _dumps([ex.to_dict() for ex in bundle.exemplars]),
                "",
                "### UI Patterns",
                _dumps([p.to_dict() for p in bundle.patterns]),
                "",
                "### Behavior Trace",
                _dumps(trace),
            ]
        )

    @staticmethod
    def _rationale_section(personalized: bool) -> str:
        subject = "user's cognitive style" if personalized else "task"
        third = (
            "HOW retrieved context influenced decisions"
            if personalized
            else "What general usability principles were applied"
        )
        return (
            "## Rationale Requirements\n"
            "Write 2-3 sentences explaining:\n"
            f"1. WHY this layout for this {subject}\n"
            "2. WHICH cognitive load principles guided the design\n"
            f"3. {third}"
        )

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def build_evaluation(
        self,
        spec: Specification,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str,
    ) -> PromptPair:
        """Build the rubric evaluation prompt for a specification."""
        condition = Condition(_text(condition))

        sections = [
            "You are an expert HCI researcher conducting a rigorous rubric-based "
            "evaluation of a generated user interface.\n"
            "Apply the following 5-factor rubric grounded in NASA-TLX, "
            "Nielsen's Heuristics, and SUS.",
            "## Evaluation Context\n"
            f"- User Persona: {_text(profile.persona)}\n"
            f'- Task: "{goal.description}"\n'
            f"- Intent: {_text(goal.intent)}\n"
            f"- Condition: {condition.value} ({CONDITION_DESCRIPTIONS[condition]})",
            "## Evaluation Rubric\n" + self.knowledge.rubric_json,
            "## UI Specification to Evaluate\n" + spec.to_json(),
            "## Instructions\n"
            "Rate each factor on a 0-100 scale with clear justification.\n"
            "BE CRITICAL and use the FULL RANGE of scores. "
            "Avoid compression around 70-80.\n\n"
            "Consider:\n" + _FACTOR_GUIDANCE,
            "## Sub-criteria Details\n"
            "For each factor, also provide sub-criteria scores (0-100):\n\n"
            + self._sub_criteria_text(),
            "## Output Format\nReturn JSON:\n" + _dumps(self._output_shape()),
            "Use the FULL scoring range. A chat-only baseline should score LOW "
            "on personalization and efficiency.",
        ]

        system = "\n\n".join(sections)
        context = PromptContext(total_tokens_estimate=(len(system) + len(EVALUATION_USER_MESSAGE)) // 4)
        return PromptPair(system=system, user=EVALUATION_USER_MESSAGE, context=context)

    def _sub_criteria_text(self) -> str:
        factors = (self.knowledge.rubric or {}).get("factors", {})
        blocks = []
        for factor, subs in EVALUATION_FACTORS.items():
            questions = factors.get(factor, {}).get("subCriteria", {})
            lines = [f"{factor}:"]
            lines.extend(f"- {sub}: {questions.get(sub, sub)}" for sub in subs)
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    @staticmethod
    def _output_shape() -> dict[str, Any]:
        shape: dict[str, Any] = {factor: "number" for factor in EVALUATION_FACTORS}
        shape["overallScore"] = "number"
        shape["feedback"] = "string"
        shape["strengths"] = "string[]"
        shape["improvements"] = "string[]"
        shape["detailed"] = {
            factor: {
                "score": "number",
                "details": {sub: "number" for sub in subs},
                "justification": "string",
            }
            for factor, subs in EVALUATION_FACTORS.items()
        }
        return shape


__all__ = [
    "GENERATION_USER_TEMPLATE",
    "EVALUATION_USER_MESSAGE",
    "PromptContext",
    "PromptPair",
    "PromptBuilder",
]
