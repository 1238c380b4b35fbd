"""InterfaceGenerator: persona-aware workspace layouts from an LLM.

Pipeline per request: retrieve context -> build prompt -> one backend call
-> decode JSON -> validate -> Specification. Every failure along the way is
caught at the call boundary and mapped to the fixed fallback layout for the
requested condition. There are no retries.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from genui.core.result import Failure
from genui.knowledge import KnowledgeBase, load_knowledge_base
from genui.layout import Specification, validate_specification, widget_types
from genui.prompt import PromptBuilder, PromptContext
from genui.retrieval import retrieve_context
from genui.schema import Condition, TaskGoal, UserProfile

from ..backend import (
    AUTH_FAILURE,
    CONFIG_FAILURE,
    GenerationConfig,
    LLMBackend,
    create_llm_backend,
    request_json,
)

logger = logging.getLogger(__name__)

VALIDATION_FAILURE = "validation"

# Wire-format layouts, copied on every use
FALLBACK_LAYOUTS: dict[Condition, dict[str, Any]] = {
    Condition.BASELINE_CHAT: {
        "layout": {
            "id": "root",
            "type": "layout-row",
            "children": [
                {"id": "chat-panel", "type": "widget-chat", "title": "AI Chat Assistant", "flex": 1},
            ],
        },
        "theme": "minimal",
        "rationale": "Basic chat-only interface for baseline comparison.",
    },
    Condition.GENERIC_GENUI: {
        "layout": {
            "id": "root",
            "type": "layout-row",
            "children": [
                {"id": "editor-panel", "type": "widget-editor", "title": "Editor", "flex": 2},
                {"id": "chat-panel", "type": "widget-chat", "title": "AI Assistant", "flex": 1},
            ],
        },
        "theme": "minimal",
        "rationale": "Generic editor + chat layout without personalization.",
    },
    Condition.PERSONALIZED_GENUI: {
        "layout": {
            "id": "root",
            "type": "layout-row",
            "children": [
                {"id": "editor-panel", "type": "widget-editor", "title": "Editor", "flex": 2},
                {"id": "chat-panel", "type": "widget-chat", "title": "AI Assistant", "flex": 1},
            ],
        },
        "theme": "minimal",
        "rationale": "Fallback personalized layout due to generation error.",
    },
}

_FAILURE_LABELS = {
    AUTH_FAILURE: "LLM API key not configured",
    CONFIG_FAILURE: "LLM model not configured",
    VALIDATION_FAILURE: "invalid layout returned",
}


def describe_failure(failure: Failure) -> str:
    """Short user-facing label for why generation fell back."""
    return _FAILURE_LABELS.get(failure.kind, "generation error")


def fallback_specification(
    condition: Condition | str, failure: Failure | None = None
) -> Specification:
    """Build a fresh copy of the fallback layout for a condition.

    When ``failure`` is given the rationale is prefixed with the reason, e.g.
    ``"Fallback layout used: generation error. ..."``. The shared table is
    never modified.
    """
    data = copy.deepcopy(FALLBACK_LAYOUTS[Condition(condition)])
    if failure is not None:
        data["rationale"] = f"Fallback layout used: {describe_failure(failure)}. {data['rationale']}"
    return Specification.model_validate(data)


@dataclass
class GeneratorConfig:
    """Configuration for InterfaceGenerator.

    Attributes:
        model: Model name. None uses the configured default.
        temperature: LLM temperature for generation.
        max_tokens: Maximum tokens in the reply.
        attach_retrieved_context: Attach retrieved context to personalized results.
    """

    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 4096
    attach_retrieved_context: bool = True


@dataclass
class GenerationOutput:
    """Complete output from one generation request.

    Attributes:
        specification: The layout to render (generated or fallback).
        condition: Condition the layout was generated for.
        used_fallback: True when the layout is a fallback after a failure.
        failure_reason: Detailed failure message (logs and debugging).
        raw_response: Raw LLM response content, if a call was made.
        model: Model identifier reported by the backend.
        total_tokens: Tokens used by the call.
        prompt_context: What went into the prompt.
    """

    specification: Specification
    condition: Condition
    used_fallback: bool = False
    failure_reason: str | None = None
    raw_response: str | None = None
    model: str | None = None
    total_tokens: int = 0
    prompt_context: PromptContext | None = field(default=None, repr=False)


class InterfaceGenerator:
    """Generates workspace layouts for the three experimental conditions.

    The baseline condition never reaches the LLM. Generic and personalized
    conditions make exactly one call; personalized requests also include
    retrieved persona context in the prompt and attach it to the result.

    Example:
        >>> generator = InterfaceGenerator()
        >>> spec = generator.generate(goal, profile, Condition.PERSONALIZED_GENUI)
        >>> print(spec.rationale)

        >>> # With a specific backend
        >>> backend = create_llm_backend("claude-sonnet-4-5")
        >>> generator = InterfaceGenerator(backend=backend)
    """

    def __init__(
        self,
        backend: LLMBackend | None = None,
        config: GeneratorConfig | None = None,
        knowledge: KnowledgeBase | None = None,
    ):
        """Initialize generator.

        Args:
            backend: LLM backend. Created on first use when None.
            config: Generator configuration.
            knowledge: Knowledge tables. Defaults to the bundled tables.
        """
        self._backend = backend
        self._config = config or GeneratorConfig()
        self._knowledge = knowledge
        self._prompts = PromptBuilder(knowledge)

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def knowledge(self) -> KnowledgeBase:
        if self._knowledge is None:
            self._knowledge = load_knowledge_base()
        return self._knowledge

    def _get_backend(self) -> LLMBackend:
        """Return the backend, creating it on first use.

        Raises:
            AuthenticationError: If no API key is configured.
        """
        if self._backend is None:
            self._backend = create_llm_backend(self._config.model)
        return self._backend

    def generate(
        self,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str = Condition.PERSONALIZED_GENUI,
    ) -> Specification:
        """Generate a layout specification. Never raises for LLM failures."""
        return self.generate_with_details(goal, profile, condition).specification

    def generate_with_details(
        self,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str = Condition.PERSONALIZED_GENUI,
    ) -> GenerationOutput:
        """Generate a layout and report how it was obtained."""
        condition = Condition(condition)

        if condition == Condition.BASELINE_CHAT:
            return GenerationOutput(
                specification=fallback_specification(condition), condition=condition
            )

        personalized = condition == Condition.PERSONALIZED_GENUI
        bundle = retrieve_context(goal, profile, self.knowledge) if personalized else None
        prompt = self._prompts.build_generation(goal, profile, condition, bundle)

        gen_config = GenerationConfig(
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            json_mode=True,
        )
        reply = request_json(self._get_backend, prompt, gen_config)

        if isinstance(reply, Failure):
            logger.error(f"Layout generation failed for {condition.value}: {reply.reason}")
            return self._fallback(condition, reply, prompt_context=prompt.context)

        validated = validate_specification(reply.value.data)
        if isinstance(validated, Failure):
            logger.warning(
                f"Generated layout failed validation ({validated.reason}), using fallback"
            )
            return self._fallback(
                condition,
                validated,
                prompt_context=prompt.context,
                raw_response=reply.value.raw,
                model=reply.value.model,
            )

        retrieved = None
        if bundle is not None and self._config.attach_retrieved_context:
            retrieved = bundle.to_retrieved_context()
        spec = validated.value.model_copy(update={"retrieved_context": retrieved})

        widgets = ", ".join(widget_types(spec.layout))
        logger.info(f"Generated {condition.value} layout with widgets: {widgets}")
        return GenerationOutput(
            specification=spec,
            condition=condition,
            raw_response=reply.value.raw,
            model=reply.value.model,
            total_tokens=reply.value.usage.get("total_tokens", 0),
            prompt_context=prompt.context,
        )

    @staticmethod
    def _fallback(
        condition: Condition,
        failure: Failure,
        *,
        prompt_context: PromptContext | None = None,
        raw_response: str | None = None,
        model: str | None = None,
    ) -> GenerationOutput:
        return GenerationOutput(
            specification=fallback_specification(condition, failure),
            condition=condition,
            used_fallback=True,
            failure_reason=failure.reason,
            raw_response=raw_response,
            model=model,
            prompt_context=prompt_context,
        )


__all__ = [
    "FALLBACK_LAYOUTS",
    "VALIDATION_FAILURE",
    "describe_failure",
    "fallback_specification",
    "GeneratorConfig",
    "GenerationOutput",
    "InterfaceGenerator",
]
