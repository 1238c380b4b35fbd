"""Rubric-based evaluation of generated layouts.

The evaluator asks the LLM to score a specification on five factors
(cognitive load, clarity, efficiency, personalization fit, aesthetic
appeal). Scores are 0-100; cognitive load is the only factor where lower
is better. Any failure yields a neutral summary instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from genui.core.result import Failure
from genui.knowledge import KnowledgeBase
from genui.layout import Specification
from genui.llm.backend import (
    AUTH_FAILURE,
    GenerationConfig,
    LLMBackend,
    create_llm_backend,
    request_json,
)
from genui.prompt import PromptBuilder
from genui.schema import EVALUATION_FACTORS, Condition, TaskGoal, UserProfile

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0


# =============================================================================
# Models
# =============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FactorScore(_WireModel):
    """Score for one rubric factor with its sub-criteria."""

    score: float = NEUTRAL_SCORE
    details: dict[str, float] = Field(default_factory=dict)
    justification: str = ""


class EvaluationDetail(_WireModel):
    """Per-factor breakdown of an evaluation."""

    cognitive_load: FactorScore = Field(default_factory=FactorScore)
    clarity: FactorScore = Field(default_factory=FactorScore)
    efficiency: FactorScore = Field(default_factory=FactorScore)
    personalization_fit: FactorScore = Field(default_factory=FactorScore)
    aesthetic_appeal: FactorScore = Field(default_factory=FactorScore)


class EvaluationSummary(_WireModel):
    """Scores for one specification.

    Attributes:
        cognitive_load: 0-100, lower is better.
        clarity: 0-100, higher is better.
        efficiency: 0-100, higher is better.
        personalization_fit: 0-100, higher is better.
        aesthetic_appeal: 0-100, higher is better.
        overall_score: 0-100 overall quality.
        feedback: Short free-text verdict.
        strengths: Notable strengths (optional).
        improvements: Suggested improvements (optional).
        detailed: Sub-criteria breakdown (optional).
    """

    cognitive_load: float
    clarity: float
    efficiency: float
    personalization_fit: float
    aesthetic_appeal: float
    overall_score: float
    feedback: str = ""
    strengths: list[str] | None = None
    improvements: list[str] | None = None
    detailed: EvaluationDetail | None = None

    def factor_scores(self) -> dict[str, float]:
        """Top-level factor scores keyed by their wire names."""
        data = self.model_dump(by_alias=True)
        return {factor: data[factor] for factor in EVALUATION_FACTORS}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def neutral_summary(failure: Failure | None = None) -> EvaluationSummary:
    """Summary used when evaluation is unavailable: every score is 50."""
    reason = (
        "API key not configured"
        if failure is not None and failure.kind == AUTH_FAILURE
        else "service error"
    )
    detailed = EvaluationDetail(
        **{
            factor: FactorScore(details={sub: NEUTRAL_SCORE for sub in subs})
            for factor, subs in EVALUATION_FACTORS.items()
        }
    )
    return EvaluationSummary(
        cognitive_load=NEUTRAL_SCORE,
        clarity=NEUTRAL_SCORE,
        efficiency=NEUTRAL_SCORE,
        personalization_fit=NEUTRAL_SCORE,
        aesthetic_appeal=NEUTRAL_SCORE,
        overall_score=NEUTRAL_SCORE,
        feedback=f"Evaluation unavailable: {reason}",
        strengths=[],
        improvements=[],
        detailed=detailed,
    )


# =============================================================================
# Evaluator
# =============================================================================


@dataclass
class EvaluatorConfig:
    """Configuration for InterfaceEvaluator."""

    model: str | None = None
    temperature: float = 0.3
    max_tokens: int = 2048


@dataclass
class EvaluationOutput:
    """Evaluation plus how it was obtained."""

    summary: EvaluationSummary
    used_fallback: bool = False
    failure_reason: str | None = None
    raw_response: str | None = None
    model: str | None = None


class InterfaceEvaluator:
    """Scores specifications against the 5-factor rubric with one LLM call.

    Example:
        >>> evaluator = InterfaceEvaluator()
        >>> summary = evaluator.evaluate(spec, goal, profile, "personalized-genui")
        >>> summary.overall_score
        78.0
    """

    def __init__(
        self,
        backend: LLMBackend | None = None,
        config: EvaluatorConfig | None = None,
        knowledge: KnowledgeBase | None = None,
    ):
        self._backend = backend
        self._config = config or EvaluatorConfig()
        self._prompts = PromptBuilder(knowledge)

    @property
    def config(self) -> EvaluatorConfig:
        return self._config

    def _get_backend(self) -> LLMBackend:
        if self._backend is None:
            self._backend = create_llm_backend(self._config.model)
        return self._backend

    def evaluate(
        self,
        spec: Specification,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str,
    ) -> EvaluationSummary:
        """Evaluate a specification. Never raises for LLM failures."""
        return self.evaluate_with_details(spec, goal, profile, condition).summary

    def evaluate_with_details(
        self,
        spec: Specification,
        goal: TaskGoal,
        profile: UserProfile,
        condition: Condition | str,
    ) -> EvaluationOutput:
        prompt = self._prompts.build_evaluation(spec, goal, profile, condition)
        gen_config = GenerationConfig(
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            json_mode=True,
        )

        reply = request_json(self._get_backend, prompt, gen_config)
        if isinstance(reply, Failure):
            logger.error(f"Evaluation failed: {reply.reason}")
            return EvaluationOutput(
                summary=neutral_summary(reply),
                used_fallback=True,
                failure_reason=reply.reason,
            )

        try:
            summary = EvaluationSummary.model_validate(reply.value.data)
        except PydanticValidationError as e:
            logger.warning(f"Evaluation reply did not match the rubric shape: {e}")
            return EvaluationOutput(
                summary=neutral_summary(),
                used_fallback=True,
                failure_reason=str(e),
                raw_response=reply.value.raw,
                model=reply.value.model,
            )

        logger.info(f"Evaluated layout: overall score {summary.overall_score:.0f}")
        return EvaluationOutput(
            summary=summary, raw_response=reply.value.raw, model=reply.value.model
        )


__all__ = [
    "NEUTRAL_SCORE",
    "FactorScore",
    "EvaluationDetail",
    "EvaluationSummary",
    "neutral_summary",
    "EvaluatorConfig",
    "EvaluationOutput",
    "InterfaceEvaluator",
]
