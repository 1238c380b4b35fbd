"""Condition comparison and batch experiments.

One pipeline run is generate -> evaluate for a single condition. Comparison
mode runs the three conditions concurrently and reports percentage
improvements; the batch experiment repeats that over several study cases and
adds spread and effect sizes.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from genui.config import get_results_path
from genui.evaluation import EvaluationSummary, InterfaceEvaluator
from genui.layout import Specification
from genui.llm.generator import InterfaceGenerator
from genui.schema import (
    CONDITION_ORDER,
    EVALUATION_FACTORS,
    Condition,
    TaskGoal,
    UserProfile,
)
from genui.stats import EffectSize, calculate_effect_size, mean, std_dev

logger = logging.getLogger(__name__)

MAX_WORKERS = len(CONDITION_ORDER)

# (label, new condition, base condition)
COMPARISONS: tuple[tuple[str, Condition, Condition], ...] = (
    ("personalizedVsBaseline", Condition.PERSONALIZED_GENUI, Condition.BASELINE_CHAT),
    ("personalizedVsGeneric", Condition.PERSONALIZED_GENUI, Condition.GENERIC_GENUI),
    ("genericVsBaseline", Condition.GENERIC_GENUI, Condition.BASELINE_CHAT),
)


# =============================================================================
# Single Runs
# =============================================================================


@dataclass
class ConditionResult:
    """Layout and scores for one condition."""

    condition: Condition
    specification: Specification
    evaluation: EvaluationSummary

    @property
    def overall_score(self) -> float:
        return self.evaluation.overall_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition": self.condition.value,
            "specification": self.specification.to_dict(),
            "evaluation": self.evaluation.to_dict(),
        }


def run_condition(
    goal: TaskGoal,
    profile: UserProfile,
    condition: Condition | str,
    *,
    generator: InterfaceGenerator | None = None,
    evaluator: InterfaceEvaluator | None = None,
) -> ConditionResult:
    """Generate a layout for one condition, then evaluate it."""
    condition = Condition(condition)
    generator = generator or InterfaceGenerator()
    evaluator = evaluator or InterfaceEvaluator()

    spec = generator.generate(goal, profile, condition)
    evaluation = evaluator.evaluate(spec, goal, profile, condition)
    logger.info(f"{condition.value}: overall {evaluation.overall_score:.0f}")
    return ConditionResult(condition=condition, specification=spec, evaluation=evaluation)


def run_all_conditions(
    goal: TaskGoal,
    profile: UserProfile,
    *,
    generator: InterfaceGenerator | None = None,
    evaluator: InterfaceEvaluator | None = None,
    max_workers: int = MAX_WORKERS,
) -> list[ConditionResult]:
    """Run every condition concurrently.

    Returns:
        One result per condition, in baseline, generic, personalized order
        regardless of completion order.
    """
    generator = generator or InterfaceGenerator()
    evaluator = evaluator or InterfaceEvaluator()

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="genui") as pool:
        futures = [
            pool.submit(
                run_condition,
                goal,
                profile,
                condition,
                generator=generator,
                evaluator=evaluator,
            )
            for condition in CONDITION_ORDER
        ]
        return [future.result() for future in futures]


# =============================================================================
# Comparison
# =============================================================================


def percentage_difference(new: float, base: float) -> float | None:
    """Relative change of ``new`` over ``base`` in percent, one decimal.

    Returns None when ``base`` is 0.
    """
    if base == 0:
        return None
    return round((new - base) / base * 100, 1)


def format_percentage(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:+.1f}%"


@dataclass
class ConditionComparison:
    """Average overall score per condition plus pairwise improvements."""

    scores: dict[Condition, float]
    improvements: dict[str, float | None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": {c.value: s for c, s in self.scores.items()},
            "improvements": dict(self.improvements),
        }


def _scores_by_condition(
    items: Iterable[tuple[Condition, float]],
) -> dict[Condition, list[float]]:
    grouped: dict[Condition, list[float]] = {c: [] for c in CONDITION_ORDER}
    for condition, score in items:
        grouped[Condition(condition)].append(score)
    return grouped


def _improvements(averages: dict[Condition, float]) -> dict[str, float | None]:
    return {
        label: percentage_difference(averages[new], averages[base])
        for label, new, base in COMPARISONS
    }


def compare_conditions(results: Sequence[ConditionResult]) -> ConditionComparison:
    """Average overall scores per condition and compare them pairwise.

    Conditions without results average to 0, which makes comparisons
    against them None.
    """
    grouped = _scores_by_condition((r.condition, r.overall_score) for r in results)
    averages = {c: mean(scores) for c, scores in grouped.items()}
    return ConditionComparison(scores=averages, improvements=_improvements(averages))


# =============================================================================
# Batch Experiment
# =============================================================================


@dataclass(frozen=True)
class ExperimentCase:
    """One study task: a goal for a profile."""

    goal: TaskGoal
    profile: UserProfile


DEFAULT_CASES: tuple[ExperimentCase, ...] = (
    ExperimentCase(
        goal=TaskGoal(
            description="Help me brainstorm thesis ideas about AI and cognition",
            intent="brainstorm",
        ),
        profile=UserProfile(
            id="u1",
            name="Test User",
            persona="VisualWriter",
            preferences={"density": "comfortable", "show_minimap": True},
        ),
    ),
    ExperimentCase(
        goal=TaskGoal(
            description="Draft a CHI paper introduction on human-AI collaboration",
            intent="write",
        ),
        profile=UserProfile(
            id="u2",
            name="Test User",
            persona="LinearWriter",
            preferences={"density": "compact", "show_minimap": False},
        ),
    ),
)


@dataclass
class ExperimentRecord:
    """One row of the results file."""

    task: str
    persona: str
    condition: Condition
    specification: Specification
    evaluation: EvaluationSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "task": self.task,
            "persona": self.persona,
            "condition": self.condition.value,
            "specification": self.specification.to_dict(),
            "evaluation": self.evaluation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExperimentRecord:
        return cls(
            task=data["task"],
            persona=data["persona"],
            condition=Condition(data["condition"]),
            specification=Specification.model_validate(data["specification"]),
            evaluation=EvaluationSummary.model_validate(data["evaluation"]),
        )


def run_experiment(
    cases: Sequence[ExperimentCase] = DEFAULT_CASES,
    *,
    generator: InterfaceGenerator | None = None,
    evaluator: InterfaceEvaluator | None = None,
    on_record: Callable[[ExperimentRecord], None] | None = None,
) -> list[ExperimentRecord]:
    """Run every case under every condition, sequentially.

    Args:
        cases: Study cases. Defaults to the two built-in cases.
        generator: Shared generator (one is created when None).
        evaluator: Shared evaluator (one is created when None).
        on_record: Called after each record, e.g. for progress output.

    Returns:
        Records ordered by case, then condition.
    """
    generator = generator or InterfaceGenerator()
    evaluator = evaluator or InterfaceEvaluator()
    records: list[ExperimentRecord] = []

    for case in cases:
        logger.info(f"Task: {case.goal.description!r} ({case.profile.persona})")
        for condition in CONDITION_ORDER:
            result = run_condition(
                case.goal,
                case.profile,
                condition,
                generator=generator,
                evaluator=evaluator,
            )
            record = ExperimentRecord(
                task=case.goal.description,
                persona=str(case.profile.persona),
                condition=condition,
                specification=result.specification,
                evaluation=result.evaluation,
            )
            records.append(record)
            if on_record is not None:
                on_record(record)

    return records


@dataclass
class ConditionStats:
    """Overall-score distribution for one condition."""

    mean: float
    std_dev: float
    n: int
    scores: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"mean": self.mean, "stdDev": self.std_dev, "n": self.n, "scores": self.scores}


@dataclass
class ExperimentSummary:
    """Aggregate statistics over experiment records."""

    conditions: dict[Condition, ConditionStats]
    factor_averages: dict[Condition, dict[str, float]]
    improvements: dict[str, float | None]
    effect_sizes: dict[str, EffectSize]
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "conditions": {c.value: s.to_dict() for c, s in self.conditions.items()},
            "factorAverages": {c.value: f for c, f in self.factor_averages.items()},
            "improvements": dict(self.improvements),
            "effectSizes": {k: e.to_dict() for k, e in self.effect_sizes.items()},
            "summary": self.summary,
        }


def _factor_averages(records: Sequence[ExperimentRecord]) -> dict[Condition, dict[str, float]]:
    averages = {}
    for condition in CONDITION_ORDER:
        evaluations = [r.evaluation for r in records if r.condition == condition]
        factors = {
            factor: mean([e.factor_scores()[factor] for e in evaluations])
            for factor in EVALUATION_FACTORS
        }
        factors["overallScore"] = mean([e.overall_score for e in evaluations])
        averages[condition] = factors
    return averages


def summarize_experiment(records: Sequence[ExperimentRecord]) -> ExperimentSummary:
    """Per-condition statistics, improvements and effect sizes."""
    grouped = _scores_by_condition((r.condition, r.evaluation.overall_score) for r in records)
    conditions = {
        c: ConditionStats(mean=mean(s), std_dev=std_dev(s), n=len(s), scores=list(s))
        for c, s in grouped.items()
    }
    improvements = _improvements({c: s.mean for c, s in conditions.items()})
    effect_sizes = {
        label: calculate_effect_size(grouped[new], grouped[base])
        for label, new, base in COMPARISONS
    }

    personalized = conditions[Condition.PERSONALIZED_GENUI]
    baseline = conditions[Condition.BASELINE_CHAT]
    headline = effect_sizes["personalizedVsBaseline"]
    summary = (
        f"Personalized GenUI averaged {personalized.mean:.1f} vs "
        f"{baseline.mean:.1f} for the chat baseline "
        f"({format_percentage(improvements['personalizedVsBaseline'])}, "
        f"d = {headline.cohens_d}, {headline.interpretation} effect) "
        f"over {len(records)} evaluations."
    )

    return ExperimentSummary(
        conditions=conditions,
        factor_averages=_factor_averages(records),
        improvements=improvements,
        effect_sizes=effect_sizes,
        summary=summary,
    )


def save_results(records: Sequence[ExperimentRecord], path: Path | str | None = None) -> Path:
    """Write records as an ordered JSON list.

    Args:
        records: Records to write.
        path: Output file. Defaults to GENUI_RESULTS_PATH.

    Returns:
        The path written.
    """
    output = get_results_path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps([r.to_dict() for r in records], indent=2), encoding="utf-8"
    )
    logger.info(f"Saved {len(records)} records to {output}")
    return output


def load_results(path: Path | str | None = None) -> list[ExperimentRecord]:
    """Read records written by ``save_results``."""
    source = get_results_path(path)
    data = json.loads(source.read_text(encoding="utf-8"))
    return [ExperimentRecord.from_dict(item) for item in data]


__all__ = [
    "MAX_WORKERS",
    "COMPARISONS",
    "ConditionResult",
    "run_condition",
    "run_all_conditions",
    "percentage_difference",
    "format_percentage",
    "ConditionComparison",
    "compare_conditions",
    "ExperimentCase",
    "DEFAULT_CASES",
    "ExperimentRecord",
    "run_experiment",
    "ConditionStats",
    "ExperimentSummary",
    "summarize_experiment",
    "save_results",
    "load_results",
]
