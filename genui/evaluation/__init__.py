"""Rubric evaluation of generated layouts.

Example:
    >>> from genui.evaluation import InterfaceEvaluator
    >>> summary = InterfaceEvaluator().evaluate(spec, goal, profile, "generic-genui")
"""

from .lib import (
    NEUTRAL_SCORE,
    EvaluationDetail,
    EvaluationOutput,
    EvaluationSummary,
    EvaluatorConfig,
    FactorScore,
    InterfaceEvaluator,
    neutral_summary,
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
