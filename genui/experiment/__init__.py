"""Three-condition comparison and batch experiments.

Example:
    >>> from genui.experiment import run_all_conditions, compare_conditions
    >>> results = run_all_conditions(goal, profile)
    >>> compare_conditions(results).improvements["personalizedVsBaseline"]
"""

from .lib import (
    COMPARISONS,
    DEFAULT_CASES,
    MAX_WORKERS,
    ConditionComparison,
    ConditionResult,
    ConditionStats,
    ExperimentCase,
    ExperimentRecord,
    ExperimentSummary,
    compare_conditions,
    format_percentage,
    load_results,
    percentage_difference,
    run_all_conditions,
    run_condition,
    run_experiment,
    save_results,
    summarize_experiment,
)

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
