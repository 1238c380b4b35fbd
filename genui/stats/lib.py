"""Descriptive statistics and effect sizes for condition comparisons."""

import math
from dataclasses import dataclass
from typing import Sequence

# Cohen's conventional thresholds on |d|
EFFECT_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.2, "negligible"),
    (0.5, "small"),
    (0.8, "medium"),
)


@dataclass(frozen=True)
class EffectSize:
    """Cohen's d with its conventional label."""

    cohens_d: float
    interpretation: str

    def to_dict(self) -> dict:
        return {"cohensD": self.cohens_d, "interpretation": self.interpretation}


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Empty input gives 0."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation. Empty input gives 0."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def _sample_variance(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / (len(values) - 1)


def interpret_effect_size(d: float) -> str:
    magnitude = abs(d)
    for limit, label in EFFECT_THRESHOLDS:
        if magnitude < limit:
            return label
    return "large"


def calculate_effect_size(group1: Sequence[float], group2: Sequence[float]) -> EffectSize:
    """Cohen's d of group1 over group2 using the pooled sample variance.

    d is 0 when there are fewer than one degree of freedom overall or the
    pooled standard deviation is 0.

    Example:
        >>> calculate_effect_size([70, 72, 68], [40, 42, 38]).interpretation
        'large'
    """
    n1, n2 = len(group1), len(group2)
    dof = n1 + n2 - 2
    d = 0.0

    if dof > 0:
        pooled = (
            (n1 - 1) * _sample_variance(group1) + (n2 - 1) * _sample_variance(group2)
        ) / dof
        pooled_sd = math.sqrt(pooled)
        if pooled_sd > 0:
            d = (mean(group1) - mean(group2)) / pooled_sd

    d = round(d, 2)
    return EffectSize(cohens_d=d, interpretation=interpret_effect_size(d))


__all__ = [
    "EFFECT_THRESHOLDS",
    "EffectSize",
    "mean",
    "std_dev",
    "interpret_effect_size",
    "calculate_effect_size",
]
