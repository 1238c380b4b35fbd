"""Statistics helpers for comparing experimental conditions."""

from .lib import (
    EFFECT_THRESHOLDS,
    EffectSize,
    calculate_effect_size,
    interpret_effect_size,
    mean,
    std_dev,
)

__all__ = [
    "EFFECT_THRESHOLDS",
    "EffectSize",
    "mean",
    "std_dev",
    "interpret_effect_size",
    "calculate_effect_size",
]
