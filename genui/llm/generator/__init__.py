"""Interface generation with condition-specific fallbacks."""

from .lib import (
    FALLBACK_LAYOUTS,
    VALIDATION_FAILURE,
    GenerationOutput,
    GeneratorConfig,
    InterfaceGenerator,
    describe_failure,
    fallback_specification,
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
