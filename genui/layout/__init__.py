"""Layout specification models and structural validation."""

from .lib import (
    LayoutNode,
    RetrievedContext,
    Specification,
    ValidationError,
    iter_nodes,
    validate_layout,
    validate_specification,
    widget_types,
)

__all__ = [
    "LayoutNode",
    "RetrievedContext",
    "Specification",
    "ValidationError",
    "iter_nodes",
    "widget_types",
    "validate_layout",
    "validate_specification",
]
