"""Layout specification: the contract between generator, renderer and evaluator.

A ``Specification`` wraps a recursive ``LayoutNode`` tree. Containers
(``layout-row``, ``layout-col``, ``layout-split``) hold ordered children;
widgets are leaves. Everything the LLM returns is untrusted and passes through
``validate_specification`` before anything else sees it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from genui.core.result import Failure, Outcome, Success
from genui.schema import ComponentType, get_constraints, resolve_component_type


class LayoutNode(BaseModel):
    """Recursive node definition for the workspace layout tree.

    Attributes:
        id: Unique identifier for the node within the tree.
        type: Container or widget type.
        title: Optional panel heading for widgets.
        flex: Relative size (1-12) among siblings. Absent means 1.
        children: Ordered child nodes (containers only).
        props: Optional free-form values used to seed widget state.
    """

    model_config = ConfigDict(use_enum_values=True, frozen=True)

    id: str = Field(..., min_length=1, description="Unique identifier for the node")
    type: ComponentType = Field(..., description="Component type")
    title: str | None = Field(None, description="Panel title")
    flex: int | None = Field(None, ge=1, le=12, description="Relative size 1-12")
    children: list[LayoutNode] = Field(default_factory=list)
    props: dict[str, Any] | None = Field(None, description="Widget seed values")

    @property
    def effective_flex(self) -> int:
        """Flex weight used for layout (defaults to 1)."""
        return self.flex or 1


class RetrievedContext(BaseModel):
    """Knowledge that shaped a personalized layout, kept for explainability."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    persona_traits: list[str] | None = None
    matched_patterns: list[str] | None = None
    behavior_insights: list[str] | None = None


class Specification(BaseModel):
    """A generated (or fallback) workspace layout."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    layout: LayoutNode
    theme: str | None = None
    rationale: str | None = None
    retrieved_context: RetrievedContext | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire-format dictionary (camelCase keys, unset fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


# =============================================================================
# Tree Helpers
# =============================================================================


def iter_nodes(node: LayoutNode) -> Iterator[LayoutNode]:
    """Yield every node in depth-first, document order."""
    yield node
    for child in node.children:
        yield from iter_nodes(child)


def widget_types(node: LayoutNode) -> list[str]:
    """List widget type strings in document order."""
    return [
        str(n.type)
        for n in iter_nodes(node)
        if resolve_component_type(n.type) is not None
        and not get_constraints(n.type).can_have_children
    ]


# =============================================================================
# Validation
# =============================================================================


@dataclass
class ValidationError:
    """Represents a validation error in a layout tree.

    Attributes:
        node_id: ID of the node where the error occurred.
        message: Human-readable error description.
        error_type: Machine-readable error classification.
    """

    node_id: str
    message: str
    error_type: str


def validate_layout(node: LayoutNode) -> list[ValidationError]:
    """Validate a LayoutNode tree for structural issues.

    Checks for:
    - Duplicate IDs within the tree
    - Types outside the component vocabulary
    - Widgets carrying children
    - flex values outside valid range 1-12

    Args:
        node: Root node of the layout tree to validate.

    Returns:
        List of ValidationError objects. Empty list if valid.
    """
    errors: list[ValidationError] = []
    id_counts: dict[str, int] = {}

    def visit(n: LayoutNode) -> None:
        id_counts[n.id] = id_counts.get(n.id, 0) + 1

        if n.flex is not None and not 1 <= n.flex <= 12:
            errors.append(
                ValidationError(
                    node_id=n.id,
                    message=f"flex {n.flex} outside valid range 1-12",
                    error_type="invalid_flex",
                )
            )

        comp_type = resolve_component_type(n.type)
        if comp_type is None:
            errors.append(
                ValidationError(
                    node_id=n.id,
                    message=f"Unknown component type '{n.type}'",
                    error_type="unknown_type",
                )
            )
        elif not get_constraints(comp_type).can_have_children and n.children:
            errors.append(
                ValidationError(
                    node_id=n.id,
                    message=(
                        f"Component '{comp_type.value}' cannot have "
                        f"children (found {len(n.children)})"
                    ),
                    error_type="constraint_violation",
                )
            )

        for child in n.children:
            visit(child)

    visit(node)

    for node_id, count in id_counts.items():
        if count > 1:
            errors.append(
                ValidationError(
                    node_id=node_id,
                    message=f"Duplicate ID '{node_id}' appears {count} times",
                    error_type="duplicate_id",
                )
            )

    return errors


def _describe_pydantic_error(exc: PydanticValidationError) -> str:
    """Condense pydantic errors to one line, e.g. ``layout.type: Field required``."""
    details = exc.errors()
    first = details[0]
    location = ".".join(str(part) for part in first["loc"]) or "root"
    reason = f"{location}: {first['msg']}"
    if len(details) > 1:
        reason += f" (+{len(details) - 1} more)"
    return reason


def validate_specification(data: Any) -> Outcome[Specification]:
    """Parse and validate untrusted layout data.

    Args:
        data: Decoded JSON (expected to be an object with a ``layout`` key).

    Returns:
        Success with the Specification, or Failure with a one-line reason.
    """
    if not isinstance(data, dict):
        return Failure(
            f"expected a JSON object, got {type(data).__name__}", kind="validation"
        )

    try:
        spec = Specification.model_validate(data)
    except PydanticValidationError as exc:
        return Failure(_describe_pydantic_error(exc), kind="validation")

    errors = validate_layout(spec.layout)
    if errors:
        return Failure("; ".join(e.message for e in errors[:3]), kind="validation")

    return Success(spec)


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
