"""Component vocabulary, study enums and request models.

Example:
    >>> from genui.schema import ComponentType, is_container_type
    >>> is_container_type(ComponentType.LAYOUT_ROW)
    True
"""

from .lib import (
    COMPONENT_REGISTRY,
    CONDITION_DESCRIPTIONS,
    CONDITION_ORDER,
    EVALUATION_FACTORS,
    PERSONA_DESCRIPTIONS,
    ComponentCategory,
    ComponentConstraints,
    ComponentMeta,
    ComponentType,
    Condition,
    Density,
    Intent,
    Persona,
    coerce_intent,
    coerce_persona,
    describe_component_types,
    get_component_meta,
    get_components_by_category,
    get_constraints,
    is_container_type,
    resolve_component_type,
)
from .models import Preferences, TaskGoal, UserProfile

__all__ = [
    # Components
    "ComponentCategory",
    "ComponentType",
    "ComponentConstraints",
    "ComponentMeta",
    "COMPONENT_REGISTRY",
    "resolve_component_type",
    "get_component_meta",
    "get_constraints",
    "get_components_by_category",
    "is_container_type",
    "describe_component_types",
    # Study vocabulary
    "Persona",
    "Intent",
    "Condition",
    "Density",
    "CONDITION_ORDER",
    "CONDITION_DESCRIPTIONS",
    "PERSONA_DESCRIPTIONS",
    "EVALUATION_FACTORS",
    "coerce_persona",
    "coerce_intent",
    # Models
    "TaskGoal",
    "Preferences",
    "UserProfile",
]
