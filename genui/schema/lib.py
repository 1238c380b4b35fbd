"""Authoritative schema module for workspace layout definitions.

Single source of truth for the component vocabulary the generator may emit:
- Component types and their categories (layout containers vs. widgets)
- Structural constraints (which components may hold children)
- Prompt-ready descriptions of every component
- The study vocabulary: personas, intents, conditions, rubric factors

All schema-related queries should route through this module.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentCategory(str, Enum):
    """High-level component groupings."""

    LAYOUT = "layout"
    WIDGET = "widget"


class ComponentType(str, Enum):
    """Closed vocabulary of layout containers and workspace widgets."""

    # Layout containers
    LAYOUT_ROW = "layout-row"
    LAYOUT_COL = "layout-col"
    LAYOUT_SPLIT = "layout-split"

    # Widgets
    EDITOR = "widget-editor"
    OUTLINE = "widget-outline"
    KANBAN = "widget-kanban"
    CHAT = "widget-chat"
    MINDMAP = "widget-mindmap"
    STATS = "widget-stats"
    RESEARCH = "widget-research"
    TIMELINE = "widget-timeline"
    CRITIQUE = "widget-critique"


@dataclass(frozen=True)
class ComponentConstraints:
    """Structural constraints for a component type."""

    can_have_children: bool = True
    min_flex: int = 1
    max_flex: int = 12


@dataclass(frozen=True)
class ComponentMeta:
    """Metadata definition for a component type.

    Attributes:
        type: The component type.
        category: Layout container or widget.
        description: Short phrase used in LLM prompts and help output.
        label: Default panel title when the node carries none.
        constraints: Structural rules validated on ingest.
    """

    type: ComponentType
    category: ComponentCategory
    description: str
    label: str
    constraints: ComponentConstraints = field(default_factory=ComponentConstraints)

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to dictionary for schema export."""
        return {
            "type": self.type.value,
            "category": self.category.value,
            "description": self.description,
            "label": self.label,
            "constraints": {
                "can_have_children": self.constraints.can_have_children,
            },
        }


# Widgets are leaves
_LEAF_CONSTRAINTS = ComponentConstraints(can_have_children=False)


COMPONENT_REGISTRY: dict[ComponentType, ComponentMeta] = {
    ComponentType.LAYOUT_ROW: ComponentMeta(
        type=ComponentType.LAYOUT_ROW,
        category=ComponentCategory.LAYOUT,
        description="horizontal container, children side by side",
        label="Row",
    ),
    ComponentType.LAYOUT_COL: ComponentMeta(
        type=ComponentType.LAYOUT_COL,
        category=ComponentCategory.LAYOUT,
        description="vertical container, children stacked",
        label="Column",
    ),
    ComponentType.LAYOUT_SPLIT: ComponentMeta(
        type=ComponentType.LAYOUT_SPLIT,
        category=ComponentCategory.LAYOUT,
        description="split view container, rendered like a row",
        label="Split",
    ),
    ComponentType.EDITOR: ComponentMeta(
        type=ComponentType.EDITOR,
        category=ComponentCategory.WIDGET,
        description="rich text",
        label="Editor",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.OUTLINE: ComponentMeta(
        type=ComponentType.OUTLINE,
        category=ComponentCategory.WIDGET,
        description="hierarchical structure",
        label="Outline",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.KANBAN: ComponentMeta(
        type=ComponentType.KANBAN,
        category=ComponentCategory.WIDGET,
        description="task board",
        label="Task Board",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.CHAT: ComponentMeta(
        type=ComponentType.CHAT,
        category=ComponentCategory.WIDGET,
        description="AI assistant",
        label="AI Assistant",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.MINDMAP: ComponentMeta(
        type=ComponentType.MINDMAP,
        category=ComponentCategory.WIDGET,
        description="visual nodes",
        label="Mind Map",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.STATS: ComponentMeta(
        type=ComponentType.STATS,
        category=ComponentCategory.WIDGET,
        description="metrics/progress",
        label="Progress",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.RESEARCH: ComponentMeta(
        type=ComponentType.RESEARCH,
        category=ComponentCategory.WIDGET,
        description="sources/citations",
        label="Sources",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.TIMELINE: ComponentMeta(
        type=ComponentType.TIMELINE,
        category=ComponentCategory.WIDGET,
        description="revision history",
        label="Revision History",
        constraints=_LEAF_CONSTRAINTS,
    ),
    ComponentType.CRITIQUE: ComponentMeta(
        type=ComponentType.CRITIQUE,
        category=ComponentCategory.WIDGET,
        description="feedback/review",
        label="Feedback",
        constraints=_LEAF_CONSTRAINTS,
    ),
}


def resolve_component_type(value: str | ComponentType) -> ComponentType | None:
    """Convert a raw type string to ComponentType.

    Returns:
        The ComponentType, or None for strings outside the vocabulary.
    """
    if isinstance(value, ComponentType):
        return value
    try:
        return ComponentType(value)
    except ValueError:
        return None


def get_component_meta(component_type: ComponentType | str) -> ComponentMeta:
    """Get metadata for a component type.

    Raises:
        KeyError: If the type is not part of the vocabulary.
    """
    resolved = resolve_component_type(component_type)
    if resolved is None:
        raise KeyError(component_type)
    return COMPONENT_REGISTRY[resolved]


def get_constraints(component_type: ComponentType | str) -> ComponentConstraints:
    """Get structural constraints for a component type."""
    return get_component_meta(component_type).constraints


def get_components_by_category(category: ComponentCategory) -> list[ComponentType]:
    """Get all component types in a category, in declaration order."""
    return [ct for ct in ComponentType if COMPONENT_REGISTRY[ct].category == category]


def is_container_type(component_type: ComponentType | str) -> bool:
    """Return True for layout containers, False for widgets and unknown types."""
    resolved = resolve_component_type(component_type)
    if resolved is None:
        return False
    return COMPONENT_REGISTRY[resolved].category == ComponentCategory.LAYOUT


def describe_component_types() -> str:
    """Render the component vocabulary as a prompt-ready bullet list.

    Containers share one line; each widget gets its own line with a short
    description, e.g. ``- widget-editor (rich text)``.
    """
    containers = get_components_by_category(ComponentCategory.LAYOUT)
    lines = ["- " + ", ".join(ct.value for ct in containers)]
    for ct in get_components_by_category(ComponentCategory.WIDGET):
        lines.append(f"- {ct.value} ({COMPONENT_REGISTRY[ct].description})")
    return "\n".join(lines)


# =============================================================================
# Study Vocabulary
# =============================================================================


class Persona(str, Enum):
    """Cognitive writing personas."""

    VISUAL = "VisualWriter"
    LINEAR = "LinearWriter"
    RESEARCH = "ResearchWriter"


class Intent(str, Enum):
    """Task intent category."""

    WRITE = "write"
    BRAINSTORM = "brainstorm"
    REVIEW = "review"
    RESEARCH = "research"


class Condition(str, Enum):
    """Experimental interface condition."""

    BASELINE_CHAT = "baseline-chat"
    GENERIC_GENUI = "generic-genui"
    PERSONALIZED_GENUI = "personalized-genui"


class Density(str, Enum):
    """Layout density preference."""

    COMPACT = "compact"
    COMFORTABLE = "comfortable"


# Fixed comparison order
CONDITION_ORDER: tuple[Condition, ...] = (
    Condition.BASELINE_CHAT,
    Condition.GENERIC_GENUI,
    Condition.PERSONALIZED_GENUI,
)

CONDITION_DESCRIPTIONS: dict[Condition, str] = {
    Condition.BASELINE_CHAT: "chat-only baseline",
    Condition.GENERIC_GENUI: "generic generated UI",
    Condition.PERSONALIZED_GENUI: "personalized generated UI",
}

PERSONA_DESCRIPTIONS: dict[Persona, tuple[str, str]] = {
    Persona.VISUAL: (
        "Visual Thinker",
        "Spatial organization, mind maps, kanban boards",
    ),
    Persona.LINEAR: (
        "Linear Thinker",
        "Hierarchical outlines, sequential drafting",
    ),
    Persona.RESEARCH: (
        "Research-Focused",
        "Source management, thematic synthesis",
    ),
}

# Rubric factors and their sub-criteria, in reporting order
EVALUATION_FACTORS: dict[str, tuple[str, ...]] = {
    "cognitiveLoad": ("mentalDemand", "temporalDemand", "effort"),
    "clarity": ("visibility", "recognition", "consistency"),
    "efficiency": ("taskCompletion", "flexibility", "errorPrevention"),
    "personalizationFit": ("personaAlignment", "preferenceMatch", "historyUtilization"),
    "aestheticAppeal": ("visualBalance", "whitespace", "coherence"),
}


def coerce_persona(value: Persona | str | None, default: Persona = Persona.VISUAL) -> Persona:
    """Parse a persona id, falling back to ``default`` for unknown values."""
    if isinstance(value, Persona):
        return value
    try:
        return Persona(value)
    except ValueError:
        return default


def coerce_intent(value: Intent | str | None, default: Intent = Intent.WRITE) -> Intent:
    """Parse an intent, falling back to ``default`` for unknown values."""
    if isinstance(value, Intent):
        return value
    try:
        return Intent(value)
    except ValueError:
        return default


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
]
