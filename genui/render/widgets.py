"""Interactive widget state.

Each widget class holds the private state of one panel in a rendered
workspace. Instances are created by the renderer, one per widget node, so
two panels of the same type never share state. Widgets are plain Python;
drawing them is left to ``genui.render.draw``.

Optional node ``props`` seed the initial state, e.g. ``{"text": "..."}`` for
an editor or ``{"greeting": "..."}`` for a chat panel. Props come from model
output, so a value of the wrong type is logged and the default is kept.
"""

from __future__ import annotations

import itertools
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, ClassVar

from genui.schema import ComponentType

DEFAULT_EDITOR_TEXT = (
    "The impact of Generative AI on cognitive workflows is increasingly significant. "
    "This paper explores how dynamically generated interfaces can reduce cognitive load..."
)
CHAT_GREETING = "How can I help you with your writing task?"

logger = logging.getLogger(__name__)


def count_words(text: str) -> int:
    return len(text.split())


def _prop(props: dict[str, Any] | None, name: str, expected: type) -> Any:
    """Return ``props[name]`` when it has the expected type, else None."""
    value = (props or {}).get(name)
    if value is None or isinstance(value, expected):
        return value
    logger.warning(
        f"Ignoring widget prop '{name}': expected {expected.__name__}, "
        f"got {type(value).__name__}"
    )
    return None


@dataclass
class Widget:
    """Base class for widget state.

    Attributes:
        key: Stable key derived from tree position and node id.
    """

    kind: ClassVar[ComponentType]

    key: str

    @classmethod
    def from_props(cls, key: str, props: dict[str, Any] | None = None) -> Widget:
        """Create a widget, applying any recognized ``props``."""
        return cls(key=key)


class _Sequence:
    """Per-instance id source for items added at runtime."""

    def __init__(self, start: int):
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        return next(self._counter)


# =============================================================================
# Writing Widgets
# =============================================================================


@dataclass
class EditorWidget(Widget):
    """Free text editor with a live word count."""

    kind: ClassVar[ComponentType] = ComponentType.EDITOR

    text: str = DEFAULT_EDITOR_TEXT

    @classmethod
    def from_props(cls, key, props=None):
        text = _prop(props, "text", str)
        return cls(key=key, text=DEFAULT_EDITOR_TEXT if text is None else text)

    @property
    def word_count(self) -> int:
        return count_words(self.text)

    def set_text(self, text: str) -> None:
        self.text = text


@dataclass
class OutlineSection:
    id: int
    title: str
    level: int = 0


def _default_sections() -> list[OutlineSection]:
    return [
        OutlineSection(1, "Introduction", 0),
        OutlineSection(2, "Problem Statement", 1),
        OutlineSection(3, "Methodology", 0),
        OutlineSection(4, "Data Collection", 1),
        OutlineSection(5, "Results", 0),
        OutlineSection(6, "Discussion", 0),
    ]


@dataclass
class OutlineWidget(Widget):
    """Document outline with sections that can be added and removed."""

    kind: ClassVar[ComponentType] = ComponentType.OUTLINE

    sections: list[OutlineSection] = field(default_factory=_default_sections)

    def __post_init__(self):
        self._next_id = _Sequence(max((s.id for s in self.sections), default=0) + 1)

    @classmethod
    def from_props(cls, key, props=None):
        titles = [
            t.strip()
            for t in _prop(props, "sections", list) or []
            if isinstance(t, str) and t.strip()
        ]
        if not titles:
            return cls(key=key)
        return cls(
            key=key,
            sections=[OutlineSection(i, t) for i, t in enumerate(titles, start=1)],
        )

    def add_section(self, title: str, level: int = 0) -> OutlineSection | None:
        """Append a section. Blank titles are ignored."""
        title = title.strip()
        if not title:
            return None
        section = OutlineSection(self._next_id(), title, level)
        self.sections.append(section)
        return section

    def remove_section(self, section_id: int) -> None:
        self.sections = [s for s in self.sections if s.id != section_id]


@dataclass
class KanbanCard:
    id: int
    text: str


@dataclass
class KanbanColumn:
    name: str
    cards: list[KanbanCard] = field(default_factory=list)


def _default_columns() -> list[KanbanColumn]:
    return [
        KanbanColumn("To Do", [KanbanCard(1, "Research related work"), KanbanCard(2, "Draft abstract")]),
        KanbanColumn("In Progress", [KanbanCard(3, "Outline methodology")]),
        KanbanColumn("Done", [KanbanCard(4, "Define research question")]),
    ]


@dataclass
class KanbanWidget(Widget):
    """Task board; cards move left to right through the columns."""

    kind: ClassVar[ComponentType] = ComponentType.KANBAN

    columns: list[KanbanColumn] = field(default_factory=_default_columns)

    def __post_init__(self):
        highest = max((c.id for col in self.columns for c in col.cards), default=0)
        self._next_id = _Sequence(highest + 1)

    def column(self, name: str) -> KanbanColumn:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"No column named '{name}'")

    def add_card(self, column: str, text: str) -> KanbanCard | None:
        text = text.strip()
        if not text:
            return None
        card = KanbanCard(self._next_id(), text)
        self.column(column).cards.append(card)
        return card

    def next_column(self, column: str) -> str | None:
        names = [col.name for col in self.columns]
        index = names.index(column)
        return names[index + 1] if index + 1 < len(names) else None

    def move_card(self, card_id: int, from_column: str, to_column: str) -> bool:
        """Move a card between columns. Returns False if the card is missing."""
        source = self.column(from_column)
        target = self.column(to_column)
        card = next((c for c in source.cards if c.id == card_id), None)
        if card is None:
            return False
        source.cards.remove(card)
        target.cards.append(card)
        return True


@dataclass
class ChatMessage:
    role: str
    text: str


@dataclass
class ChatWidget(Widget):
    """Chat transcript with a simulated assistant."""

    kind: ClassVar[ComponentType] = ComponentType.CHAT

    messages: list[ChatMessage] = field(
        default_factory=lambda: [ChatMessage("ai", CHAT_GREETING)]
    )

    @classmethod
    def from_props(cls, key, props=None):
        greeting = _prop(props, "greeting", str) or CHAT_GREETING
        return cls(key=key, messages=[ChatMessage("ai", greeting)])

    @staticmethod
    def reply_to(message: str) -> str:
        return f'I can help with that! Here are some suggestions for "{message[:30]}..."'

    def send(self, message: str) -> ChatMessage | None:
        """Append the user message and the assistant reply."""
        message = message.strip()
        if not message:
            return None
        self.messages.append(ChatMessage("user", message))
        reply = ChatMessage("ai", self.reply_to(message))
        self.messages.append(reply)
        return reply


@dataclass
class MindMapNode:
    id: str
    label: str
    x: float
    y: float


def _default_nodes() -> list[MindMapNode]:
    return [
        MindMapNode("center", "Central Idea", 50, 50),
        MindMapNode("n1", "Theme A", 25, 30),
        MindMapNode("n2", "Theme B", 75, 70),
    ]


@dataclass
class MindMapWidget(Widget):
    """Spatial idea map. Positions are percentages of the canvas."""

    kind: ClassVar[ComponentType] = ComponentType.MINDMAP

    nodes: list[MindMapNode] = field(default_factory=_default_nodes)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def __post_init__(self):
        self._next_id = _Sequence(len(self.nodes))

    @classmethod
    def from_props(cls, key, props=None):
        center = _prop(props, "center", str)
        widget = cls(key=key)
        if center and center.strip():
            widget.nodes[0].label = center.strip()
        return widget

    @property
    def center(self) -> MindMapNode:
        return self.nodes[0]

    def add_node(self, label: str) -> MindMapNode | None:
        """Place a new idea on a ring 25-40% away from the center."""
        label = label.strip()
        if not label:
            return None
        angle = self.rng.random() * math.pi * 2
        radius = 25 + self.rng.random() * 15
        node = MindMapNode(
            id=f"n{self._next_id()}",
            label=label,
            x=50 + radius * math.cos(angle),
            y=50 + radius * math.sin(angle),
        )
        self.nodes.append(node)
        return node


# =============================================================================
# Context Widgets
# =============================================================================


@dataclass(frozen=True)
class Metric:
    label: str
    value: str


STATS_METRICS: tuple[Metric, ...] = (
    Metric("Words", "342"),
    Metric("Time", "12m"),
    Metric("Focus", "85%"),
    Metric("Sections", "3/7"),
)


@dataclass
class StatsWidget(Widget):
    """Fixed writing metrics."""

    kind: ClassVar[ComponentType] = ComponentType.STATS

    metrics: tuple[Metric, ...] = STATS_METRICS


@dataclass
class Source:
    id: int
    title: str
    type: str = "paper"
    url: str = "#"


def _default_sources() -> list[Source]:
    return [
        Source(1, "Chen et al. (2025)", "paper"),
        Source(2, "Lewis et al. (2020)", "paper"),
        Source(3, "Nielsen (2012)", "guideline"),
    ]


@dataclass
class ResearchWidget(Widget):
    """Source list for citation tracking."""

    kind: ClassVar[ComponentType] = ComponentType.RESEARCH

    sources: list[Source] = field(default_factory=_default_sources)

    def __post_init__(self):
        self._next_id = _Sequence(max((s.id for s in self.sources), default=0) + 1)

    def add_source(self, title: str, source_type: str = "paper") -> Source | None:
        title = title.strip()
        if not title:
            return None
        source = Source(self._next_id(), title, source_type)
        self.sources.append(source)
        return source


@dataclass(frozen=True)
class RevisionEvent:
    time: str
    action: str
    type: str


TIMELINE_EVENTS: tuple[RevisionEvent, ...] = (
    RevisionEvent("2 min ago", "Edited Introduction", "edit"),
    RevisionEvent("10 min ago", "AI suggestion applied", "ai"),
    RevisionEvent("25 min ago", "Added Methodology section", "add"),
    RevisionEvent("1 hour ago", "Started draft", "start"),
)


@dataclass
class TimelineWidget(Widget):
    """Fixed revision history, newest first."""

    kind: ClassVar[ComponentType] = ComponentType.TIMELINE

    events: tuple[RevisionEvent, ...] = TIMELINE_EVENTS


@dataclass
class CritiqueItem:
    id: int
    type: str
    text: str
    resolved: bool = False


def _default_critiques() -> list[CritiqueItem]:
    return [
        CritiqueItem(1, "suggestion", "Consider strengthening the thesis statement"),
        CritiqueItem(2, "warning", "Paragraph 3 may be too long for readability"),
        CritiqueItem(3, "positive", "Strong use of evidence in the methodology section", True),
    ]


@dataclass
class CritiqueWidget(Widget):
    """Feedback items that can be marked resolved."""

    kind: ClassVar[ComponentType] = ComponentType.CRITIQUE

    items: list[CritiqueItem] = field(default_factory=_default_critiques)

    @property
    def open_count(self) -> int:
        return sum(1 for item in self.items if not item.resolved)

    def toggle_resolved(self, item_id: int) -> None:
        for item in self.items:
            if item.id == item_id:
                item.resolved = not item.resolved


# =============================================================================
# Registry
# =============================================================================

WIDGET_CLASSES: dict[ComponentType, type[Widget]] = {
    cls.kind: cls
    for cls in (
        EditorWidget,
        OutlineWidget,
        KanbanWidget,
        ChatWidget,
        MindMapWidget,
        StatsWidget,
        ResearchWidget,
        TimelineWidget,
        CritiqueWidget,
    )
}


def create_widget(
    component_type: ComponentType, key: str, props: dict[str, Any] | None = None
) -> Widget:
    """Create a fresh widget instance for a widget type.

    Raises:
        KeyError: If the type is not a widget type.
    """
    return WIDGET_CLASSES[component_type].from_props(key, props)


__all__ = [
    "DEFAULT_EDITOR_TEXT",
    "CHAT_GREETING",
    "STATS_METRICS",
    "TIMELINE_EVENTS",
    "Widget",
    "EditorWidget",
    "OutlineSection",
    "OutlineWidget",
    "KanbanCard",
    "KanbanColumn",
    "KanbanWidget",
    "ChatMessage",
    "ChatWidget",
    "MindMapNode",
    "MindMapWidget",
    "Metric",
    "StatsWidget",
    "Source",
    "ResearchWidget",
    "RevisionEvent",
    "TimelineWidget",
    "CritiqueItem",
    "CritiqueWidget",
    "WIDGET_CLASSES",
    "create_widget",
    "count_words",
]
