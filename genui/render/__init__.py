"""Renderer: layout specifications to interactive widget trees.

``genui.render`` is pure Python. Streamlit drawing lives in
``genui.render.draw`` and is imported only by the UI.

Example:
    >>> from genui.render import render_specification, iter_widgets
    >>> view = render_specification(spec)
    >>> [panel.title for panel in iter_widgets(view)]
"""

from .lib import (
    ContainerView,
    Direction,
    PanelView,
    UnknownView,
    View,
    format_layout_tree,
    iter_views,
    iter_widgets,
    render,
    render_specification,
)
from .widgets import (
    ChatWidget,
    CritiqueWidget,
    EditorWidget,
    KanbanWidget,
    MindMapWidget,
    OutlineWidget,
    ResearchWidget,
    StatsWidget,
    TimelineWidget,
    Widget,
    create_widget,
)

__all__ = [
    # Views
    "Direction",
    "ContainerView",
    "PanelView",
    "UnknownView",
    "View",
    "render",
    "render_specification",
    "iter_views",
    "iter_widgets",
    "format_layout_tree",
    # Widgets
    "Widget",
    "EditorWidget",
    "OutlineWidget",
    "KanbanWidget",
    "ChatWidget",
    "MindMapWidget",
    "StatsWidget",
    "ResearchWidget",
    "TimelineWidget",
    "CritiqueWidget",
    "create_widget",
]
