"""Layout renderer: specification tree to view tree.

``render`` is a pure recursive transform. Containers become
``ContainerView`` objects holding their children in order; each widget node
becomes a ``PanelView`` wrapping a freshly created widget instance; anything
unrecognized becomes an ``UnknownView`` placeholder. Rendering the same
specification twice yields two independent sets of widgets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Literal, Union

from genui.layout import LayoutNode, Specification
from genui.schema import ComponentType, is_container_type, resolve_component_type

from .widgets import Widget, create_widget

logger = logging.getLogger(__name__)

Direction = Literal["row", "column"]

# layout-split is drawn as a plain row; children keep their own flex
_DIRECTIONS: dict[ComponentType, Direction] = {
    ComponentType.LAYOUT_ROW: "row",
    ComponentType.LAYOUT_SPLIT: "row",
    ComponentType.LAYOUT_COL: "column",
}


@dataclass
class ContainerView:
    """Flex container laying out its children in a row or a column."""

    key: str
    direction: Direction
    flex: int = 1
    children: list[View] = field(default_factory=list)


@dataclass
class PanelView:
    """Titled panel around one widget instance."""

    key: str
    component_type: ComponentType
    widget: Widget
    title: str | None = None
    flex: int = 1


@dataclass
class UnknownView:
    """Visible placeholder for a node type the renderer does not know."""

    key: str
    type_name: str
    flex: int = 1

    @property
    def message(self) -> str:
        return f"Unknown Component: {self.type_name}"


View = Union[ContainerView, PanelView, UnknownView]


def _view_key(node: LayoutNode, path: str) -> str:
    return f"{path}:{node.id}"


def render(node: LayoutNode, path: str = "0") -> View:
    """Render a layout node and its subtree.

    Args:
        node: Node to render.
        path: Tree position of the node (``"0"`` for the root, ``"0.1"``
            for the root's second child and so on).

    Returns:
        View tree mirroring the node tree.
    """
    key = _view_key(node, path)
    flex = node.flex or 1
    component_type = resolve_component_type(node.type)

    if component_type is None:
        logger.warning(f"Unknown component type '{node.type}' at {path}")
        return UnknownView(key=key, type_name=str(node.type), flex=flex)

    if is_container_type(component_type):
        return ContainerView(
            key=key,
            direction=_DIRECTIONS[component_type],
            flex=flex,
            children=[
                render(child, f"{path}.{index}")
                for index, child in enumerate(node.children)
            ],
        )

    return PanelView(
        key=key,
        component_type=component_type,
        widget=create_widget(component_type, key, node.props),
        title=node.title,
        flex=flex,
    )


def render_specification(spec: Specification, namespace: str | None = None) -> View:
    """Render a specification's layout with fresh widget state.

    Args:
        spec: Specification to render.
        namespace: Prefix for every view key. Views drawn in the same
            Streamlit session need distinct namespaces.
    """
    return render(spec.layout, path=f"{namespace}/0" if namespace else "0")


def iter_views(view: View) -> Iterator[View]:
    """Walk a view tree depth-first, parents before children."""
    yield view
    if isinstance(view, ContainerView):
        for child in view.children:
            yield from iter_views(child)


def iter_widgets(view: View) -> Iterator[PanelView]:
    """Yield every panel in a view tree in document order."""
    for item in iter_views(view):
        if isinstance(item, PanelView):
            yield item


def format_layout_tree(node: LayoutNode) -> str:
    """Format a layout tree for terminal output.

    Example output:
        root [layout-row]
        ├── Idea Map [widget-mindmap, flex 3]
        └── side [layout-col, flex 2]
            ├── Idea Board [widget-kanban]
            └── Assistant [widget-chat]
    """
    lines: list[str] = []
    _format_node(node, lines, "", is_last=True, is_root=True)
    return "\n".join(lines)


def _format_node(
    node: LayoutNode,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool = False,
) -> None:
    if is_root:
        connector = ""
        child_prefix = ""
    else:
        connector = "└── " if is_last else "├── "
        child_prefix = prefix + ("    " if is_last else "│   ")

    attrs = [str(node.type)]
    if node.flex and node.flex != 1:
        attrs.append(f"flex {node.flex}")

    lines.append(f"{prefix}{connector}{node.title or node.id} [{', '.join(attrs)}]")

    for i, child in enumerate(node.children):
        _format_node(child, lines, child_prefix, i == len(node.children) - 1)


__all__ = [
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
]
