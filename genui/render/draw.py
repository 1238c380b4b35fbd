"""Draw rendered view trees with Streamlit.

Views carry their widget instances, so the caller keeps the view tree in
``st.session_state`` to preserve widget state across reruns. Every Streamlit
element key is derived from the widget key, which keeps two panels of the
same type apart.
"""

from __future__ import annotations

import streamlit as st

from .lib import ContainerView, PanelView, UnknownView, View
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
)

CRITIQUE_ICONS = {"suggestion": "💡", "warning": "⚠️", "positive": "✅"}
TIMELINE_ICONS = {"edit": "✏️", "ai": "🤖", "add": "➕", "start": "🚀"}


def mindmap_dot(widget: MindMapWidget) -> str:
    """Graphviz source for a mind map, pinning nodes to their positions."""
    lines = [
        "graph mindmap {",
        "  layout=neato;",
        '  node [shape=box, style="rounded,filled", fillcolor="#eef2ff", fontsize=10];',
    ]
    for node in widget.nodes:
        # neato expects inches; the canvas is 100 units wide
        x, y = node.x / 20, (100 - node.y) / 20
        label = node.label.replace('"', '\\"')
        lines.append(f'  "{node.id}" [label="{label}", pos="{x:.2f},{y:.2f}!"];')
    for node in widget.nodes[1:]:
        lines.append(f'  "{widget.center.id}" -- "{node.id}";')
    lines.append("}")
    return "\n".join(lines)


# =============================================================================
# Layout
# =============================================================================


def draw_view(view: View) -> None:
    """Draw a view tree into the current Streamlit container."""
    if isinstance(view, ContainerView):
        _draw_container(view)
    elif isinstance(view, PanelView):
        _draw_panel(view)
    elif isinstance(view, UnknownView):
        st.warning(view.message)
    else:
        raise TypeError(f"Cannot draw {type(view).__name__}")


def _draw_container(view: ContainerView) -> None:
    if not view.children:
        return
    if view.direction == "row":
        columns = st.columns([child.flex for child in view.children], gap="small")
        for column, child in zip(columns, view.children):
            with column:
                draw_view(child)
    else:
        for child in view.children:
            draw_view(child)


def _draw_panel(view: PanelView) -> None:
    with st.container(border=True):
        if view.title:
            st.markdown(f"**{view.title}**")
        draw_widget(view.widget)


# =============================================================================
# Widgets
# =============================================================================


def draw_widget(widget: Widget) -> None:
    """Draw one widget and apply any interaction to its state."""
    drawer = _DRAWERS.get(type(widget))
    if drawer is None:
        st.warning(f"Unknown Component: {widget.kind}")
        return
    drawer(widget)


def _draw_editor(widget: EditorWidget) -> None:
    text = st.text_area(
        "Editor",
        value=widget.text,
        key=f"{widget.key}-text",
        height=240,
        placeholder="Start writing...",
        label_visibility="collapsed",
    )
    widget.set_text(text)
    st.caption(f"{widget.word_count} words")


def _draw_outline(widget: OutlineWidget) -> None:
    for section in list(widget.sections):
        label_col, remove_col = st.columns([6, 1])
        indent = "&nbsp;" * 4 * section.level
        label_col.markdown(f"{indent}{section.title}")
        if remove_col.button("✕", key=f"{widget.key}-remove-{section.id}"):
            widget.remove_section(section.id)
            st.rerun()

    with st.form(f"{widget.key}-add", clear_on_submit=True, border=False):
        title = st.text_input("New section", placeholder="Add section...", key=f"{widget.key}-section-input")
        if st.form_submit_button("Add") and widget.add_section(title):
            st.rerun()


def _draw_kanban(widget: KanbanWidget) -> None:
    columns = st.columns(len(widget.columns))
    for column, board_column in zip(columns, widget.columns):
        with column:
            st.markdown(f"**{board_column.name}** ({len(board_column.cards)})")
            target = widget.next_column(board_column.name)
            for card in list(board_column.cards):
                st.markdown(f"- {card.text}")
                if target and st.button(
                    f"→ {target}", key=f"{widget.key}-move-{card.id}"
                ):
                    widget.move_card(card.id, board_column.name, target)
                    st.rerun()

            with st.form(f"{widget.key}-add-{board_column.name}", clear_on_submit=True, border=False):
                text = st.text_input(
                    "New card",
                    placeholder="Add card...",
                    key=f"{widget.key}-card-input-{board_column.name}",
                    label_visibility="collapsed",
                )
                if st.form_submit_button("+") and widget.add_card(board_column.name, text):
                    st.rerun()


def _draw_chat(widget: ChatWidget) -> None:
    for message in widget.messages:
        with st.chat_message("assistant" if message.role == "ai" else "user"):
            st.write(message.text)

    with st.form(f"{widget.key}-send", clear_on_submit=True, border=False):
        text = st.text_input(
            "Message", placeholder="Ask AI for help...", key=f"{widget.key}-message", label_visibility="collapsed"
        )
        if st.form_submit_button("Send") and widget.send(text):
            st.rerun()


def _draw_mindmap(widget: MindMapWidget) -> None:
    st.graphviz_chart(mindmap_dot(widget))
    with st.form(f"{widget.key}-add", clear_on_submit=True, border=False):
        label = st.text_input(
            "New idea", placeholder="Add idea...", key=f"{widget.key}-idea", label_visibility="collapsed"
        )
        if st.form_submit_button("Add") and widget.add_node(label):
            st.rerun()


def _draw_stats(widget: StatsWidget) -> None:
    for start in range(0, len(widget.metrics), 2):
        cells = st.columns(2)
        for cell, metric in zip(cells, widget.metrics[start : start + 2]):
            cell.metric(metric.label, metric.value)


def _draw_research(widget: ResearchWidget) -> None:
    for source in widget.sources:
        st.markdown(f"📄 [{source.title}]({source.url}) · _{source.type}_")
    with st.form(f"{widget.key}-add", clear_on_submit=True, border=False):
        title = st.text_input(
            "New source", placeholder="Add source...", key=f"{widget.key}-source", label_visibility="collapsed"
        )
        if st.form_submit_button("Add") and widget.add_source(title):
            st.rerun()


def _draw_timeline(widget: TimelineWidget) -> None:
    for event in widget.events:
        icon = TIMELINE_ICONS.get(event.type, "•")
        st.markdown(f"{icon} {event.action}  \n<small>{event.time}</small>", unsafe_allow_html=True)


def _draw_critique(widget: CritiqueWidget) -> None:
    st.caption(f"{widget.open_count} open")
    for item in widget.items:
        icon = CRITIQUE_ICONS.get(item.type, "•")
        checked = st.checkbox(
            f"{icon} {item.text}", value=item.resolved, key=f"{widget.key}-item-{item.id}"
        )
        if checked != item.resolved:
            widget.toggle_resolved(item.id)


_DRAWERS = {
    EditorWidget: _draw_editor,
    OutlineWidget: _draw_outline,
    KanbanWidget: _draw_kanban,
    ChatWidget: _draw_chat,
    MindMapWidget: _draw_mindmap,
    StatsWidget: _draw_stats,
    ResearchWidget: _draw_research,
    TimelineWidget: _draw_timeline,
    CritiqueWidget: _draw_critique,
}


__all__ = ["draw_view", "draw_widget", "mindmap_dot"]
