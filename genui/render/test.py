"""Tests for the renderer and widget state."""

import random

import pytest

from genui.layout import LayoutNode, Specification
from genui.schema import ComponentType

from .draw import mindmap_dot
from .lib import (
    ContainerView,
    PanelView,
    UnknownView,
    format_layout_tree,
    iter_widgets,
    render,
    render_specification,
)
from .widgets import (
    CHAT_GREETING,
    DEFAULT_EDITOR_TEXT,
    ChatWidget,
    CritiqueWidget,
    EditorWidget,
    KanbanWidget,
    MindMapWidget,
    OutlineWidget,
    ResearchWidget,
    StatsWidget,
    TimelineWidget,
    create_widget,
)


def _node(data: dict) -> LayoutNode:
    return LayoutNode.model_validate(data)


class TestRender:
    """Tests for the recursive transform."""

    @pytest.mark.unit
    def test_containers_and_panels(self, sample_specification):
        view = render_specification(sample_specification)

        assert isinstance(view, ContainerView)
        assert view.direction == "row"
        mindmap, side = view.children
        assert isinstance(mindmap, PanelView)
        assert mindmap.title == "Idea Map"
        assert mindmap.flex == 3
        assert isinstance(mindmap.widget, MindMapWidget)
        assert isinstance(side, ContainerView)
        assert side.direction == "column"
        assert side.flex == 2

    @pytest.mark.unit
    def test_document_order(self, sample_specification):
        view = render_specification(sample_specification)
        assert [p.component_type for p in iter_widgets(view)] == [
            ComponentType.MINDMAP,
            ComponentType.KANBAN,
            ComponentType.CHAT,
        ]

    @pytest.mark.unit
    def test_split_renders_as_row(self):
        view = render(
            _node(
                {
                    "id": "root",
                    "type": "layout-split",
                    "children": [
                        {"id": "a", "type": "widget-editor", "flex": 3},
                        {"id": "b", "type": "widget-outline"},
                    ],
                }
            )
        )
        assert view.direction == "row"
        assert [child.flex for child in view.children] == [3, 1]

    @pytest.mark.unit
    def test_panel_defaults(self):
        view = render(_node({"id": "s", "type": "widget-stats"}))
        assert view.title is None
        assert view.flex == 1
        assert view.key == "0:s"

    @pytest.mark.unit
    def test_unknown_type_placeholder(self):
        node = LayoutNode.model_construct(
            id="root",
            type="layout-row",
            children=[LayoutNode.model_construct(id="x", type="widget-hologram", children=[])],
            flex=None,
            title=None,
            props=None,
        )
        view = render(node)
        unknown = view.children[0]
        assert isinstance(unknown, UnknownView)
        assert unknown.message == "Unknown Component: widget-hologram"
        assert list(iter_widgets(view)) == []

    @pytest.mark.unit
    def test_every_widget_type_renders(self):
        widget_types = [t for t in ComponentType if t.value.startswith("widget-")]
        node = _node(
            {
                "id": "root",
                "type": "layout-col",
                "children": [{"id": t.value, "type": t.value} for t in widget_types],
            }
        )
        panels = list(iter_widgets(render(node)))
        assert [p.component_type for p in panels] == widget_types


class TestWidgetIsolation:
    """Tests that widget instances never share state."""

    @pytest.fixture
    def two_chats(self):
        return _node(
            {
                "id": "root",
                "type": "layout-row",
                "children": [
                    {"id": "left", "type": "widget-chat"},
                    {"id": "right", "type": "widget-chat"},
                ],
            }
        )

    @pytest.mark.unit
    def test_sibling_chats_independent(self, two_chats):
        left, right = (p.widget for p in iter_widgets(render(two_chats)))

        left.send("Help me outline chapter two")

        assert len(left.messages) == 3
        assert right.messages == [left.messages[0]]
        assert all("chapter two" not in m.text for m in right.messages)
        assert left.key != right.key

    @pytest.mark.unit
    def test_rerender_gives_fresh_state(self, sample_specification):
        first = render_specification(sample_specification)
        board = list(iter_widgets(first))[1].widget
        board.add_card("To Do", "Write related work")

        second = render_specification(sample_specification)
        fresh = list(iter_widgets(second))[1].widget
        assert [c.text for c in fresh.column("To Do").cards] == [
            "Research related work",
            "Draft abstract",
        ]

    @pytest.mark.unit
    def test_props_seed_state(self):
        view = render(
            _node({"id": "ed", "type": "widget-editor", "props": {"text": "Hello there"}})
        )
        assert view.widget.text == "Hello there"
        assert view.widget.word_count == 2

    @pytest.mark.unit
    def test_namespaces_keep_conditions_apart(self):
        node = _node(
            {
                "id": "root",
                "type": "layout-row",
                "children": [{"id": "editor-panel", "type": "widget-editor"}],
            }
        )
        spec = Specification(layout=node)

        generic = render_specification(spec, namespace="generic-genui-1")
        personalized = render_specification(spec, namespace="personalized-genui-1")
        regenerated = render_specification(spec, namespace="personalized-genui-2")

        keys = [next(iter_widgets(v)).key for v in (generic, personalized, regenerated)]
        assert keys == [
            "generic-genui-1/0.0:editor-panel",
            "personalized-genui-1/0.0:editor-panel",
            "personalized-genui-2/0.0:editor-panel",
        ]
        assert next(iter_widgets(render_specification(spec))).key == "0.0:editor-panel"


class TestWidgets:
    """Tests for individual widget behavior."""

    @pytest.mark.unit
    def test_editor(self):
        editor = EditorWidget(key="e")
        assert editor.text == DEFAULT_EDITOR_TEXT
        editor.set_text("  one two\nthree  ")
        assert editor.word_count == 3

    @pytest.mark.unit
    def test_outline(self):
        outline = OutlineWidget(key="o")
        assert [s.title for s in outline.sections][:2] == ["Introduction", "Problem Statement"]
        assert outline.sections[1].level == 1

        added = outline.add_section("  Limitations ")
        assert added.title == "Limitations"
        assert added.id == 7
        assert outline.add_section("   ") is None

        outline.remove_section(1)
        assert outline.sections[0].title == "Problem Statement"

    @pytest.mark.unit
    def test_outline_props(self):
        outline = OutlineWidget.from_props("o", {"sections": ["Hook", "Thesis"]})
        assert [(s.id, s.title) for s in outline.sections] == [(1, "Hook"), (2, "Thesis")]

    @pytest.mark.unit
    def test_kanban_move(self):
        board = KanbanWidget(key="k")
        assert board.next_column("To Do") == "In Progress"
        assert board.next_column("Done") is None

        assert board.move_card(1, "To Do", "In Progress")
        assert [c.text for c in board.column("In Progress").cards] == [
            "Outline methodology",
            "Research related work",
        ]
        assert not board.move_card(1, "To Do", "In Progress")

    @pytest.mark.unit
    def test_kanban_add(self):
        board = KanbanWidget(key="k")
        card = board.add_card("Done", "Submit")
        assert card.id == 5
        assert board.add_card("Done", "") is None
        with pytest.raises(KeyError):
            board.add_card("Backlog", "x")

    @pytest.mark.unit
    def test_chat_reply(self):
        chat = ChatWidget(key="c")
        assert chat.messages[0].text == CHAT_GREETING
        reply = chat.send("Can you suggest a stronger thesis statement for me?")
        assert reply.role == "ai"
        assert reply.text == (
            'I can help with that! Here are some suggestions for '
            '"Can you suggest a stronger the..."'
        )
        assert chat.send("  ") is None

    @pytest.mark.unit
    def test_chat_greeting_prop(self):
        chat = ChatWidget.from_props("c", {"greeting": "Ready to brainstorm?"})
        assert chat.messages[0].text == "Ready to brainstorm?"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "widget_class, props",
        [
            (OutlineWidget, {"sections": 5}),
            (OutlineWidget, {"sections": "Intro, Body"}),
            (OutlineWidget, {"sections": [None, 3, "  "]}),
            (EditorWidget, {"text": 42}),
            (ChatWidget, {"greeting": {"text": "hi"}}),
            (MindMapWidget, {"center": ["Idea"]}),
        ],
    )
    def test_wrongly_typed_props_keep_defaults(self, widget_class, props):
        assert widget_class.from_props("w", props) == widget_class(key="w")

    @pytest.mark.unit
    def test_outline_props_skip_non_strings(self):
        outline = OutlineWidget.from_props("o", {"sections": ["Hook", 7, " Thesis "]})
        assert [s.title for s in outline.sections] == ["Hook", "Thesis"]

    @pytest.mark.unit
    def test_mindmap_add_node(self):
        mindmap = MindMapWidget(key="m", rng=random.Random(7))
        assert mindmap.center.label == "Central Idea"

        node = mindmap.add_node("Embodied cognition")
        distance = ((node.x - 50) ** 2 + (node.y - 50) ** 2) ** 0.5
        assert 25 <= distance <= 40
        assert node.id == "n3"
        assert mindmap.add_node("") is None

    @pytest.mark.unit
    def test_mindmap_dot(self):
        dot = mindmap_dot(MindMapWidget(key="m"))
        assert '"center" -- "n1"' in dot
        assert 'label="Theme B"' in dot

    @pytest.mark.unit
    def test_fixed_widgets(self):
        stats = StatsWidget(key="s")
        assert [(m.label, m.value) for m in stats.metrics] == [
            ("Words", "342"),
            ("Time", "12m"),
            ("Focus", "85%"),
            ("Sections", "3/7"),
        ]
        timeline = TimelineWidget(key="t")
        assert timeline.events[0].action == "Edited Introduction"
        assert timeline.events[-1].type == "start"

    @pytest.mark.unit
    def test_research(self):
        research = ResearchWidget(key="r")
        assert research.sources[2].type == "guideline"
        assert research.add_source("Sweller (1988)").id == 4

    @pytest.mark.unit
    def test_critique_toggle(self):
        critique = CritiqueWidget(key="c")
        assert critique.open_count == 2
        critique.toggle_resolved(1)
        critique.toggle_resolved(3)
        assert critique.open_count == 2
        assert critique.items[0].resolved
        assert not critique.items[2].resolved

    @pytest.mark.unit
    def test_create_widget_rejects_containers(self):
        with pytest.raises(KeyError):
            create_widget(ComponentType.LAYOUT_ROW, "k")


class TestFormatLayoutTree:
    """Tests for the text tree."""

    @pytest.mark.unit
    def test_format(self, sample_specification):
        assert format_layout_tree(sample_specification.layout) == (
            "root [layout-row]\n"
            "├── Idea Map [widget-mindmap, flex 3]\n"
            "└── side [layout-col, flex 2]\n"
            "    ├── Idea Board [widget-kanban]\n"
            "    └── Assistant [widget-chat]"
        )

    @pytest.mark.unit
    def test_single_node(self):
        spec = Specification.model_validate({"layout": {"id": "solo", "type": "widget-chat"}})
        assert format_layout_tree(spec.layout) == "solo [widget-chat]"
