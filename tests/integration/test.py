"""End-to-end pipeline tests: query -> generate -> evaluate -> render -> compare.

All tests run against the mock backend from the root conftest; nothing here
needs an API key.
"""

import json

import pytest

from genui.app import WorkspaceQuery
from genui.evaluation import InterfaceEvaluator
from genui.experiment import compare_conditions, run_all_conditions
from genui.llm import InterfaceGenerator
from genui.render import iter_widgets, render_specification
from genui.render.widgets import (
    CHAT_GREETING,
    DEFAULT_EDITOR_TEXT,
    ChatWidget,
    EditorWidget,
    KanbanWidget,
    MindMapWidget,
    OutlineWidget,
)
from genui.schema import Condition, ComponentType


@pytest.fixture
def pipeline(mock_llm_backend):
    return (
        InterfaceGenerator(backend=mock_llm_backend),
        InterfaceEvaluator(backend=mock_llm_backend),
    )


@pytest.mark.integration
class TestWorkspacePipeline:
    """A workspace query flows through every stage."""

    def test_query_to_rendered_workspace(self, pipeline):
        generator, evaluator = pipeline
        query = WorkspaceQuery.from_query_params(
            {"persona": "VisualWriter", "goal": "Brainstorm thesis ideas", "intent": "brainstorm"}
        )

        spec = generator.generate(query.task_goal(), query.user_profile())
        summary = evaluator.evaluate(
            spec, query.task_goal(), query.user_profile(), Condition.PERSONALIZED_GENUI
        )
        view = render_specification(spec)

        panels = list(iter_widgets(view))
        assert [p.component_type for p in panels] == [
            ComponentType.MINDMAP,
            ComponentType.KANBAN,
            ComponentType.CHAT,
        ]
        assert isinstance(panels[0].widget, MindMapWidget)
        assert spec.retrieved_context is not None
        assert spec.retrieved_context.persona_traits
        assert summary.overall_score == 78

    def test_widget_state_survives_interaction(self, pipeline, task_goal, user_profile):
        generator, _ = pipeline
        view = render_specification(generator.generate(task_goal, user_profile))
        panels = {p.component_type: p.widget for p in iter_widgets(view)}

        board: KanbanWidget = panels[ComponentType.KANBAN]
        card = board.add_card("To Do", "Embodied cognition angle")
        assert board.move_card(card.id, "To Do", board.next_column("To Do"))

        chat: ChatWidget = panels[ComponentType.CHAT]
        chat.send("What should I read first?")
        assert chat.messages[-1].role == "ai"

        # A second render starts from fresh state
        again = render_specification(generator.generate(task_goal, user_profile))
        fresh = {p.component_type: p.widget for p in iter_widgets(again)}
        assert len(fresh[ComponentType.CHAT].messages) == 1

    def test_generation_failure_still_renders(self, mock_backend_factory, task_goal, user_profile):
        backend = mock_backend_factory(responses=["not json at all"])
        generator = InterfaceGenerator(backend=backend)

        output = generator.generate_with_details(task_goal, user_profile)
        panels = list(iter_widgets(render_specification(output.specification)))

        assert output.used_fallback
        assert [p.component_type for p in panels] == [ComponentType.EDITOR, ComponentType.CHAT]

    def test_wrongly_typed_props_render_with_defaults(
        self, mock_backend_factory, task_goal, user_profile
    ):
        layout = {
            "layout": {
                "id": "root",
                "type": "layout-row",
                "children": [
                    {"id": "outline", "type": "widget-outline", "props": {"sections": 5}},
                    {"id": "editor", "type": "widget-editor", "props": {"text": 12}},
                    {"id": "chat", "type": "widget-chat", "props": {"greeting": ["hi"]}},
                    {"id": "map", "type": "widget-mindmap", "props": {"center": {"x": 1}}},
                    {"id": "stats", "type": "widget-stats", "props": {"metrics": "all"}},
                ],
            }
        }
        backend = mock_backend_factory(responses=[json.dumps(layout)])

        output = InterfaceGenerator(backend=backend).generate_with_details(
            task_goal, user_profile
        )
        widgets = [p.widget for p in iter_widgets(render_specification(output.specification))]

        assert not output.used_fallback
        outline, editor, chat, mindmap, _ = widgets
        assert isinstance(outline, OutlineWidget)
        assert outline.sections[0].title == "Introduction"
        assert isinstance(editor, EditorWidget)
        assert editor.text == DEFAULT_EDITOR_TEXT
        assert isinstance(chat, ChatWidget)
        assert chat.messages[0].text == CHAT_GREETING
        assert isinstance(mindmap, MindMapWidget)
        assert mindmap.center.label == "Central Idea"


@pytest.mark.integration
class TestConditionComparison:
    """All three conditions for one task."""

    def test_runs_conditions_in_fixed_order(
        self, mock_backend_factory, task_goal, user_profile
    ):
        backend = mock_backend_factory()
        generator = InterfaceGenerator(backend=backend)
        evaluator = InterfaceEvaluator(backend=backend)

        results = run_all_conditions(
            task_goal, user_profile, generator=generator, evaluator=evaluator, max_workers=1
        )
        comparison = compare_conditions(results)

        assert [r.condition for r in results] == [
            Condition.BASELINE_CHAT,
            Condition.GENERIC_GENUI,
            Condition.PERSONALIZED_GENUI,
        ]
        # Identical canned scores mean no difference between conditions
        assert comparison.improvements["personalizedVsBaseline"] == 0.0
        assert len(backend.generation_calls) == 2
        assert len(backend.evaluation_calls) == 3

    def test_generic_prompt_has_no_persona_context(self, mock_llm_backend, task_goal, user_profile):
        generator = InterfaceGenerator(backend=mock_llm_backend)

        spec = generator.generate(task_goal, user_profile, Condition.GENERIC_GENUI)

        assert spec.retrieved_context is None
        system_prompt = mock_llm_backend.generation_calls[0]["system_prompt"]
        assert "Persona: VisualWriter" not in system_prompt
