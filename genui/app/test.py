"""Tests for UI state helpers and the Streamlit app."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from genui.evaluation import neutral_summary
from genui.render.widgets import DEFAULT_EDITOR_TEXT
from genui.schema import Condition, Intent, Persona

from .lib import WorkspaceQuery, factor_display_score, humanize, score_color


class TestWorkspaceQuery:
    """Tests for query parameter decoding."""

    @pytest.mark.unit
    def test_round_trip(self):
        query = WorkspaceQuery(
            persona=Persona.RESEARCH,
            goal="Synthesize sources on working memory",
            intent=Intent.RESEARCH,
            comparison=True,
        )
        params = query.to_query_params()
        assert params == {
            "persona": "ResearchWriter",
            "goal": "Synthesize sources on working memory",
            "intent": "research",
            "comparison": "true",
        }
        assert WorkspaceQuery.from_query_params(params) == query

    @pytest.mark.unit
    def test_defaults(self):
        query = WorkspaceQuery.from_query_params({})
        assert query.persona == Persona.VISUAL
        assert query.intent == Intent.WRITE
        assert query.comparison is False
        assert not query.has_goal

    @pytest.mark.unit
    def test_unknown_values_fall_back(self):
        query = WorkspaceQuery.from_query_params(
            {"persona": "PoetWriter", "intent": "sing", "comparison": "yes", "goal": "  x  "}
        )
        assert query.persona == Persona.VISUAL
        assert query.intent == Intent.WRITE
        assert query.comparison is False
        assert query.goal == "x"

    @pytest.mark.unit
    def test_pipeline_inputs(self):
        query = WorkspaceQuery(persona=Persona.LINEAR, goal="Draft intro", intent=Intent.WRITE)
        assert query.task_goal().description == "Draft intro"
        profile = query.user_profile()
        assert profile.persona == "LinearWriter"
        assert profile.id == "u1"
        assert profile.preferences.density == "comfortable"


class TestDisplayHelpers:
    """Tests for score display helpers."""

    @pytest.mark.unit
    def test_cognitive_load_inverted(self):
        summary = neutral_summary().model_copy(update={"cognitive_load": 30.0, "clarity": 80.0})
        assert factor_display_score(summary, "cognitiveLoad") == 70
        assert factor_display_score(summary, "clarity") == 80

    @pytest.mark.unit
    @pytest.mark.parametrize("score, color", [(85, "green"), (70, "green"), (55, "orange"), (20, "red")])
    def test_score_color(self, score, color):
        assert score_color(score) == color

    @pytest.mark.unit
    def test_humanize(self):
        assert humanize("taskCompletion") == "Task completion"
        assert humanize("effort") == "Effort"


# =============================================================================
# Streamlit App
# =============================================================================

APP_SCRIPT = Path(__file__).with_name("main.py")
APP_TIMEOUT = 30


def _editor_key(condition: Condition, generation: int) -> str:
    # Fallback layouts place the editor first in the root row
    return f"{condition.value}-{generation}/0.0:editor-panel-text"


def _workspace(goal: str, comparison: bool = False) -> AppTest:
    at = AppTest.from_file(APP_SCRIPT, default_timeout=APP_TIMEOUT)
    at.query_params.update(
        {
            "persona": "VisualWriter",
            "goal": goal,
            "intent": "write",
            "comparison": "true" if comparison else "false",
        }
    )
    return at.run()


def _button(at: AppTest, label: str):
    return next(b for b in at.button if b.label == label)


def _draw_unknown_component():
    from genui.render.draw import draw_view
    from genui.render.lib import ContainerView, UnknownView

    draw_view(
        ContainerView(
            key="0:root",
            direction="row",
            children=[UnknownView(key="0.0:holo", type_name="widget-hologram")],
        )
    )


@pytest.mark.integration
class TestStreamlitApp:
    """Script-level tests. Without API keys every workspace uses fallback layouts."""

    def test_landing_to_workspace(self, no_api_keys):
        at = AppTest.from_file(APP_SCRIPT, default_timeout=APP_TIMEOUT).run()

        assert not at.exception
        assert at.title[0].value == "GenUI"
        assert "No LLM API key configured" in at.warning[0].value
        assert _button(at, "Generate Workspace").disabled

        at.text_area[0].input("Draft a CHI paper introduction").run()
        _button(at, "Generate Workspace").click().run()

        assert not at.exception
        assert at.query_params["goal"] == "Draft a CHI paper introduction"
        editor = at.text_area(key=_editor_key(Condition.PERSONALIZED_GENUI, 1))
        assert editor.value == DEFAULT_EDITOR_TEXT

    def test_comparison_editors_isolated(self, no_api_keys):
        at = _workspace("Compare layouts for an essay", comparison=True)
        assert not at.exception
        personalized_key = _editor_key(Condition.PERSONALIZED_GENUI, 1)
        generic_key = _editor_key(Condition.GENERIC_GENUI, 1)

        at.text_area(key=personalized_key).input("Personalized draft").run()
        at.radio[0].set_value(Condition.GENERIC_GENUI).run()

        assert not at.exception
        assert at.text_area(key=generic_key).value == DEFAULT_EDITOR_TEXT
        views = at.session_state["views"]
        personalized = views[Condition.PERSONALIZED_GENUI].children[0].widget
        generic = views[Condition.GENERIC_GENUI].children[0].widget
        assert personalized.text == "Personalized draft"
        assert generic.text == DEFAULT_EDITOR_TEXT

        at.radio[0].set_value(Condition.PERSONALIZED_GENUI).run()
        assert at.text_area(key=personalized_key).value == "Personalized draft"

    def test_regenerate_resets_widget_state(self, no_api_keys):
        at = _workspace("Outline a literature review")
        first_key = _editor_key(Condition.PERSONALIZED_GENUI, 1)
        at.text_area(key=first_key).input("Edited before regenerating").run()

        _button(at, "Regenerate").click().run()

        assert not at.exception
        assert at.session_state["generation"] == 2
        fresh = at.text_area(key=_editor_key(Condition.PERSONALIZED_GENUI, 2))
        assert fresh.value == DEFAULT_EDITOR_TEXT
        assert first_key not in [t.key for t in at.text_area]

    def test_unknown_component_drawn_as_warning(self):
        at = AppTest.from_function(_draw_unknown_component, default_timeout=APP_TIMEOUT).run()

        assert not at.exception
        assert [w.value for w in at.warning] == ["Unknown Component: widget-hologram"]
