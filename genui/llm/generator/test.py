"""Tests for InterfaceGenerator."""

import json

import pytest

from genui.core.result import Failure
from genui.llm.backend import AuthenticationError, LLMError, RateLimitError
from genui.schema import Condition

from .lib import (
    FALLBACK_LAYOUTS,
    GeneratorConfig,
    InterfaceGenerator,
    describe_failure,
    fallback_specification,
)


class TestFallbackSpecification:
    """Tests for fallback layouts."""

    @pytest.mark.unit
    def test_baseline_is_chat_only(self):
        spec = fallback_specification(Condition.BASELINE_CHAT)
        assert spec.layout.type == "layout-row"
        assert [c.type for c in spec.layout.children] == ["widget-chat"]
        assert spec.layout.children[0].title == "AI Chat Assistant"
        assert spec.theme == "minimal"

    @pytest.mark.unit
    def test_generic_is_editor_and_chat(self):
        spec = fallback_specification("generic-genui")
        assert [(c.id, c.flex) for c in spec.layout.children] == [
            ("editor-panel", 2),
            ("chat-panel", 1),
        ]

    @pytest.mark.unit
    def test_annotated_rationale(self):
        spec = fallback_specification(
            Condition.PERSONALIZED_GENUI, Failure("boom", kind="llm")
        )
        assert spec.rationale == (
            "Fallback layout used: generation error. "
            "Fallback personalized layout due to generation error."
        )

    @pytest.mark.unit
    def test_table_not_mutated(self):
        before = json.dumps(FALLBACK_LAYOUTS[Condition.GENERIC_GENUI])
        fallback_specification(Condition.GENERIC_GENUI, Failure("x", kind="auth"))
        fallback_specification(Condition.GENERIC_GENUI, Failure("y", kind="auth"))
        assert json.dumps(FALLBACK_LAYOUTS[Condition.GENERIC_GENUI]) == before
        again = fallback_specification(Condition.GENERIC_GENUI, Failure("z", kind="auth"))
        assert again.rationale.count("Fallback layout used") == 1

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "kind, label",
        [
            ("auth", "LLM API key not configured"),
            ("config", "LLM model not configured"),
            ("validation", "invalid layout returned"),
            ("parse", "generation error"),
            ("llm", "generation error"),
        ],
    )
    def test_describe_failure(self, kind, label):
        assert describe_failure(Failure("x", kind=kind)) == label


class TestBaselineCondition:
    """Tests for the baseline condition."""

    @pytest.mark.unit
    def test_no_llm_call(self, mock_llm_backend, task_goal, user_profile):
        generator = InterfaceGenerator(backend=mock_llm_backend)
        output = generator.generate_with_details(task_goal, user_profile, "baseline-chat")
        assert mock_llm_backend.calls == []
        assert not output.used_fallback
        assert output.specification.rationale == "Basic chat-only interface for baseline comparison."

    @pytest.mark.unit
    def test_no_backend_needed(self, no_api_keys, task_goal, user_profile):
        """Baseline works even when no backend can be created."""
        spec = InterfaceGenerator().generate(task_goal, user_profile, Condition.BASELINE_CHAT)
        assert spec.layout.children[0].type == "widget-chat"


class TestGeneratedLayouts:
    """Tests for successful generation."""

    @pytest.mark.unit
    def test_personalized_success(self, mock_llm_backend, task_goal, user_profile):
        generator = InterfaceGenerator(backend=mock_llm_backend)
        output = generator.generate_with_details(task_goal, user_profile)

        assert not output.used_fallback
        assert output.model == "mock-model-v1"
        assert output.total_tokens == 100
        spec = output.specification
        assert spec.layout.children[0].type == "widget-mindmap"
        assert spec.retrieved_context is not None
        assert spec.retrieved_context.persona_traits
        assert len(mock_llm_backend.calls) == 1

        call = mock_llm_backend.calls[0]
        assert call["config"].temperature == 0.7
        assert call["config"].json_mode is True
        assert "Personalization Enabled" in call["system_prompt"]
        assert call["prompt"].startswith("Design a personalized workspace")

    @pytest.mark.unit
    def test_generic_has_no_retrieved_context(self, mock_backend_factory, task_goal, user_profile):
        data = json.loads(mock_backend_factory.MOCK_LAYOUT_JSON)
        data["retrievedContext"] = {"matchedPatterns": ["invented"]}
        backend = mock_backend_factory(responses=[json.dumps(data)])

        spec = InterfaceGenerator(backend=backend).generate(
            task_goal, user_profile, "generic-genui"
        )

        assert spec.retrieved_context is None
        assert "Generic Mode" in backend.calls[0]["system_prompt"]

    @pytest.mark.unit
    def test_custom_temperature(self, mock_llm_backend, task_goal, user_profile):
        generator = InterfaceGenerator(
            backend=mock_llm_backend, config=GeneratorConfig(temperature=0.2)
        )
        generator.generate(task_goal, user_profile, "generic-genui")
        assert mock_llm_backend.calls[0]["config"].temperature == 0.2

    @pytest.mark.unit
    def test_fenced_json_accepted(self, mock_backend_factory, task_goal, user_profile):
        fenced = "```json\n" + mock_backend_factory.MOCK_LAYOUT_JSON + "\n```"
        backend = mock_backend_factory(responses=[fenced])
        output = InterfaceGenerator(backend=backend).generate_with_details(
            task_goal, user_profile, "generic-genui"
        )
        assert not output.used_fallback


class TestFallbacks:
    """Tests for failure handling."""

    @pytest.mark.unit
    def test_missing_layout_type(self, mock_backend_factory, task_goal, user_profile):
        bad = json.dumps({"layout": {"id": "root", "children": []}, "rationale": "x"})
        backend = mock_backend_factory(responses=[bad])

        output = InterfaceGenerator(backend=backend).generate_with_details(
            task_goal, user_profile, "personalized-genui"
        )

        assert output.used_fallback
        assert "layout.type" in output.failure_reason
        assert output.raw_response == bad
        assert output.specification.rationale.startswith(
            "Fallback layout used: invalid layout returned."
        )
        assert output.specification.retrieved_context is None

    @pytest.mark.unit
    def test_invalid_json(self, mock_backend_factory, task_goal, user_profile):
        backend = mock_backend_factory(responses=["I cannot do that"])
        spec = InterfaceGenerator(backend=backend).generate(
            task_goal, user_profile, "generic-genui"
        )
        assert spec.rationale == (
            "Fallback layout used: generation error. "
            "Generic editor + chat layout without personalization."
        )

    @pytest.mark.unit
    def test_widget_with_children_rejected(self, mock_backend_factory, task_goal, user_profile):
        bad = {
            "layout": {
                "id": "root",
                "type": "widget-chat",
                "children": [{"id": "inner", "type": "widget-editor"}],
            }
        }
        backend = mock_backend_factory(responses=[json.dumps(bad)])
        output = InterfaceGenerator(backend=backend).generate_with_details(
            task_goal, user_profile, "generic-genui"
        )
        assert output.used_fallback
        assert "cannot have children" in output.failure_reason

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error, label",
        [
            (AuthenticationError("bad key"), "LLM API key not configured"),
            (RateLimitError("slow down"), "generation error"),
            (LLMError("boom"), "generation error"),
        ],
    )
    def test_backend_errors(self, mock_backend_factory, task_goal, user_profile, error, label):
        backend = mock_backend_factory(error=error)
        spec = InterfaceGenerator(backend=backend).generate(task_goal, user_profile)
        assert spec.rationale.startswith(f"Fallback layout used: {label}.")
        assert spec.layout.children[0].id == "editor-panel"

    @pytest.mark.unit
    def test_missing_api_key(self, no_api_keys, task_goal, user_profile):
        output = InterfaceGenerator().generate_with_details(
            task_goal, user_profile, "personalized-genui"
        )
        assert output.used_fallback
        assert output.specification.rationale.startswith(
            "Fallback layout used: LLM API key not configured."
        )

    @pytest.mark.unit
    def test_unregistered_model_falls_back(self, monkeypatch, task_goal, user_profile):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GENUI_MODEL", "gpt-5")

        output = InterfaceGenerator().generate_with_details(
            task_goal, user_profile, "personalized-genui"
        )

        assert output.used_fallback
        assert "Unknown model: gpt-5" in output.failure_reason
        assert output.specification.rationale.startswith(
            "Fallback layout used: LLM model not configured."
        )

    @pytest.mark.unit
    def test_unknown_condition_raises(self, mock_llm_backend, task_goal, user_profile):
        with pytest.raises(ValueError):
            InterfaceGenerator(backend=mock_llm_backend).generate(
                task_goal, user_profile, "mystery"
            )


@pytest.mark.llm
class TestLiveGeneration:
    """Live API tests (skipped without keys)."""

    def test_generates_valid_layout(self, task_goal, user_profile):
        output = InterfaceGenerator().generate_with_details(task_goal, user_profile)
        assert output.specification.layout.id
        assert output.failure_reason is None
