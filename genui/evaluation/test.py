"""Tests for InterfaceEvaluator and evaluation models."""

import json

import pytest

from genui.core.result import Failure
from genui.llm.backend import AuthenticationError, LLMError

from .lib import (
    EvaluationSummary,
    EvaluatorConfig,
    InterfaceEvaluator,
    neutral_summary,
)


class TestEvaluationSummary:
    """Tests for the summary model."""

    @pytest.mark.unit
    def test_parses_camel_case(self, mock_backend_factory):
        summary = EvaluationSummary.model_validate(
            json.loads(mock_backend_factory.MOCK_EVALUATION_JSON)
        )
        assert summary.cognitive_load == 30
        assert summary.personalization_fit == 85
        assert summary.detailed.clarity.details["recognition"] == 85
        assert summary.strengths == ["Spatial canvas", "Visible progress"]

    @pytest.mark.unit
    def test_optional_fields(self):
        summary = EvaluationSummary.model_validate(
            {
                "cognitiveLoad": 40,
                "clarity": 60,
                "efficiency": 55,
                "personalizationFit": 35,
                "aestheticAppeal": 50,
                "overallScore": 52,
            }
        )
        assert summary.feedback == ""
        assert summary.detailed is None
        assert "detailed" not in summary.to_dict()

    @pytest.mark.unit
    def test_factor_scores(self):
        summary = neutral_summary()
        assert summary.factor_scores() == {
            "cognitiveLoad": 50,
            "clarity": 50,
            "efficiency": 50,
            "personalizationFit": 50,
            "aestheticAppeal": 50,
        }


class TestNeutralSummary:
    """Tests for the fallback evaluation."""

    @pytest.mark.unit
    def test_auth_failure(self):
        summary = neutral_summary(Failure("no key", kind="auth"))
        assert summary.feedback == "Evaluation unavailable: API key not configured"
        assert summary.overall_score == 50

    @pytest.mark.unit
    def test_other_failures(self):
        assert neutral_summary(Failure("x", kind="llm")).feedback == (
            "Evaluation unavailable: service error"
        )
        assert neutral_summary().feedback == "Evaluation unavailable: service error"

    @pytest.mark.unit
    def test_sub_criteria_neutral(self):
        detailed = neutral_summary().detailed
        assert detailed.efficiency.details == {
            "taskCompletion": 50,
            "flexibility": 50,
            "errorPrevention": 50,
        }


class TestInterfaceEvaluator:
    """Tests for evaluation requests."""

    @pytest.mark.unit
    def test_evaluate(self, mock_llm_backend, sample_specification, task_goal, user_profile):
        evaluator = InterfaceEvaluator(backend=mock_llm_backend)
        summary = evaluator.evaluate(
            sample_specification, task_goal, user_profile, "personalized-genui"
        )

        assert summary.overall_score == 78
        assert summary.feedback == "Well matched to a spatial thinker."
        assert len(mock_llm_backend.evaluation_calls) == 1

        call = mock_llm_backend.calls[0]
        assert call["config"].temperature == 0.3
        assert call["config"].json_mode is True
        assert "- Condition: personalized-genui" in call["system_prompt"]
        assert '"id": "map"' in call["system_prompt"]

    @pytest.mark.unit
    def test_custom_config(self, mock_llm_backend, sample_specification, task_goal, user_profile):
        evaluator = InterfaceEvaluator(
            backend=mock_llm_backend, config=EvaluatorConfig(temperature=0.0)
        )
        evaluator.evaluate(sample_specification, task_goal, user_profile, "generic-genui")
        assert mock_llm_backend.calls[0]["config"].temperature == 0.0

    @pytest.mark.unit
    def test_details_report_model(self, mock_llm_backend, sample_specification, task_goal, user_profile):
        output = InterfaceEvaluator(backend=mock_llm_backend).evaluate_with_details(
            sample_specification, task_goal, user_profile, "generic-genui"
        )
        assert not output.used_fallback
        assert output.model == "mock-model-v1"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error, feedback",
        [
            (AuthenticationError("bad key"), "Evaluation unavailable: API key not configured"),
            (LLMError("boom"), "Evaluation unavailable: service error"),
        ],
    )
    def test_backend_errors(
        self, mock_backend_factory, sample_specification, task_goal, user_profile, error, feedback
    ):
        evaluator = InterfaceEvaluator(backend=mock_backend_factory(error=error))
        summary = evaluator.evaluate(sample_specification, task_goal, user_profile, "baseline-chat")
        assert summary.feedback == feedback
        assert summary.clarity == 50

    @pytest.mark.unit
    def test_wrong_shape(self, mock_backend_factory, sample_specification, task_goal, user_profile):
        backend = mock_backend_factory(responses=['{"score": "great"}'])
        output = InterfaceEvaluator(backend=backend).evaluate_with_details(
            sample_specification, task_goal, user_profile, "generic-genui"
        )
        assert output.used_fallback
        assert output.summary.feedback == "Evaluation unavailable: service error"
        assert output.raw_response == '{"score": "great"}'

    @pytest.mark.unit
    def test_not_json(self, mock_backend_factory, sample_specification, task_goal, user_profile):
        backend = mock_backend_factory(responses=["Sorry, no."])
        summary = InterfaceEvaluator(backend=backend).evaluate(
            sample_specification, task_goal, user_profile, "generic-genui"
        )
        assert summary.overall_score == 50

    @pytest.mark.unit
    def test_missing_api_key(self, no_api_keys, sample_specification, task_goal, user_profile):
        summary = InterfaceEvaluator().evaluate(
            sample_specification, task_goal, user_profile, "generic-genui"
        )
        assert summary.feedback == "Evaluation unavailable: API key not configured"

    @pytest.mark.unit
    def test_unregistered_model(self, monkeypatch, sample_specification, task_goal, user_profile):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GENUI_MODEL", "gpt-5")
        output = InterfaceEvaluator().evaluate_with_details(
            sample_specification, task_goal, user_profile, "generic-genui"
        )
        assert output.used_fallback
        assert "Unknown model: gpt-5" in output.failure_reason
        assert output.summary.feedback == "Evaluation unavailable: service error"


@pytest.mark.llm
class TestLiveEvaluation:
    """Live API tests (skipped without keys)."""

    def test_scores_in_range(self, sample_specification, task_goal, user_profile):
        summary = InterfaceEvaluator().evaluate(
            sample_specification, task_goal, user_profile, "personalized-genui"
        )
        assert 0 <= summary.overall_score <= 100
