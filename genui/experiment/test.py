"""Tests for condition comparison and batch experiments."""

import json
import threading

import pytest

from genui.evaluation import InterfaceEvaluator, neutral_summary
from genui.layout import Specification
from genui.llm.generator import InterfaceGenerator, fallback_specification
from genui.schema import Condition

from .lib import (
    DEFAULT_CASES,
    ConditionResult,
    ExperimentRecord,
    compare_conditions,
    format_percentage,
    load_results,
    percentage_difference,
    run_all_conditions,
    run_condition,
    run_experiment,
    save_results,
    summarize_experiment,
)


def _evaluation(overall: float):
    return neutral_summary().model_copy(update={"overall_score": overall})


def _record(condition: str, overall: float, task: str = "t") -> ExperimentRecord:
    return ExperimentRecord(
        task=task,
        persona="VisualWriter",
        condition=Condition(condition),
        specification=fallback_specification(condition),
        evaluation=_evaluation(overall),
    )


@pytest.fixture
def pipeline(mock_llm_backend):
    return {
        "generator": InterfaceGenerator(backend=mock_llm_backend),
        "evaluator": InterfaceEvaluator(backend=mock_llm_backend),
    }


class TestPercentageDifference:
    """Tests for relative improvements."""

    @pytest.mark.unit
    def test_values(self):
        assert percentage_difference(78, 52) == 50.0
        assert percentage_difference(60, 80) == -25.0
        assert percentage_difference(70, 65) == 7.7

    @pytest.mark.unit
    def test_zero_base(self):
        assert percentage_difference(50, 0) is None

    @pytest.mark.unit
    def test_format(self):
        assert format_percentage(7.7) == "+7.7%"
        assert format_percentage(-25.0) == "-25.0%"
        assert format_percentage(None) == "n/a"


class TestRunConditions:
    """Tests for single and concurrent runs."""

    @pytest.mark.unit
    def test_run_condition(self, pipeline, mock_llm_backend, task_goal, user_profile):
        result = run_condition(task_goal, user_profile, "generic-genui", **pipeline)
        assert result.condition == Condition.GENERIC_GENUI
        assert result.overall_score == 78
        assert len(mock_llm_backend.generation_calls) == 1
        assert len(mock_llm_backend.evaluation_calls) == 1

    @pytest.mark.unit
    def test_all_conditions_in_fixed_order(self, pipeline, mock_llm_backend, task_goal, user_profile):
        results = run_all_conditions(task_goal, user_profile, **pipeline)

        assert [r.condition for r in results] == [
            Condition.BASELINE_CHAT,
            Condition.GENERIC_GENUI,
            Condition.PERSONALIZED_GENUI,
        ]
        # baseline skips generation but is still evaluated
        assert len(mock_llm_backend.generation_calls) == 2
        assert len(mock_llm_backend.evaluation_calls) == 3
        assert results[0].specification.layout.children[0].type == "widget-chat"
        assert results[2].specification.retrieved_context is not None

    @pytest.mark.unit
    def test_runs_concurrently(self, mock_backend_factory, task_goal, user_profile):
        """All three evaluations are in flight at the same time."""
        barrier = threading.Barrier(3, timeout=5)

        class BarrierBackend(mock_backend_factory):
            def generate(self, prompt, *, system_prompt=None, config=None):
                if self._is_evaluation(system_prompt):
                    barrier.wait()
                return super().generate(prompt, system_prompt=system_prompt, config=config)

        backend = BarrierBackend()
        results = run_all_conditions(
            task_goal,
            user_profile,
            generator=InterfaceGenerator(backend=backend),
            evaluator=InterfaceEvaluator(backend=backend),
        )
        assert len(results) == 3

    @pytest.mark.unit
    def test_failures_stay_local(self, mock_backend_factory, task_goal, user_profile):
        backend = mock_backend_factory(responses=["not json"] * 5)
        results = run_all_conditions(
            task_goal,
            user_profile,
            generator=InterfaceGenerator(backend=backend),
            evaluator=InterfaceEvaluator(backend=backend),
        )
        assert all(r.overall_score == 50 for r in results)


class TestCompareConditions:
    """Tests for pairwise comparison."""

    @pytest.mark.unit
    def test_improvements(self):
        spec = fallback_specification("baseline-chat")
        results = [
            ConditionResult(Condition.BASELINE_CHAT, spec, _evaluation(40)),
            ConditionResult(Condition.GENERIC_GENUI, spec, _evaluation(60)),
            ConditionResult(Condition.PERSONALIZED_GENUI, spec, _evaluation(80)),
        ]
        comparison = compare_conditions(results)
        assert comparison.scores[Condition.GENERIC_GENUI] == 60
        assert comparison.improvements == {
            "personalizedVsBaseline": 100.0,
            "personalizedVsGeneric": 33.3,
            "genericVsBaseline": 50.0,
        }
        assert comparison.to_dict()["scores"]["baseline-chat"] == 40

    @pytest.mark.unit
    def test_missing_condition(self):
        spec = fallback_specification("generic-genui")
        comparison = compare_conditions(
            [ConditionResult(Condition.GENERIC_GENUI, spec, _evaluation(60))]
        )
        assert comparison.improvements["genericVsBaseline"] is None
        assert comparison.improvements["personalizedVsGeneric"] == -100.0


class TestExperiment:
    """Tests for the batch experiment."""

    @pytest.mark.unit
    def test_default_cases(self):
        first, second = DEFAULT_CASES
        assert first.goal.intent == "brainstorm"
        assert first.profile.persona == "VisualWriter"
        assert second.profile.id == "u2"
        assert second.profile.preferences.density == "compact"
        assert second.profile.preferences.show_minimap is False

    @pytest.mark.unit
    def test_run_experiment(self, pipeline):
        seen = []
        records = run_experiment(on_record=seen.append, **pipeline)

        assert len(records) == 6
        assert seen == records
        assert [r.condition.value for r in records[:3]] == [
            "baseline-chat",
            "generic-genui",
            "personalized-genui",
        ]
        assert records[3].task == "Draft a CHI paper introduction on human-AI collaboration"
        assert records[3].persona == "LinearWriter"

    @pytest.mark.unit
    def test_summary_means(self):
        records = [
            _record("baseline-chat", 40, "a"),
            _record("generic-genui", 60, "a"),
            _record("personalized-genui", 70, "a"),
            _record("baseline-chat", 44, "b"),
            _record("generic-genui", 62, "b"),
            _record("personalized-genui", 80, "b"),
        ]
        summary = summarize_experiment(records)

        personalized = summary.conditions[Condition.PERSONALIZED_GENUI]
        assert personalized.mean == 75
        assert personalized.std_dev == 5
        assert personalized.n == 2
        assert summary.factor_averages[Condition.BASELINE_CHAT]["overallScore"] == 42
        assert summary.factor_averages[Condition.BASELINE_CHAT]["clarity"] == 50
        assert summary.improvements["personalizedVsBaseline"] == 78.6
        assert summary.effect_sizes["personalizedVsBaseline"].interpretation == "large"
        assert summary.summary.startswith("Personalized GenUI averaged 75.0 vs 42.0")

    @pytest.mark.unit
    def test_summary_empty(self):
        summary = summarize_experiment([])
        assert summary.conditions[Condition.BASELINE_CHAT].n == 0
        assert summary.improvements["genericVsBaseline"] is None
        assert "n/a" in summary.summary


class TestResultsFile:
    """Tests for saving and loading results."""

    @pytest.mark.unit
    def test_save_layout(self, tmp_path):
        path = save_results([_record("generic-genui", 61)], tmp_path / "out" / "results.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data[0]) == ["task", "persona", "condition", "specification", "evaluation"]
        assert data[0]["evaluation"]["overallScore"] == 61
        assert data[0]["specification"]["layout"]["children"][0]["type"] == "widget-editor"

    @pytest.mark.unit
    def test_load(self, tmp_path):
        path = save_results([_record("baseline-chat", 33)], tmp_path / "results.json")
        (record,) = load_results(path)
        assert record.condition == Condition.BASELINE_CHAT
        assert isinstance(record.specification, Specification)
        assert record.evaluation.overall_score == 33

    @pytest.mark.unit
    def test_default_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GENUI_RESULTS_PATH", str(tmp_path / "env.json"))
        assert save_results([]) == tmp_path / "env.json"
