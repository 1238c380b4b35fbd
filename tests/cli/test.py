"""Tests for the command-line entry point (__main__.py)."""

import importlib.util
import json
import sys
from pathlib import Path

import pytest

from genui.evaluation import InterfaceEvaluator
from genui.llm import InterfaceGenerator

MAIN_PATH = Path(__file__).parent.parent.parent / "__main__.py"


@pytest.fixture
def project_main():
    """Load __main__.py as a module."""
    spec = importlib.util.spec_from_file_location("project_main", MAIN_PATH)
    module = importlib.util.module_from_spec(spec)
    sys.modules["project_main"] = module
    spec.loader.exec_module(module)
    yield module
    sys.modules.pop("project_main", None)


@pytest.fixture
def mocked_main(project_main, mock_llm_backend, monkeypatch):
    """__main__ with the pipeline wired to the mock backend."""

    def build(model=None, temperature=0.7):
        return (
            InterfaceGenerator(backend=mock_llm_backend),
            InterfaceEvaluator(backend=mock_llm_backend),
        )

    monkeypatch.setattr(project_main, "_build_pipeline", build)
    return project_main


@pytest.mark.integration
class TestGenerateCommand:
    """Tests for `python . generate`."""

    def test_prints_json_specification(self, mocked_main, capsys):
        code = mocked_main.handle_generate_command(
            ["Help me brainstorm thesis ideas", "-i", "brainstorm"]
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["layout"]["type"] == "layout-row"
        assert "retrievedContext" in data

    def test_tree_format(self, mocked_main, capsys):
        code = mocked_main.handle_generate_command(["Outline a report", "-f", "tree"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Idea Map [widget-mindmap, flex 3]" in out

    def test_baseline_condition_makes_no_call(self, mocked_main, mock_llm_backend, capsys):
        code = mocked_main.handle_generate_command(["Draft an essay", "-c", "baseline-chat"])

        assert code == 0
        assert mock_llm_backend.calls == []
        data = json.loads(capsys.readouterr().out)
        assert data["layout"]["children"][0]["type"] == "widget-chat"

    def test_writes_output_file(self, mocked_main, tmp_path):
        target = tmp_path / "layout.json"
        code = mocked_main.handle_generate_command(["Draft an essay", "-o", str(target)])

        assert code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["theme"] == "calm"

    def test_unknown_model_rejected(self, mocked_main, mock_llm_backend):
        code = mocked_main.handle_generate_command(["Draft", "-m", "not-a-model"])

        assert code == 1
        assert mock_llm_backend.calls == []

    def test_no_args_prints_help(self, mocked_main, capsys):
        assert mocked_main.handle_generate_command([]) == 1
        assert "python . generate" in capsys.readouterr().out


@pytest.mark.integration
class TestEvaluateCommand:
    """Tests for `python . evaluate`."""

    def test_scores_specification_file(self, mocked_main, sample_specification, tmp_path, capsys):
        path = tmp_path / "spec.json"
        path.write_text(sample_specification.to_json(), encoding="utf-8")

        code = mocked_main.handle_evaluate_command([str(path), "-g", "Brainstorm ideas"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["overallScore"] == 78

    def test_invalid_specification_rejected(self, mocked_main, tmp_path, mock_llm_backend):
        path = tmp_path / "spec.json"
        path.write_text(json.dumps({"layout": {"id": "x", "type": "widget-bogus"}}), encoding="utf-8")

        code = mocked_main.handle_evaluate_command([str(path), "-g", "Brainstorm ideas"])

        assert code == 1
        assert mock_llm_backend.calls == []

    def test_missing_file(self, mocked_main, tmp_path):
        code = mocked_main.handle_evaluate_command(
            [str(tmp_path / "missing.json"), "-g", "Brainstorm ideas"]
        )
        assert code == 1


@pytest.mark.integration
class TestCompareCommand:
    """Tests for `python . compare`."""

    def test_table_lists_every_condition(self, mocked_main, capsys):
        code = mocked_main.handle_compare_command(["Brainstorm ideas", "-i", "brainstorm"])

        assert code == 0
        out = capsys.readouterr().out
        for condition in ("baseline-chat", "generic-genui", "personalized-genui"):
            assert condition in out
        assert "personalizedVsBaseline" in out

    def test_json_output(self, mocked_main, mock_llm_backend, capsys):
        code = mocked_main.handle_compare_command(["Brainstorm ideas", "--json"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert [r["condition"] for r in data["results"]] == [
            "baseline-chat",
            "generic-genui",
            "personalized-genui",
        ]
        # Baseline skips generation; all three are evaluated
        assert len(mock_llm_backend.generation_calls) == 2
        assert len(mock_llm_backend.evaluation_calls) == 3


@pytest.mark.integration
class TestExperimentCommand:
    """Tests for `python . experiment`."""

    def test_runs_and_saves_results(self, mocked_main, tmp_path, capsys):
        target = tmp_path / "results.json"

        code = mocked_main.handle_experiment_command(["-o", str(target)])

        assert code == 0
        out = capsys.readouterr().out
        assert "SUMMARY STATISTICS" in out
        assert "Personalized GenUI averaged" in out
        assert target.exists()
        assert len(json.loads(target.read_text(encoding="utf-8"))) == 6

    def test_summarize_existing_file(self, mocked_main, tmp_path, mock_llm_backend, capsys):
        target = tmp_path / "results.json"
        mocked_main.handle_experiment_command(["-o", str(target)])
        calls_after_run = len(mock_llm_backend.calls)
        capsys.readouterr()

        code = mocked_main.handle_experiment_command(["--summarize", str(target)])

        assert code == 0
        assert len(mock_llm_backend.calls) == calls_after_run
        assert "IMPROVEMENTS" in capsys.readouterr().out

    def test_summarize_missing_file(self, mocked_main, tmp_path):
        code = mocked_main.handle_experiment_command(["--summarize", str(tmp_path / "nope.json")])
        assert code == 1

    @pytest.mark.parametrize(
        "records",
        [[{"task": "t", "persona": "p"}], [3], {"not": "a list"}],
    )
    def test_summarize_malformed_file(self, mocked_main, tmp_path, records):
        target = tmp_path / "results.json"
        target.write_text(json.dumps(records), encoding="utf-8")

        code = mocked_main.handle_experiment_command(["--summarize", str(target)])

        assert code == 1


@pytest.mark.unit
class TestInfoCommands:
    """Tests for personas, models and env."""

    def test_personas_lists_knowledge_records(self, project_main, capsys):
        assert project_main.cmd_personas([]) == 0
        out = capsys.readouterr().out
        assert "VisualWriter" in out
        assert "LinearWriter" in out

    def test_models_grouped_by_provider(self, project_main, no_api_keys, capsys):
        assert project_main.cmd_models([]) == 0
        out = capsys.readouterr().out
        assert "openai (no API key)" in out
        assert "anthropic (no API key)" in out
        assert "gpt-4o *" in out

    def test_env_masks_api_keys(self, project_main, monkeypatch, capsys):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-secret-abcd")

        assert project_main.cmd_env(["-c", "llm"]) == 0
        out = capsys.readouterr().out
        assert "****abcd" in out
        assert "sk-test-secret" not in out
        assert "GENUI_UI_PORT" not in out


@pytest.mark.unit
class TestDispatch:
    """Tests for main() and the subprocess-backed commands."""

    def test_no_command_shows_help(self, project_main, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["."])
        assert project_main.main() == 1
        assert "Usage: python . {command}" in capsys.readouterr().out

    def test_unknown_command(self, project_main, monkeypatch):
        monkeypatch.setattr(sys, "argv", [".", "frobnicate"])
        assert project_main.main() == 1

    def test_ui_launches_streamlit(self, project_main, monkeypatch):
        captured = {}

        def fake_call(cmd):
            captured["cmd"] = cmd
            return 0

        monkeypatch.setattr(project_main.subprocess, "call", fake_call)

        assert project_main.cmd_ui(["--port", "8600"]) == 0
        cmd = captured["cmd"]
        assert cmd[1:4] == ["-m", "streamlit", "run"]
        assert cmd[4].endswith("main.py")
        assert cmd[-2:] == ["--server.port", "8600"]

    def test_test_command_maps_tiers(self, project_main, monkeypatch):
        captured = {}

        def fake_call(cmd):
            captured["cmd"] = cmd
            return 0

        monkeypatch.setattr(project_main.subprocess, "call", fake_call)

        assert project_main.cmd_test(["--unit", "-k", "render"]) == 0
        assert captured["cmd"][2:] == ["pytest", "-m", "unit", "-k", "render"]
