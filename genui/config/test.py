"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_available_llm_providers,
    get_default_model,
    get_environment,
    get_environment_info,
    get_knowledge_dir,
    get_results_path,
    list_environment_variables,
)


@pytest.fixture
def clean_llm_env(monkeypatch):
    """Remove every LLM-related variable for the duration of a test."""
    for var in list_environment_variables("llm"):
        monkeypatch.delenv(var.value.name, raising=False)
    return monkeypatch


# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("GENUI_UI_PORT", raising=False)
        assert get_environment(EnvVar.GENUI_UI_PORT) == 8501

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("GENUI_UI_PORT", "9999")
        assert get_environment(EnvVar.GENUI_UI_PORT, override=5000) == 5000

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("GENUI_UI_PORT", "8080")
        result = get_environment(EnvVar.GENUI_UI_PORT)
        assert result == 8080
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("GENUI_UI_PORT", "not-a-port")
        assert get_environment(EnvVar.GENUI_UI_PORT) == 8501

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        monkeypatch.setenv("GENUI_LLM_TIMEOUT", "30.5")
        assert get_environment(EnvVar.GENUI_LLM_TIMEOUT) == 30.5

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch):
        monkeypatch.setenv("GENUI_RESULTS_PATH", "/tmp/results.json")
        assert get_environment(EnvVar.GENUI_RESULTS_PATH) == Path("/tmp/results.json")

    @pytest.mark.unit
    def test_empty_string_is_unset(self, monkeypatch):
        """Empty values (common in .env templates) resolve to the default."""
        monkeypatch.setenv("OPENAI_API_KEY", "")
        assert get_environment(EnvVar.OPENAI_API_KEY) is None


class TestIntrospection:
    """Tests for metadata helpers."""

    @pytest.mark.unit
    def test_info_returns_config(self):
        info = get_environment_info(EnvVar.GENUI_MODEL)
        assert isinstance(info, EnvConfig)
        assert info.name == "GENUI_MODEL"

    @pytest.mark.unit
    def test_list_by_category(self):
        llm_vars = list_environment_variables("llm")
        assert EnvVar.OPENAI_API_KEY in llm_vars
        assert EnvVar.GENUI_UI_PORT not in llm_vars

    @pytest.mark.unit
    def test_list_all(self):
        assert len(list_environment_variables()) == len(EnvVar)


class TestConvenienceFunctions:
    """Tests for provider and path helpers."""

    @pytest.mark.unit
    def test_no_providers_without_keys(self, clean_llm_env):
        assert get_available_llm_providers() == []

    @pytest.mark.unit
    def test_providers_with_keys(self, clean_llm_env):
        clean_llm_env.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        clean_llm_env.setenv("OPENAI_API_KEY", "sk-test")
        assert get_available_llm_providers() == ["openai", "anthropic"]

    @pytest.mark.unit
    def test_default_model_is_gpt4o(self, clean_llm_env):
        assert get_default_model() == "gpt-4o"

    @pytest.mark.unit
    def test_default_model_follows_provider(self, clean_llm_env):
        clean_llm_env.setenv("LLM_PROVIDER", "anthropic")
        assert get_default_model().startswith("claude")

    @pytest.mark.unit
    def test_explicit_model_wins(self, clean_llm_env):
        clean_llm_env.setenv("GENUI_MODEL", "gpt-4o-mini")
        assert get_default_model() == "gpt-4o-mini"
        assert get_default_model("gpt-4.1-mini") == "gpt-4.1-mini"

    @pytest.mark.unit
    def test_knowledge_dir_defaults_to_package_data(self, monkeypatch):
        monkeypatch.delenv("GENUI_KNOWLEDGE_DIR", raising=False)
        path = get_knowledge_dir()
        assert path.name == "data"
        assert (path / "personas.json").exists()

    @pytest.mark.unit
    def test_results_path_override(self):
        assert get_results_path("out.json") == Path("out.json")
