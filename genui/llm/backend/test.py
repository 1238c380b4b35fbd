"""Tests for LLM backend implementations."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from .base import (
    AuthenticationError,
    ContextLengthError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMError,
    RateLimitError,
    classify_provider_error,
    extract_json,
    parse_json_content,
)
from genui.core.result import Failure, Success
from genui.prompt import PromptPair

from .factory import create_llm_backend
from .model_spec import (
    DEFAULT_MODEL,
    LLMCapability,
    LLMModel,
    LLMProviderType,
    LLMSpec,
    get_llm_spec,
)
from .request import CONFIG_FAILURE, LLM_FAILURE, PARSE_FAILURE, request_json


def _openai_response(content):
    return SimpleNamespace(
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(content=content), finish_reason="stop"
            )
        ],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        model="gpt-4o-2024-08-06",
    )


def _anthropic_response(text):
    return SimpleNamespace(
        content=[SimpleNamespace(text=text)],
        stop_reason="end_turn",
        usage=SimpleNamespace(input_tokens=12, output_tokens=8),
        model="claude-sonnet-4-5",
    )


class TestLLMSpec:
    """Tests for LLMSpec dataclass."""

    @pytest.mark.unit
    def test_spec_capabilities(self):
        spec = LLMSpec(
            name="test",
            provider=LLMProviderType.OPENAI,
            context_window=128000,
            max_output_tokens=4096,
            capabilities=frozenset({LLMCapability.JSON_MODE}),
        )
        assert spec.supports(LLMCapability.JSON_MODE)
        assert not spec.supports(LLMCapability.SEED)


class TestLLMModel:
    """Tests for LLMModel enum registry."""

    @pytest.mark.unit
    def test_default_is_gpt4o(self):
        assert DEFAULT_MODEL.spec.name == "gpt-4o"

    @pytest.mark.unit
    def test_by_name_lookup(self):
        assert LLMModel.by_name("claude-sonnet-4-5") == LLMModel.CLAUDE_SONNET_4_5
        assert LLMModel.by_name("nonexistent") is None

    @pytest.mark.unit
    def test_list_by_provider(self):
        openai_models = LLMModel.list_by_provider(LLMProviderType.OPENAI)
        assert all(m.spec.provider == LLMProviderType.OPENAI for m in openai_models)
        assert LLMModel.GPT_4O in openai_models

    @pytest.mark.unit
    def test_openai_models_support_json_mode(self):
        for model in LLMModel.list_by_provider(LLMProviderType.OPENAI):
            assert model.spec.supports(LLMCapability.JSON_MODE)


class TestGetLLMSpec:
    """Tests for get_llm_spec helper."""

    @pytest.mark.unit
    def test_from_string(self):
        assert get_llm_spec("gpt-4o-mini").name == "gpt-4o-mini"

    @pytest.mark.unit
    def test_from_spec(self):
        original = LLMModel.GPT_4O.spec
        assert get_llm_spec(original) is original

    @pytest.mark.unit
    def test_unknown_model_raises(self):
        with pytest.raises(ValueError, match="Unknown model"):
            get_llm_spec("nonexistent-model")


class TestGenerationConfig:
    """Tests for GenerationConfig."""

    @pytest.mark.unit
    def test_defaults(self):
        config = GenerationConfig()
        assert config.temperature == 0.7
        assert config.json_mode is True
        assert config.stop_sequences == []

    @pytest.mark.unit
    def test_with_json_mode_copies(self):
        config = GenerationConfig(temperature=0.3, json_mode=False, stop_sequences=["x"])
        forced = config.with_json_mode()
        assert forced.json_mode is True
        assert forced.temperature == 0.3
        assert forced.stop_sequences == ["x"]
        assert forced.stop_sequences is not config.stop_sequences


class TestJsonHelpers:
    """Tests for JSON extraction and error classification."""

    @pytest.mark.unit
    def test_extract_from_fence(self):
        assert extract_json('Here:\n```json\n{"a": 1}\n```') == '{"a": 1}'

    @pytest.mark.unit
    def test_extract_plain(self):
        assert extract_json('  {"a": 1} ') == '{"a": 1}'

    @pytest.mark.unit
    def test_parse_invalid(self):
        with pytest.raises(InvalidResponseError):
            parse_json_content("not json")

    @pytest.mark.unit
    def test_parse_empty(self):
        with pytest.raises(InvalidResponseError, match="Empty"):
            parse_json_content("")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Rate limit reached", RateLimitError),
            ("maximum context length is 128000", ContextLengthError),
            ("Incorrect API key provided", AuthenticationError),
            ("connection reset", LLMError),
        ],
    )
    def test_classify_by_message(self, message, expected):
        assert type(classify_provider_error(RuntimeError(message))) is expected

    @pytest.mark.unit
    def test_classify_by_status(self):
        error = RuntimeError("nope")
        error.status_code = 401
        assert isinstance(classify_provider_error(error), AuthenticationError)


class TestOpenAIBackend:
    """Tests for OpenAI backend."""

    @pytest.mark.unit
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        from .openai import OpenAIBackend

        with pytest.raises(AuthenticationError, match="API key required"):
            OpenAIBackend()

    @pytest.mark.unit
    def test_creates_with_api_key(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key-12345")
        assert backend.provider == "openai"
        assert backend.model_name == "gpt-4o"
        assert backend.name == "openai:gpt-4o"
        assert backend.supports_json_mode is True

    @pytest.mark.unit
    def test_generate_sends_json_mode(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response('{"ok": true}')
        backend._client = client

        result = backend.generate(
            "user", system_prompt="system", config=GenerationConfig(temperature=0.3)
        )

        assert parse_json_content(result.content) == {"ok": True}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}
        assert kwargs["messages"][1] == {"role": "user", "content": "user"}

    @pytest.mark.unit
    def test_generate_maps_errors(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("Rate limit exceeded")
        backend._client = client

        with pytest.raises(RateLimitError):
            backend.generate("hi")

    @pytest.mark.unit
    def test_generate_result_usage(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.chat.completions.create.return_value = _openai_response("text")

        result = backend.generate("hi", config=GenerationConfig(json_mode=False))

        assert isinstance(result, GenerationResult)
        assert result.usage["total_tokens"] == 15
        assert "response_format" not in backend._client.chat.completions.create.call_args.kwargs


class TestAnthropicBackend:
    """Tests for Anthropic backend."""

    @pytest.mark.unit
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        from .anthropic import AnthropicBackend

        with pytest.raises(AuthenticationError, match="API key required"):
            AnthropicBackend()

    @pytest.mark.unit
    def test_creates_with_api_key(self):
        from .anthropic import AnthropicBackend

        backend = AnthropicBackend(api_key="test-key-12345")
        assert backend.provider == "anthropic"
        assert backend.model_name == "claude-sonnet-4-5"
        assert backend.supports_json_mode is False

    @pytest.mark.unit
    def test_json_reply_with_fences(self):
        from .anthropic import JSON_INSTRUCTION, AnthropicBackend

        backend = AnthropicBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.messages.create.return_value = _anthropic_response(
            '```json\n{"layout": {}}\n```'
        )

        result = backend.generate("design", system_prompt="sys")

        assert parse_json_content(result.content) == {"layout": {}}
        kwargs = backend._client.messages.create.call_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["messages"][0]["content"].endswith(JSON_INSTRUCTION)


class TestCreateLLMBackend:
    """Tests for create_llm_backend factory."""

    @pytest.mark.unit
    def test_creates_openai_backend(self):
        backend = create_llm_backend(LLMModel.GPT_4O_MINI, api_key="test-key")
        assert backend.provider == "openai"
        assert backend.model_name == "gpt-4o-mini"

    @pytest.mark.unit
    def test_creates_anthropic_backend(self):
        backend = create_llm_backend("claude-haiku-4-5", api_key="test-key")
        assert backend.provider == "anthropic"

    @pytest.mark.unit
    def test_default_model_from_environment(self, monkeypatch):
        monkeypatch.setenv("GENUI_MODEL", "gpt-4.1-mini")
        backend = create_llm_backend(api_key="test-key")
        assert backend.model_name == "gpt-4.1-mini"

    @pytest.mark.unit
    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("GENUI_MODEL", raising=False)
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(AuthenticationError):
            create_llm_backend()


class TestProviderBackend:
    """Tests for the shared SDK plumbing."""

    @pytest.mark.unit
    def test_timeout_from_environment(self, monkeypatch):
        from .openai import OpenAIBackend

        monkeypatch.setenv("GENUI_LLM_TIMEOUT", "15")
        backend = OpenAIBackend(api_key="test-key")
        assert backend._timeout == 15.0
        assert backend._max_retries == 0

    @pytest.mark.unit
    def test_client_built_once(self, monkeypatch):
        from .anthropic import AnthropicBackend

        backend = AnthropicBackend(api_key="test-key")
        built = []
        monkeypatch.setattr(backend, "_build_client", lambda: built.append(1) or MagicMock())

        first = backend._get_client()
        assert backend._get_client() is first
        assert built == [1]

    @pytest.mark.unit
    def test_anthropic_usage_summed(self):
        from .anthropic import AnthropicBackend

        backend = AnthropicBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.messages.create.return_value = _anthropic_response("plain")

        result = backend.generate("hi", config=GenerationConfig(json_mode=False))

        assert result.content == "plain"
        assert result.usage == {"prompt_tokens": 12, "completion_tokens": 8, "total_tokens": 20}
        kwargs = backend._client.messages.create.call_args.kwargs
        assert kwargs["messages"][0]["content"] == "hi"
        assert "system" not in kwargs

    @pytest.mark.unit
    def test_sdk_errors_become_llm_errors(self):
        from .anthropic import AnthropicBackend

        backend = AnthropicBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.messages.create.side_effect = RuntimeError("maximum context length exceeded")

        with pytest.raises(ContextLengthError):
            backend.generate("hi")

    @pytest.mark.unit
    def test_empty_choices_is_invalid_response(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.chat.completions.create.return_value = SimpleNamespace(
            choices=[], usage=None, model="gpt-4o"
        )

        with pytest.raises(InvalidResponseError, match="Unexpected response shape"):
            backend.generate("hi")

    @pytest.mark.unit
    def test_missing_usage_counts_zero(self):
        from .openai import OpenAIBackend

        response = _openai_response("{}")
        response.usage = None
        backend = OpenAIBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.chat.completions.create.return_value = response

        result = backend.generate("hi")

        assert result.usage == {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}

    @pytest.mark.unit
    def test_anthropic_reply_without_usage_is_invalid(self):
        from .anthropic import AnthropicBackend

        response = _anthropic_response("{}")
        response.usage = None
        backend = AnthropicBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.messages.create.return_value = response

        with pytest.raises(InvalidResponseError):
            backend.generate("hi")


class TestRequestJson:
    """Tests for the single-request failure boundary."""

    PROMPT = PromptPair(system="system", user="user")

    @staticmethod
    def _backend(content=None, error=None):
        backend = MagicMock()
        if error is not None:
            backend.generate.side_effect = error
        else:
            backend.generate.return_value = GenerationResult(
                content=content, finish_reason="stop", usage={"total_tokens": 3}, model="gpt-4o"
            )
        return backend

    @pytest.mark.unit
    def test_success(self):
        backend = self._backend('{"layout": {}}')
        outcome = request_json(lambda: backend, self.PROMPT, GenerationConfig(json_mode=False))

        assert isinstance(outcome, Success)
        assert outcome.value.data == {"layout": {}}
        assert outcome.value.model == "gpt-4o"
        assert backend.generate.call_args.kwargs["config"].json_mode is True

    @pytest.mark.unit
    def test_unknown_model_is_config_failure(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GENUI_MODEL", "gpt-5")
        outcome = request_json(create_llm_backend, self.PROMPT, GenerationConfig())

        assert isinstance(outcome, Failure)
        assert outcome.kind == CONFIG_FAILURE
        assert "Unknown model: gpt-5" in outcome.reason

    @pytest.mark.unit
    def test_missing_key_is_auth_failure(self, no_api_keys):
        outcome = request_json(create_llm_backend, self.PROMPT, GenerationConfig())
        assert isinstance(outcome, Failure)
        assert outcome.kind == "auth"

    @pytest.mark.unit
    def test_malformed_reply_is_llm_failure(self):
        from .openai import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")
        backend._client = MagicMock()
        backend._client.chat.completions.create.return_value = SimpleNamespace(
            choices=[], usage=None, model="gpt-4o"
        )

        outcome = request_json(lambda: backend, self.PROMPT, GenerationConfig())

        assert isinstance(outcome, Failure)
        assert outcome.kind == LLM_FAILURE

    @pytest.mark.unit
    def test_invalid_json_is_parse_failure(self):
        outcome = request_json(
            lambda: self._backend("not json"), self.PROMPT, GenerationConfig()
        )
        assert isinstance(outcome, Failure)
        assert outcome.kind == PARSE_FAILURE
