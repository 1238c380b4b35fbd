"""OpenAI Chat Completions backend."""

from typing import Any

from genui.config import EnvVar

from .base import GenerationConfig, GenerationResult
from .model_spec import DEFAULT_OPENAI_MODEL, LLMCapability
from .provider import ProviderBackend


class OpenAIBackend(ProviderBackend):
    """GPT models through the Chat Completions API.

    JSON requests set ``response_format={"type": "json_object"}`` when the
    model supports it.

    Example:
        >>> backend = OpenAIBackend(model="gpt-4o-mini")
        >>> result = backend.generate("Design a workspace", system_prompt="...")
    """

    provider_name = "openai"
    key_variable = EnvVar.OPENAI_API_KEY
    default_model = DEFAULT_OPENAI_MODEL.spec.name

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = 0,
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout, max_retries=max_retries)
        self._base_url = base_url

    @property
    def supports_json_mode(self) -> bool:
        return self._spec.supports(LLMCapability.JSON_MODE)

    def _build_client(self) -> Any:
        from openai import OpenAI

        return OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=self._max_retries,
        )

    def _request(
        self, prompt: str, system_prompt: str | None, config: GenerationConfig
    ) -> dict[str, Any]:
        messages = [{"role": "user", "content": prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        request: dict[str, Any] = {
            "model": self.model_name,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "top_p": config.top_p,
        }
        if config.json_mode and self.supports_json_mode:
            request["response_format"] = {"type": "json_object"}
        if config.stop_sequences:
            request["stop"] = list(config.stop_sequences)
        if config.seed is not None and self._spec.supports(LLMCapability.SEED):
            request["seed"] = config.seed
        return request

    def _send(self, client: Any, request: dict[str, Any]) -> Any:
        return client.chat.completions.create(**request)

    def _result(self, response: Any) -> GenerationResult:
        choice = response.choices[0]
        usage = {
            counter: getattr(response.usage, counter, 0) or 0
            for counter in ("prompt_tokens", "completion_tokens", "total_tokens")
        }
        return GenerationResult(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "unknown",
            usage=usage,
            model=response.model,
            raw_response=response,
        )


__all__ = ["OpenAIBackend"]
