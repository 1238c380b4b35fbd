"""Anthropic Messages backend.

Claude has no JSON response mode, so JSON requests carry an extra
instruction. Replies are decoded with ``parse_json_content``, which strips
code fences first.
"""

from typing import Any

from genui.config import EnvVar

from .base import GenerationConfig, GenerationResult
from .model_spec import DEFAULT_ANTHROPIC_MODEL
from .provider import ProviderBackend

JSON_INSTRUCTION = (
    "IMPORTANT: Respond with valid JSON only. "
    "Do not include any text, explanation, or markdown formatting "
    "before or after the JSON object."
)


class AnthropicBackend(ProviderBackend):
    """Claude models through the Messages API."""

    provider_name = "anthropic"
    key_variable = EnvVar.ANTHROPIC_API_KEY
    default_model = DEFAULT_ANTHROPIC_MODEL.spec.name

    @property
    def supports_json_mode(self) -> bool:
        return False

    def _build_client(self) -> Any:
        import anthropic

        return anthropic.Anthropic(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=self._max_retries,
        )

    def _request(
        self, prompt: str, system_prompt: str | None, config: GenerationConfig
    ) -> dict[str, Any]:
        content = f"{prompt}\n\n{JSON_INSTRUCTION}" if config.json_mode else prompt
        request: dict[str, Any] = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": content}],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }
        if system_prompt:
            request["system"] = system_prompt
        if config.stop_sequences:
            request["stop_sequences"] = list(config.stop_sequences)
        return request

    def _send(self, client: Any, request: dict[str, Any]) -> Any:
        return client.messages.create(**request)

    def _result(self, response: Any) -> GenerationResult:
        text = "".join(
            getattr(block, "text", "") for block in response.content or []
        )
        prompt_tokens = response.usage.input_tokens
        completion_tokens = response.usage.output_tokens
        return GenerationResult(
            content=text,
            finish_reason=response.stop_reason or "unknown",
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            model=response.model,
            raw_response=response,
        )


__all__ = ["AnthropicBackend", "JSON_INSTRUCTION"]
