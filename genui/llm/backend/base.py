"""Abstract base class for LLM backends.

Defines the interface that all LLM provider implementations must follow.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class GenerationConfig:
    """Configuration for LLM text generation.

    Attributes:
        temperature: Sampling temperature (0.0-2.0). Lower = more deterministic.
        max_tokens: Maximum tokens to generate in response.
        json_mode: Whether to enforce JSON output format.
        stop_sequences: Optional sequences that stop generation.
        top_p: Nucleus sampling parameter (0.0-1.0).
        seed: Optional seed for reproducible generation.
    """

    temperature: float = 0.7
    max_tokens: int = 4096
    json_mode: bool = True
    stop_sequences: list[str] = field(default_factory=list)
    top_p: float = 1.0
    seed: int | None = None

    def with_json_mode(self) -> "GenerationConfig":
        """Copy of this config with JSON mode forced on."""
        return GenerationConfig(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=True,
            stop_sequences=list(self.stop_sequences),
            top_p=self.top_p,
            seed=self.seed,
        )


@dataclass
class GenerationResult:
    """Result from LLM text generation.

    Attributes:
        content: Generated text content.
        finish_reason: Why generation stopped ('stop', 'length', 'content_filter').
        usage: Token usage dict (prompt_tokens, completion_tokens, total_tokens).
        model: Model identifier that was used.
        raw_response: Provider-specific raw response for debugging.
    """

    content: str
    finish_reason: str
    usage: dict[str, int]
    model: str
    raw_response: Any = None


class LLMBackend(ABC):
    """Abstract interface for LLM text generation backends.

    Example:
        >>> backend = OpenAIBackend(model="gpt-4o")
        >>> result = backend.generate("Design a workspace", system_prompt="...")
        >>> print(result.content)
    """

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Generate text from a prompt.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction for context.
            config: Generation configuration options.

        Returns:
            GenerationResult with generated content and metadata.

        Raises:
            LLMError: If generation fails.
            RateLimitError: If API rate limit is exceeded.
            ContextLengthError: If prompt exceeds context window.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier (e.g., 'gpt-4o', 'claude-sonnet-4-5')."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier (e.g., 'openai', 'anthropic')."""

    @property
    def name(self) -> str:
        """Get backend identifier for logging, as 'provider:model'."""
        return f"{self.provider}:{self.model_name}"

    @property
    @abstractmethod
    def supports_json_mode(self) -> bool:
        """Check if backend natively supports JSON mode."""

    @property
    @abstractmethod
    def context_window(self) -> int:
        """Get maximum context window size in tokens."""


class LLMError(Exception):
    """Base exception for LLM backend errors."""


class RateLimitError(LLMError):
    """Raised when API rate limit is exceeded.

    Attributes:
        retry_after: Suggested wait time in seconds before retry.
    """

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class ContextLengthError(LLMError):
    """Raised when prompt exceeds the model's context window."""


class InvalidResponseError(LLMError):
    """Raised when response cannot be parsed as expected format."""


class AuthenticationError(LLMError):
    """Raised when API authentication fails (invalid or missing key)."""


_JSON_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json(content: str) -> str:
    """Extract JSON text from a response, handling markdown code blocks."""
    content = content.strip()

    for match in _JSON_BLOCK_PATTERN.findall(content):
        stripped = match.strip()
        if stripped.startswith("{") or stripped.startswith("["):
            return stripped

    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]

    return content.strip()


def parse_json_content(content: str) -> Any:
    """Decode a model response as JSON.

    Raises:
        InvalidResponseError: If the content is empty or not valid JSON.
    """
    if not content or not content.strip():
        raise InvalidResponseError("Empty response from model")
    try:
        return json.loads(extract_json(content))
    except json.JSONDecodeError as e:
        raise InvalidResponseError(
            f"Failed to parse JSON response: {e}\nContent: {content[:500]}"
        ) from e


def classify_provider_error(error: Exception) -> LLMError:
    """Map a provider SDK exception to the matching LLMError subclass."""
    if isinstance(error, LLMError):
        return error

    status = getattr(error, "status_code", None)
    error_str = str(error).lower()

    if status == 429 or "rate limit" in error_str or "rate_limit" in error_str:
        return RateLimitError(str(error))
    if "context length" in error_str or "maximum context" in error_str or "too long" in error_str:
        return ContextLengthError(str(error))
    if status in (401, 403) or "authentication" in error_str or "api key" in error_str:
        return AuthenticationError(str(error))
    return LLMError(str(error))


__all__ = [
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "LLMError",
    "RateLimitError",
    "ContextLengthError",
    "InvalidResponseError",
    "AuthenticationError",
    "extract_json",
    "parse_json_content",
    "classify_provider_error",
]
