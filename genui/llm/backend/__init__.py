"""LLM backend implementations.

Provides the abstract base class and OpenAI / Anthropic implementations.
"""

from .base import (
    AuthenticationError,
    ContextLengthError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    RateLimitError,
    classify_provider_error,
    extract_json,
    parse_json_content,
)
from .factory import create_llm_backend
from .provider import ProviderBackend
from .request import (
    AUTH_FAILURE,
    LLM_FAILURE,
    CONFIG_FAILURE,
    PARSE_FAILURE,
    JsonReply,
    request_json,
)
from .model_spec import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_MODEL,
    DEFAULT_OPENAI_MODEL,
    LLMCapability,
    LLMModel,
    LLMProviderType,
    LLMSpec,
    get_llm_spec,
)

__all__ = [
    # Base classes and types
    "LLMBackend",
    "ProviderBackend",
    "GenerationConfig",
    "GenerationResult",
    # Exceptions
    "LLMError",
    "RateLimitError",
    "ContextLengthError",
    "InvalidResponseError",
    "AuthenticationError",
    # JSON helpers
    "extract_json",
    "parse_json_content",
    "classify_provider_error",
    # Model specification
    "LLMCapability",
    "LLMProviderType",
    "LLMSpec",
    "LLMModel",
    "get_llm_spec",
    # Defaults
    "DEFAULT_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
    # Factory
    "create_llm_backend",
    # Requests
    "JsonReply",
    "request_json",
    "AUTH_FAILURE",
    "PARSE_FAILURE",
    "LLM_FAILURE",
    "CONFIG_FAILURE",
]
