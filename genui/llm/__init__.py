"""LLM integration layer for workspace generation.

Main components:
- InterfaceGenerator: Retrieval, prompting, one LLM call, validation, fallback
- LLMBackend: Abstract interface for LLM providers
- create_llm_backend: Factory function for creating backends

Supported providers:
- OpenAI (GPT-4o, GPT-4.1)
- Anthropic (Claude Sonnet, Claude Haiku)

Example:
    >>> from genui.llm import InterfaceGenerator
    >>> generator = InterfaceGenerator()
    >>> spec = generator.generate(goal, profile, "personalized-genui")

    >>> from genui.llm import create_llm_backend, LLMModel
    >>> backend = create_llm_backend(LLMModel.CLAUDE_SONNET_4_5)
    >>> generator = InterfaceGenerator(backend=backend)
"""

from .backend import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_MODEL,
    DEFAULT_OPENAI_MODEL,
    AuthenticationError,
    ContextLengthError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    JsonReply,
    LLMBackend,
    LLMCapability,
    LLMError,
    LLMModel,
    LLMProviderType,
    LLMSpec,
    RateLimitError,
    create_llm_backend,
    get_llm_spec,
    request_json,
)
from .generator import (
    FALLBACK_LAYOUTS,
    GenerationOutput,
    GeneratorConfig,
    InterfaceGenerator,
    fallback_specification,
)

__all__ = [
    # Generator
    "InterfaceGenerator",
    "GeneratorConfig",
    "GenerationOutput",
    "FALLBACK_LAYOUTS",
    "fallback_specification",
    # Backend
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "JsonReply",
    "request_json",
    "create_llm_backend",
    # Model spec
    "LLMCapability",
    "LLMProviderType",
    "LLMSpec",
    "LLMModel",
    "get_llm_spec",
    "DEFAULT_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_ANTHROPIC_MODEL",
    # Exceptions
    "LLMError",
    "RateLimitError",
    "ContextLengthError",
    "InvalidResponseError",
    "AuthenticationError",
]
