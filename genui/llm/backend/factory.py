"""Backend factory: model name -> configured provider backend."""

from genui.config import get_default_model

from .model_spec import LLMModel, LLMProviderType, LLMSpec, get_llm_spec
from .provider import ProviderBackend


def _backend_class(provider: LLMProviderType) -> type[ProviderBackend]:
    # SDK modules are imported only for the provider in use
    if provider == LLMProviderType.OPENAI:
        from .openai import OpenAIBackend

        return OpenAIBackend
    if provider == LLMProviderType.ANTHROPIC:
        from .anthropic import AnthropicBackend

        return AnthropicBackend
    raise ValueError(f"Unsupported provider type: {provider}")


def create_llm_backend(
    model: str | LLMModel | LLMSpec | None = None,
    *,
    api_key: str | None = None,
    base_url: str | None = None,
    **kwargs,
) -> ProviderBackend:
    """Create the backend that serves ``model``.

    Args:
        model: Model name, LLMModel or LLMSpec. None resolves the configured
            default (GENUI_MODEL, then the provider default).
        api_key: API key. Falls back to the provider's environment variable.
        base_url: Custom API endpoint (OpenAI only).
        **kwargs: Passed to the backend constructor (timeout, max_retries).

    Raises:
        ValueError: If the model is unknown.
        AuthenticationError: If no API key is available.

    Example:
        >>> backend = create_llm_backend()  # gpt-4o unless configured
        >>> backend = create_llm_backend("claude-sonnet-4-5", timeout=30.0)
    """
    spec = get_llm_spec(model or get_default_model())
    backend_class = _backend_class(spec.provider)

    if base_url is not None:
        kwargs["base_url"] = base_url
    return backend_class(api_key=api_key, model=spec.name, **kwargs)


__all__ = ["create_llm_backend"]
