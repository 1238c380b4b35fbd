"""Shared plumbing for SDK-backed providers.

A provider backend resolves its API key and model spec up front, builds the
SDK client on first use and turns every SDK exception into an ``LLMError``.
Subclasses only describe the request and read the response.
"""

import logging
from abc import abstractmethod
from typing import Any, ClassVar

from genui.config import EnvVar, get_environment

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    classify_provider_error,
)
from .model_spec import LLMSpec, get_llm_spec

logger = logging.getLogger(__name__)


class ProviderBackend(LLMBackend):
    """Base for backends that wrap a vendor SDK client.

    Subclasses set ``provider_name``, ``key_variable`` and ``default_model``
    and implement ``_build_client``, ``_request``, ``_send`` and ``_result``.

    Args:
        api_key: API key. Falls back to the provider's environment variable.
        model: Model name. Falls back to ``default_model``.
        timeout: Request timeout in seconds. Falls back to GENUI_LLM_TIMEOUT.
        max_retries: SDK retry attempts. Zero keeps one call per request.

    Raises:
        AuthenticationError: If no API key is available.
    """

    provider_name: ClassVar[str]
    key_variable: ClassVar[EnvVar]
    default_model: ClassVar[str]

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int = 0,
    ):
        self._api_key = api_key or get_environment(self.key_variable)
        if not self._api_key:
            key_name = self.key_variable.value.name
            raise AuthenticationError(
                f"{self.provider_name} API key required: set {key_name} "
                "or pass api_key."
            )

        self._spec: LLMSpec = get_llm_spec(model or self.default_model)
        self._timeout = timeout or get_environment(EnvVar.GENUI_LLM_TIMEOUT)
        self._max_retries = max_retries
        self._client: Any = None

    @property
    def model_name(self) -> str:
        return self._spec.name

    @property
    def provider(self) -> str:
        return self.provider_name

    @property
    def context_window(self) -> int:
        return self._spec.context_window

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Make one SDK call and normalize the reply.

        Raises:
            LLMError: Any SDK failure, mapped to the matching subclass.
            InvalidResponseError: If the reply is missing expected fields.
        """
        request = self._request(prompt, system_prompt, config or GenerationConfig())
        client = self._get_client()

        logger.debug(f"Calling {self.name} with {len(prompt)} prompt characters")
        try:
            response = self._send(client, request)
        except Exception as e:
            raise classify_provider_error(e) from e

        try:
            return self._result(response)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise InvalidResponseError(f"Unexpected response shape from {self.name}: {e}") from e

    @abstractmethod
    def _build_client(self) -> Any:
        """Construct the SDK client."""

    @abstractmethod
    def _request(
        self, prompt: str, system_prompt: str | None, config: GenerationConfig
    ) -> dict[str, Any]:
        """Keyword arguments for one SDK call."""

    @abstractmethod
    def _send(self, client: Any, request: dict[str, Any]) -> Any:
        """Perform the SDK call."""

    @abstractmethod
    def _result(self, response: Any) -> GenerationResult:
        """Convert the SDK response."""


__all__ = ["ProviderBackend"]
