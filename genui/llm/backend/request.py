"""Single JSON request against a backend, returned as an Outcome.

Generator and evaluator share this boundary: backend construction, the
call itself and JSON decoding all fail into a ``Failure`` instead of an
exception, so each caller can map failures to its own fallback value.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from genui.core.result import Failure, Outcome, Success
from genui.prompt import PromptPair

from .base import (
    AuthenticationError,
    GenerationConfig,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    parse_json_content,
)

logger = logging.getLogger(__name__)

# Failure kinds
AUTH_FAILURE = "auth"
PARSE_FAILURE = "parse"
LLM_FAILURE = "llm"
CONFIG_FAILURE = "config"


@dataclass
class JsonReply:
    """Decoded JSON reply plus call metadata."""

    data: Any
    raw: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)


def request_json(
    get_backend: Callable[[], LLMBackend],
    prompt: PromptPair,
    config: GenerationConfig,
) -> Outcome[JsonReply]:
    """Send one prompt and decode the reply as JSON.

    Args:
        get_backend: Returns the backend. Called inside the failure boundary
            so a missing API key becomes a Failure too.
        prompt: System and user messages.
        config: Generation settings (JSON mode is forced on).

    Returns:
        Success with the decoded reply, or Failure with kind ``auth``,
        ``config``, ``parse`` or ``llm``.
    """
    try:
        backend = get_backend()
    except AuthenticationError as e:
        logger.error(f"LLM authentication failed: {e}")
        return Failure(str(e), kind=AUTH_FAILURE)
    except ValueError as e:
        logger.error(f"LLM backend misconfigured: {e}")
        return Failure(str(e), kind=CONFIG_FAILURE)

    try:
        result = backend.generate(
            prompt.user, system_prompt=prompt.system, config=config.with_json_mode()
        )
    except AuthenticationError as e:
        logger.error(f"LLM authentication failed: {e}")
        return Failure(str(e), kind=AUTH_FAILURE)
    except LLMError as e:
        logger.error(f"LLM request failed: {e}")
        return Failure(str(e), kind=LLM_FAILURE)

    try:
        data = parse_json_content(result.content)
    except InvalidResponseError as e:
        logger.warning(f"LLM returned invalid JSON: {e}")
        return Failure(str(e), kind=PARSE_FAILURE)

    return Success(
        JsonReply(data=data, raw=result.content, model=result.model, usage=result.usage)
    )


__all__ = [
    "AUTH_FAILURE",
    "PARSE_FAILURE",
    "LLM_FAILURE",
    "CONFIG_FAILURE",
    "JsonReply",
    "request_json",
]
