"""Centralized environment configuration management for genui.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from genui.config import EnvVar, get_environment
    >>>
    >>> port = get_environment(EnvVar.GENUI_UI_PORT)  # Returns int
    >>> api_key = get_environment(EnvVar.OPENAI_API_KEY)  # Returns str | None
    >>>
    >>> # Override at runtime
    >>> model = get_environment(EnvVar.GENUI_MODEL, override="gpt-4o-mini")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "GENUI_MODEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by genui.

    Categories:
        - llm: Provider API keys and model selection
        - data: Knowledge tables and experiment output
        - app: Logging and UI settings
    """

    # -------------------------------------------------------------------------
    # LLM
    # -------------------------------------------------------------------------
    OPENAI_API_KEY = EnvConfig(
        name="OPENAI_API_KEY",
        default=None,
        var_type=str,
        description="OpenAI API key for GPT models",
        category="llm",
    )
    ANTHROPIC_API_KEY = EnvConfig(
        name="ANTHROPIC_API_KEY",
        default=None,
        var_type=str,
        description="Anthropic API key for Claude models",
        category="llm",
    )
    LLM_PROVIDER = EnvConfig(
        name="LLM_PROVIDER",
        default=None,
        var_type=str,
        description="Preferred LLM provider (openai, anthropic)",
        category="llm",
    )
    GENUI_MODEL = EnvConfig(
        name="GENUI_MODEL",
        default=None,  # Computed from LLM_PROVIDER if not set
        var_type=str,
        description="Model used for both generation and evaluation",
        category="llm",
    )
    GENUI_LLM_TIMEOUT = EnvConfig(
        name="GENUI_LLM_TIMEOUT",
        default=120.0,
        var_type=float,
        description="Request timeout in seconds for LLM calls",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Data Paths
    # -------------------------------------------------------------------------
    GENUI_KNOWLEDGE_DIR = EnvConfig(
        name="GENUI_KNOWLEDGE_DIR",
        default=None,  # Bundled tables under genui/knowledge/data
        var_type=Path,
        description="Directory holding the knowledge JSON tables",
        category="data",
    )
    GENUI_RESULTS_PATH = EnvConfig(
        name="GENUI_RESULTS_PATH",
        default=Path("experiment-results.json"),
        var_type=Path,
        description="Output file for batch experiment results",
        category="data",
    )

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    GENUI_LOG_LEVEL = EnvConfig(
        name="GENUI_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level name (DEBUG, INFO, WARNING, ERROR)",
        category="app",
    )
    GENUI_UI_PORT = EnvConfig(
        name="GENUI_UI_PORT",
        default=8501,
        var_type=int,
        description="Port for the Streamlit workspace UI",
        category="app",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None or value == "":
        return default

    if var_type is str:
        return value

    if var_type in (int, float):
        try:
            return var_type(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, data, app). None returns all.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Convenience Functions
# =============================================================================


def get_available_llm_providers() -> list[str]:
    """Get providers that have an API key configured.

    Returns:
        Provider names in preference order (e.g., ["openai", "anthropic"]).
    """
    providers = []
    if get_environment(EnvVar.OPENAI_API_KEY):
        providers.append("openai")
    if get_environment(EnvVar.ANTHROPIC_API_KEY):
        providers.append("anthropic")
    return providers


def get_default_model(override: str | None = None) -> str:
    """Get the model name used for generation and evaluation.

    Resolution: override > GENUI_MODEL > provider default (LLM_PROVIDER,
    then the first provider with a key) > gpt-4o.
    """
    if override:
        return override

    model = get_environment(EnvVar.GENUI_MODEL)
    if model:
        return model

    provider = get_environment(EnvVar.LLM_PROVIDER)
    if not provider:
        available = get_available_llm_providers()
        provider = available[0] if available else "openai"

    if provider.lower() == "anthropic":
        return "claude-sonnet-4-5"
    return "gpt-4o"


def get_knowledge_dir(override: Path | str | None = None) -> Path:
    """Get the knowledge table directory.

    Resolution: override > GENUI_KNOWLEDGE_DIR > bundled package data.
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.GENUI_KNOWLEDGE_DIR)
    if env_path:
        return env_path

    return Path(__file__).resolve().parent.parent / "knowledge" / "data"


def get_results_path(override: Path | str | None = None) -> Path:
    """Get the experiment results file path."""
    if override is not None:
        return Path(override)
    return get_environment(EnvVar.GENUI_RESULTS_PATH)


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    "list_environment_variables",
    # Convenience functions
    "get_available_llm_providers",
    "get_default_model",
    "get_knowledge_dir",
    "get_results_path",
]
