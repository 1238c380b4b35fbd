"""Centralized configuration management for genui.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from genui.config import EnvVar, get_environment
    >>>
    >>> model = get_environment(EnvVar.GENUI_MODEL)
    >>> for var in list_environment_variables("llm"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    llm: API keys, provider preference, model, timeout
    data: Knowledge table directory and experiment results path
    app: Log level and UI port
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_available_llm_providers,
    get_default_model,
    get_environment,
    get_environment_info,
    get_knowledge_dir,
    get_results_path,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_available_llm_providers",
    "get_default_model",
    "get_knowledge_dir",
    "get_results_path",
    # Introspection
    "list_environment_variables",
]
