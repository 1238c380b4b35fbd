"""Prompt construction for generation and evaluation."""

from .lib import (
    EVALUATION_USER_MESSAGE,
    GENERATION_USER_TEMPLATE,
    PromptBuilder,
    PromptContext,
    PromptPair,
)

__all__ = [
    "GENERATION_USER_TEMPLATE",
    "EVALUATION_USER_MESSAGE",
    "PromptContext",
    "PromptPair",
    "PromptBuilder",
]
