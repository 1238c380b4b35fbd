"""Result values for operations that may fail at an external boundary.

LLM calls and validation of untrusted JSON return either ``Success`` carrying
the value or ``Failure`` carrying a short human-readable reason. Callers branch on
``isinstance(outcome, Failure)`` and map a failure to their own fallback value
instead of catching exceptions far from where they happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A failed outcome.

    Attributes:
        reason: Short explanation suitable for logs and user-facing text.
        kind: Machine-friendly category (e.g. "auth", "parse", "validation").
    """

    reason: str
    kind: str = "error"

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success[T], Failure]


__all__ = ["Success", "Failure", "Outcome"]
