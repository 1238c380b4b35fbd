"""Success/failure values returned at external call boundaries."""

from .lib import Failure, Outcome, Success

__all__ = ["Success", "Failure", "Outcome"]
