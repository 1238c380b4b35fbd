"""Core utilities shared across genui modules."""

from .log import get_logger, setup_logging
from .result import Failure, Outcome, Success

__all__ = ["get_logger", "setup_logging", "Success", "Failure", "Outcome"]
