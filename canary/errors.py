"""Error kinds and exceptions raised by the canary."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a failed call to an external collaborator."""

    METRIC_SUBMISSION = "metric_submission"
    LOG_PERSIST = "log_persist"


class CanaryError(Exception):
    """Base exception for canary errors."""


class ConfigurationError(CanaryError):
    """Configuration is missing or invalid."""
