"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class TaskPoolClosedError(UtilError):
    """Raised when work is submitted to a stopped background task pool."""

    pass
