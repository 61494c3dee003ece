"""
Dashboard exception types.
"""


class FetchError(RuntimeError):
    """A contract/inventory/config source could not be fetched."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to fetch {source}: {reason}")
        self.source = source
        self.reason = reason


class FilterValidationError(ValueError):
    """User-supplied filter input was rejected. `message` is safe to show."""

    def __init__(self, message: str, raw=None):
        super().__init__(message)
        self.message = message
        self.raw = raw


class ConfigError(ValueError):
    pass
