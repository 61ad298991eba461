"""Configuration exceptions.

These are fatal: they are raised while the process starts up and must
never be caught and degraded into a per-request error.
"""


class ConfigurationError(Exception):
    """Raised when the process configuration is unusable."""

    def __init__(self, message: str = "Invalid configuration"):
        self.message = message
        super().__init__(self.message)


class ConfigurationMissingError(ConfigurationError):
    """Raised when a required setting (e.g. a signing secret) is absent."""

    def __init__(self, message: str = "Required configuration is missing"):
        super().__init__(message)
