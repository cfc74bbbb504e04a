"""synthcore exception types."""


class InvalidConfigurationError(ValueError):
    """Raised when a generator is configured with values it cannot run with."""

    pass
