"""Custom exception types for the transform publisher."""


class TfPublisherError(Exception):
    """Base exception for all transform publisher errors."""

    pass


class ConfigError(TfPublisherError):
    """Startup configuration errors."""

    pass


class ReconfigureError(TfPublisherError):
    """Malformed reconfiguration requests."""

    pass


__all__ = [
    "TfPublisherError",
    "ConfigError",
    "ReconfigureError",
]
