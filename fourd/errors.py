from __future__ import annotations


class FourDError(Exception):
    """Base class for every error raised by the layout core."""


class InvalidArgument(FourDError, ValueError):
    """A mutation received something that is not a usable vertex or edge."""


class UseAfterRemoval(FourDError, LookupError):
    """A handle refers to a vertex or edge the graph no longer tracks."""


class ConfigError(FourDError, RuntimeError):
    """Configuration could not be read or failed validation."""


__all__ = ["FourDError", "InvalidArgument", "UseAfterRemoval", "ConfigError"]
