from __future__ import annotations


class ColliderError(Exception):
    """Base class for orchestrator errors."""


class ConfigError(ColliderError):
    """Invalid configuration or unreadable source root."""


class DuplicateTaskError(ColliderError):
    def __init__(self, name: str):
        super().__init__(f"Task '{name}' is already registered")
        self.name = name


class UnknownTaskError(ColliderError):
    def __init__(self, name: str):
        super().__init__(f"Task '{name}' is not registered")
        self.name = name


class WatchSetupFailure(ColliderError):
    """A filesystem watch could not be established."""


class TransformFailure(ColliderError):
    """A compile step failed. Recoverable."""

    def __init__(self, unit: str, message: str):
        super().__init__(message)
        self.unit = unit
        self.message = message


FATAL_ERRORS = (ConfigError, DuplicateTaskError, UnknownTaskError, WatchSetupFailure)
