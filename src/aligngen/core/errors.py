"""Generation-time error hierarchy.

Every error raised here is fatal for the generation pass that raised it:
nothing is retried and no partial source is produced.
"""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for all code generation failures."""


class ConfigurationError(GenerationError):
    """Raised when a task declaration is invalid or inconsistent."""


class UnregisteredListenerError(ConfigurationError):
    """Raised when listeners are added before the listener generator exists."""

    def __init__(self, operation: str = "add_listener") -> None:
        super().__init__(
            f"listener generator was not registered prior to calling {operation}"
        )
        self.operation = operation


class UnknownPortError(ConfigurationError):
    """Raised when a port name does not resolve at emission time."""

    def __init__(self, port_name: str, message: str | None = None) -> None:
        super().__init__(message or f"Unknown port {port_name!r}")
        self.port_name = port_name


class MissingConfigurationError(ConfigurationError):
    """Raised when a required declaration option was never set."""

    def __init__(self, option: str, message: str | None = None) -> None:
        super().__init__(message or f"required option {option!r} was not set")
        self.option = option
