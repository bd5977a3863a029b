"""Task description model shared by all generators."""

from aligngen.core.errors import (
    ConfigurationError,
    GenerationError,
    MissingConfigurationError,
    UnknownPortError,
    UnregisteredListenerError,
)
from aligngen.core.options import GenerationOptions
from aligngen.core.port import Port, PortDirection
from aligngen.core.task import (
    HOOKS,
    TaskDescription,
    TaskMember,
    TaskProperty,
    UserMethod,
)

__all__ = [
    "ConfigurationError",
    "GenerationError",
    "GenerationOptions",
    "HOOKS",
    "MissingConfigurationError",
    "Port",
    "PortDirection",
    "TaskDescription",
    "TaskMember",
    "TaskProperty",
    "UnknownPortError",
    "UnregisteredListenerError",
    "UserMethod",
]
