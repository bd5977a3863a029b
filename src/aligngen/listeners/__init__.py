"""Port listeners: per-port sample handlers merged into one drain loop."""

from aligngen.listeners.loop import generate_listener_loop, install_listener_loop, sample_variable
from aligngen.listeners.registry import ListenerRegistry, SampleHandler

__all__ = [
    "ListenerRegistry",
    "SampleHandler",
    "generate_listener_loop",
    "install_listener_loop",
    "sample_variable",
]
