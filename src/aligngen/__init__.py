"""aligngen: generated port-listener loops and stream-aligned task bases.

Example::

    from aligngen import TaskDescription, generate_task

    task = TaskDescription("imu_fusion")
    task.input_port("imu", "ImuSample")

    with task.stream_aligner() as aligner:
        aligner.max_latency(0.2)
        aligner.align_port("imu", 0.01)

    source = generate_task(task)
"""

from aligngen.core import (
    HOOKS,
    ConfigurationError,
    GenerationError,
    GenerationOptions,
    MissingConfigurationError,
    Port,
    PortDirection,
    TaskDescription,
    UnknownPortError,
    UnregisteredListenerError,
)
from aligngen.aligner import AlignedPortSpec, StreamAlignerConfig, buffer_capacity
from aligngen.codegen import generate_task, render_task
from aligngen.listeners import ListenerRegistry, SampleHandler

__version__ = "0.1.0"

__all__ = [
    "AlignedPortSpec",
    "ConfigurationError",
    "GenerationError",
    "GenerationOptions",
    "HOOKS",
    "ListenerRegistry",
    "MissingConfigurationError",
    "Port",
    "PortDirection",
    "SampleHandler",
    "StreamAlignerConfig",
    "TaskDescription",
    "UnknownPortError",
    "UnregisteredListenerError",
    "buffer_capacity",
    "generate_task",
    "render_task",
]
