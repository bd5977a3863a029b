"""Port-listener loop generator.

Turns the final state of a :class:`ListenerRegistry` into one drain loop
that polls every registered port until a full sweep yields no new data::

    keep_going = True
    while keep_going:
        keep_going = False
        flow_status, imu_sample = self._imu.read(False)
        if flow_status == FlowStatus.NEW_DATA:
            <imu handlers>
            keep_going = True
        <post-read blocks>
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from aligngen.core.errors import ConfigurationError, UnknownPortError
from aligngen.listeners.registry import ListenerRegistry
from aligngen.utils.logging import get_logger
from aligngen.utils.text import _indent_fragment

if TYPE_CHECKING:
    from aligngen.core.task import TaskDescription

logger = get_logger(__name__)


def sample_variable(port_name: str) -> str:
    return f"{port_name}_sample"


def generate_listener_loop(task: TaskDescription, registry: ListenerRegistry) -> str:
    """Emit the drain loop for *registry*; consumes the registry."""
    listeners, post_read = registry.freeze()

    lines = [
        "keep_going = True",
        "while keep_going:",
        "    keep_going = False",
    ]
    for port_name, handlers in listeners:
        port = task.find_port(port_name)
        if port is None:
            raise UnknownPortError(
                port_name, f"Internal error trying to listen to nonexisting port {port_name}"
            )
        if not port.is_input:
            raise ConfigurationError(f"Cannot listen to output port {port_name!r}")

        sample = sample_variable(port_name)
        lines.append(f"    flow_status, {sample} = self._{port_name}.read(False)")
        lines.append("    if flow_status == FlowStatus.NEW_DATA:")
        for handler in handlers:
            fragment = handler(sample)
            if not isinstance(fragment, str):
                raise TypeError(
                    f"Listener for port {port_name!r} returned {type(fragment).__name__}, "
                    "expected str"
                )
            lines.extend(_indent_fragment(fragment, 8))
        lines.append("        keep_going = True")

    for block in post_read:
        lines.extend(_indent_fragment(block, 4))

    logger.debug(
        "Assembled listener loop for task %s: %d port(s), %d handler(s), %d post-read block(s)",
        task.name,
        len(listeners),
        len(registry),
        len(post_read),
    )
    return "\n".join(lines)


def install_listener_loop(task: TaskDescription, registry: ListenerRegistry) -> None:
    """Deferred step: put the drain loop in front of the update hook."""
    code = generate_listener_loop(task, registry)
    task.add_import(f"from {task.options.runtime_module} import FlowStatus")
    task.in_hook("update", code, prepend=True)


__all__ = ["generate_listener_loop", "install_listener_loop", "sample_variable"]
