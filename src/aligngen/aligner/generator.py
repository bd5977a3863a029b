"""Stream aligner code generator.

Wraps an external ``StreamAligner`` buffer around the port-listener
loop: every aligned port pushes its samples into the buffer, the buffer
is drained after each read pass, and samples come back out in timestamp
order through one callback per port. Work is split in two phases:

* :meth:`StreamAlignerGenerator.apply_early` runs when the declaration
  block closes and declares what other declarations may look up
  (properties, the status port, listeners);
* :meth:`StreamAlignerGenerator.apply_deferred` runs after all
  declarations and emits members, callbacks and hook code.

Emitted code expects the aligner to provide ``clear()``,
``set_timeout(seconds)``,
``register_stream(callback, buffer_size, period, priority, name)``,
``unregister_stream(index)``, ``push(index, time, sample)``, ``step()``
and ``get_status()``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aligngen.core.errors import UnknownPortError
from aligngen.listeners.loop import sample_variable
from aligngen.listeners.registry import SampleHandler
from aligngen.utils.logging import get_logger
from aligngen.utils.text import _mangle_symbol

if TYPE_CHECKING:
    from aligngen.aligner.config import AlignedPortSpec, StreamAlignerConfig
    from aligngen.core.task import TaskDescription

logger = get_logger(__name__)


def buffer_capacity(max_latency: float, period: float, factor: float = 2.0) -> int:
    """Buffer slots for a stream: *factor* times the samples in one latency window."""
    return int(factor * math.ceil(max_latency / period))


@dataclass(frozen=True)
class StreamSymbols:
    """Names emitted for one aligned stream."""

    spec: AlignedPortSpec
    index: str
    callback: str
    period_property: str


class StreamAlignerGenerator:
    def __init__(self, task: TaskDescription, config: StreamAlignerConfig) -> None:
        if config.latency is None:
            raise ValueError("StreamAlignerConfig has no max_latency")
        self.task = task
        self.config = config
        self.name = task.options.aligner_name
        self.streams: list[StreamSymbols] = []

    @property
    def latency_property(self) -> str:
        return f"{self.name}_max_latency"

    @property
    def status_port(self) -> str:
        return f"{self.name}_status"

    @property
    def status_type_name(self) -> str:
        return f"{self.task.options.aligner_module}.StreamAlignerStatus"

    def apply_early(self) -> None:
        task = self.task

        task.add_property(
            self.latency_property,
            "float",
            self.config.latency,
            doc="Maximum time that should be waited for a delayed sample to arrive",
        )
        logger.info("Adding property %s", self.latency_property)

        task.output_port(self.status_port, self.status_type_name)
        logger.info("Adding port %s", self.status_port)

        used: set[str] = set()
        for spec in self.config.aligned_ports:
            # Several specs may name the same port; they share the property.
            property_name = f"{spec.port_name}_period"
            if task.find_property(property_name) is None:
                task.add_property(
                    property_name,
                    "float",
                    spec.period,
                    doc=f"Time in s between {spec.port_name} readings",
                )
                logger.info("Adding property %s", property_name)

            symbols = StreamSymbols(
                spec=spec,
                index=_mangle_symbol(spec.port_name, "_idx", used),
                callback=_mangle_symbol(spec.port_name, "_callback", used),
                period_property=property_name,
            )
            self.streams.append(symbols)
            task.add_listener(spec.port_name, self._push_handler(symbols.index))

        task.add_post_read_block(f"while self.{self.name}.step():\n    pass")

    def _push_handler(self, index_name: str) -> SampleHandler:
        name = self.name

        def push(sample: str) -> str:
            return f"self.{name}.push(self.{index_name}, {sample}.time, {sample})"

        return push

    def apply_deferred(self) -> None:
        task = self.task
        options = task.options
        name = self.name

        task.add_import("import math")
        task.add_import("import time")
        task.add_import(f"from {options.aligner_module} import StreamAligner")
        task.add_member(name, "StreamAligner", "StreamAligner()")
        task.add_member("_last_status_time", "float", "0.0")

        task.in_hook(
            "configure",
            f"self.{name}.clear()\nself.{name}.set_timeout(self.{self.latency_property})",
        )

        for stream in self.streams:
            self._emit_stream(stream)

        task.in_hook(
            "update",
            "\n".join(
                [
                    "_cur_time = time.time()",
                    f"if _cur_time - self._last_status_time > {float(options.status_interval)!r}:",
                    "    self._last_status_time = _cur_time",
                    f"    self._{self.status_port}.write(self.{name}.get_status())",
                ]
            ),
        )
        task.in_hook("stop", f"self.{name}.clear()")

    def _emit_stream(self, stream: StreamSymbols) -> None:
        task = self.task
        name = self.name
        spec = stream.spec
        port_name = spec.port_name

        port = task.find_port(port_name)
        if port is None:
            raise UnknownPortError(port_name, f"Error trying to align nonexisting port {port_name}")
        type_name = port.element_type_name()

        task.add_user_method(
            stream.callback,
            ("ts", sample_variable(port_name)),
            f'raise NotImplementedError("Aggregator callback for {port_name} not implemented")',
            doc=f"Handle a {type_name} sample from {port_name}, in timestamp order.",
        )
        task.add_member(stream.index, "int", "-1")

        period = f"_{port_name}_period"
        factor = float(self.task.options.buffer_size_factor)
        latency = float(self.config.latency)
        task.in_hook(
            "configure",
            "\n".join(
                [
                    f"{period} = self.{stream.period_property}",
                    f"self.{stream.index} = self.{name}.register_stream(",
                    f"    self.{stream.callback},",
                    f"    int({factor!r} * math.ceil({latency!r} / {period})),",
                    f"    {period},",
                    f"    {spec.priority!r},",
                    f"    {port_name!r},",
                    ")",
                    "self._last_status_time = 0.0",
                ]
            ),
        )
        task.in_hook("cleanup", f"self.{name}.unregister_stream(self.{stream.index})")

        logger.info(
            "Aligning port %s (%s): nominal buffer size %d",
            port_name,
            type_name,
            buffer_capacity(latency, spec.period, factor),
        )
