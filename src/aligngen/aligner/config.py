"""Declarative stream aligner configuration and its ``with`` block."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from aligngen.aligner.generator import StreamAlignerGenerator
from aligngen.core.errors import ConfigurationError, MissingConfigurationError
from aligngen.core.port import is_valid_name
from aligngen.utils.logging import get_logger

if TYPE_CHECKING:
    from aligngen.core.task import TaskDescription

logger = get_logger(__name__)


def _seconds(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{what} must be a number of seconds, got {type(value).__name__}")
    if not math.isfinite(float(value)) or float(value) <= 0:
        raise ConfigurationError(f"{what} must be finite and > 0, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class AlignedPortSpec:
    """One input stream taking part in alignment.

    Attributes:
        port_name: Input port the samples are read from.
        period: Nominal time in seconds between two samples.
        priority: Tie-break order for samples with equal timestamps
            (lower first); ``-1`` leaves the aligner's default.
    """

    port_name: str
    period: float
    priority: int = -1


class StreamAlignerConfig:
    """Options collected inside a ``stream_aligner()`` block."""

    def __init__(self) -> None:
        self.latency: float | None = None
        self.aligned_ports: list[AlignedPortSpec] = []

    def max_latency(self, seconds: float) -> StreamAlignerConfig:
        """Maximum time to wait for a delayed sample before moving on."""
        self.latency = _seconds(seconds, "max_latency")
        return self

    def align_port(self, name: str, period: float, *, priority: int = -1) -> StreamAlignerConfig:
        if not is_valid_name(name):
            raise ConfigurationError(f"Invalid aligned port name {name!r}")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise TypeError(f"priority must be int, got {type(priority).__name__}")
        self.aligned_ports.append(
            AlignedPortSpec(port_name=name, period=_seconds(period, f"{name} period"), priority=priority)
        )
        return self


class StreamAlignerDeclaration:
    """Context manager behind :meth:`TaskDescription.stream_aligner`.

    Leaving the block cleanly declares the aligner's properties, status
    port and listeners right away and queues the rest of the generation.
    Leaving it with an exception declares nothing.
    """

    def __init__(self, task: TaskDescription) -> None:
        self._task = task
        self._config = StreamAlignerConfig()
        self._entered = False

    @property
    def config(self) -> StreamAlignerConfig:
        return self._config

    def __enter__(self) -> StreamAlignerConfig:
        if self._entered:
            raise RuntimeError("stream_aligner() declarations cannot be re-entered")
        self._entered = True
        self._task.register_listener_generator()
        return self._config

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            return
        self._finalize()

    def _finalize(self) -> None:
        task = self._task
        if self._config.latency is None:
            raise MissingConfigurationError(
                "max_latency", f"no max_latency specified for {task.options.aligner_name}"
            )
        if task.stream_aligner_generator is not None:
            raise ConfigurationError(f"Task {task.name!r} already declares a stream aligner")

        generator = StreamAlignerGenerator(task, self._config)
        task.stream_aligner_generator = generator
        generator.apply_early()
        task.add_generation_handler(generator.apply_deferred)
        logger.debug(
            "Declared stream aligner on task %s with %d stream(s)",
            task.name,
            len(self._config.aligned_ports),
        )
