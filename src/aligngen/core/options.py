"""Generation options shared by all generators of one task."""

from __future__ import annotations

import math
from dataclasses import dataclass


def _require_identifier(value: str, option: str) -> None:
    if not isinstance(value, str) or not value.isidentifier():
        raise ValueError(f"{option} must be a Python identifier, got {value!r}")


def _require_module_path(value: str, option: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{option} must be a dotted module path, got {value!r}")
    for part in value.split("."):
        _require_identifier(part, option)


@dataclass(frozen=True)
class GenerationOptions:
    """Knobs for the emitted code.

    Attributes:
        aligner_name: Member name of the alignment buffer; also prefixes the
            latency property and the status port.
        aligner_module: Module the emitted code imports ``StreamAligner`` from.
        runtime_module: Module providing ``FlowStatus``, ``InputPort`` and
            ``OutputPort`` to the emitted code.
        buffer_size_factor: Safety factor applied to the minimum number of
            buffer slots covering the latency window.
        status_interval: Seconds between two status port writes.
    """

    aligner_name: str = "aggregator"
    aligner_module: str = "aggregator"
    runtime_module: str = "aligngen.runtime"
    buffer_size_factor: float = 2.0
    status_interval: float = 1.0

    def __post_init__(self) -> None:
        _require_identifier(self.aligner_name, "aligner_name")
        _require_module_path(self.aligner_module, "aligner_module")
        _require_module_path(self.runtime_module, "runtime_module")
        for option in ("buffer_size_factor", "status_interval"):
            value = getattr(self, option)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{option} must be a number, got {type(value).__name__}")
            if not math.isfinite(float(value)) or float(value) <= 0:
                raise ValueError(f"{option} must be finite and > 0")
