"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from aligngen import TaskDescription


@dataclass(frozen=True)
class Sample:
    """Timestamped sample as read from a task input port."""

    time: float
    value: Any = None


class FakeStreamAligner:
    """Stand-in for the external stream aligner.

    Releases pushed samples in timestamp order (push order on ties) and
    records every call so tests can inspect the emitted hook code.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.timeout: float | None = None
        self.streams: dict[int, dict[str, Any]] = {}
        self._next_index = 0
        self._buffer: list[tuple[float, int, int, Any]] = []
        self._seq = 0
        self.status_requests = 0

    def clear(self) -> None:
        self.calls.append(("clear",))
        self._buffer.clear()

    def set_timeout(self, seconds: float) -> None:
        self.calls.append(("set_timeout", seconds))
        self.timeout = seconds

    def register_stream(
        self,
        callback: Callable[[float, Any], None],
        buffer_size: int,
        period: float,
        priority: int,
        name: str,
    ) -> int:
        index = self._next_index
        self._next_index += 1
        self.streams[index] = {
            "callback": callback,
            "buffer_size": buffer_size,
            "period": period,
            "priority": priority,
            "name": name,
        }
        self.calls.append(("register_stream", name, buffer_size))
        return index

    def unregister_stream(self, index: int) -> None:
        self.calls.append(("unregister_stream", index))
        del self.streams[index]

    def push(self, index: int, ts: float, sample: Any) -> None:
        if index not in self.streams:
            raise RuntimeError("invalid stream index.")
        self._buffer.append((ts, self._seq, index, sample))
        self._seq += 1

    def step(self) -> bool:
        if not self._buffer:
            return False
        self._buffer.sort(key=lambda item: (item[0], item[1]))
        ts, _, index, sample = self._buffer.pop(0)
        self.streams[index]["callback"](ts, sample)
        return True

    def get_status(self) -> dict[str, Any]:
        self.status_requests += 1
        return {"streams": sorted(s["name"] for s in self.streams.values())}


@pytest.fixture
def aggregator_module(monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:
    """Install a fake ``aggregator`` module for generated code to import."""
    module = types.ModuleType("aggregator")
    module.StreamAligner = FakeStreamAligner
    monkeypatch.setitem(sys.modules, "aggregator", module)
    return module


@pytest.fixture
def load_generated(aggregator_module: types.ModuleType) -> Callable[[str], dict[str, Any]]:
    """Return a loader that executes generated source into a fresh namespace."""

    def load(source: str, name: str = "generated_task") -> dict[str, Any]:
        namespace: dict[str, Any] = {"__name__": name}
        exec(compile(source, f"{name}.py", "exec"), namespace, namespace)
        return namespace

    return load


def imu_gps_task() -> TaskDescription:
    """Two aligned ports: imu every 10 ms, gps every second, 200 ms latency."""
    task = TaskDescription("imu_fusion")
    task.input_port("imu", "ImuSample")
    task.input_port("gps", "GpsFix")
    with task.stream_aligner() as aligner:
        aligner.max_latency(0.2)
        aligner.align_port("imu", 0.01)
        aligner.align_port("gps", 1.0)
    return task


class FakeClock:
    """Replacement for the ``time`` module inside a generated namespace."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def time(self) -> float:
        return self.now
