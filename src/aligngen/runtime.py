"""Minimal in-process host runtime for generated task bases.

Generated modules import :class:`FlowStatus`, :class:`InputPort` and
:class:`OutputPort` from here unless ``GenerationOptions.runtime_module``
points somewhere else. Reads never block.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Any


class FlowStatus(Enum):
    """Outcome of a non-blocking port read."""

    NO_DATA = "no_data"
    OLD_DATA = "old_data"
    NEW_DATA = "new_data"


class InputPort:
    """Queue-backed input port.

    Example::

        port = InputPort("imu", "ImuSample")
        port.push(sample)
        status, value = port.read(False)   # (FlowStatus.NEW_DATA, sample)
        status, value = port.read(False)   # (FlowStatus.OLD_DATA, None)
    """

    def __init__(self, name: str, type_name: str, *, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.name = name
        self.type_name = type_name
        self._queue: deque[Any] = deque(maxlen=capacity)
        self._last: Any = None
        self._has_data = False

    def push(self, sample: Any) -> None:
        """Queue a sample; with a capacity the oldest queued sample is dropped."""
        self._queue.append(sample)

    def read(self, copy_old_data: bool = True) -> tuple[FlowStatus, Any]:
        if self._queue:
            self._last = self._queue.popleft()
            self._has_data = True
            return FlowStatus.NEW_DATA, self._last
        if not self._has_data:
            return FlowStatus.NO_DATA, None
        return FlowStatus.OLD_DATA, self._last if copy_old_data else None

    @property
    def pending(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"InputPort({self.name!r}, {self.type_name!r}, pending={len(self._queue)})"


class OutputPort:
    """Output port that keeps every written sample."""

    def __init__(self, name: str, type_name: str) -> None:
        self.name = name
        self.type_name = type_name
        self.samples: list[Any] = []

    def write(self, sample: Any) -> None:
        self.samples.append(sample)

    @property
    def last(self) -> Any:
        return self.samples[-1] if self.samples else None

    def __repr__(self) -> str:
        return f"OutputPort({self.name!r}, {self.type_name!r}, written={len(self.samples)})"
