"""Per-task registry of port listeners and post-read blocks."""

from __future__ import annotations

from collections.abc import Callable

from pyrsistent import PVector, pvector

from aligngen.core.errors import GenerationError

SampleHandler = Callable[[str], str]
"""Maps the name of a freshly read sample variable to a code fragment."""


class ListenerRegistry:
    """Ordered collection of sample handlers keyed by port name.

    Port order is first-registration order and handler order within a
    port is registration order; both carry through to the emitted loop.
    Port names are not checked here, only when the loop is emitted.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[SampleHandler]] = {}
        self._post_read: list[str] = []
        self._frozen = False

    def add_listener(self, port_name: str, handler: SampleHandler) -> None:
        if not isinstance(port_name, str):
            raise TypeError(f"port_name must be str, got {type(port_name).__name__}")
        if not callable(handler):
            raise TypeError(f"Listener handler must be callable, got {type(handler).__name__}")
        self._check_open()
        self._listeners.setdefault(port_name, []).append(handler)

    def add_post_read_block(self, code: str) -> None:
        if not isinstance(code, str):
            raise TypeError(f"Post-read block must be str, got {type(code).__name__}")
        self._check_open()
        self._post_read.append(code)

    @property
    def port_names(self) -> tuple[str, ...]:
        return tuple(self._listeners)

    def handlers_for(self, port_name: str) -> tuple[SampleHandler, ...]:
        return tuple(self._listeners.get(port_name, ()))

    @property
    def post_read_blocks(self) -> tuple[str, ...]:
        return tuple(self._post_read)

    def freeze(self) -> tuple[PVector, PVector]:
        """Snapshot the registry for emission; no changes are accepted afterwards.

        Returns ``(port_name, handlers)`` pairs in port registration order
        and the post-read blocks.
        """
        self._frozen = True
        listeners = pvector(
            (name, pvector(handlers)) for name, handlers in self._listeners.items()
        )
        return listeners, pvector(self._post_read)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_open(self) -> None:
        if self._frozen:
            raise GenerationError("Listener registry was already consumed by the loop generator")

    def __len__(self) -> int:
        return sum(len(handlers) for handlers in self._listeners.values())
