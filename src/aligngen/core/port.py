"""Task ports as seen by the generators."""

from __future__ import annotations

import keyword
from enum import Enum

from pyrsistent import PRecord, field


class PortDirection(Enum):
    INPUT = "input"
    OUTPUT = "output"


class Port(PRecord):
    """Immutable, resolved task port.

    Attributes:
        name: Port name; doubles as an identifier in emitted code.
        type_name: Element type name, opaque to the generators.
        direction: Whether the task reads or writes the port.
    """

    name = field(type=str, mandatory=True)
    type_name = field(type=str, mandatory=True)
    direction = field(type=PortDirection, mandatory=True)

    def element_type_name(self) -> str:
        return self.type_name

    @property
    def is_input(self) -> bool:
        return self.direction is PortDirection.INPUT


def is_valid_name(name: object) -> bool:
    """True when *name* can be used verbatim as an attribute in emitted code."""
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)
