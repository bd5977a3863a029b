"""Task description: the surface generators read from and write to.

A :class:`TaskDescription` collects everything a generated task base
class is made of (ports, properties, members, method stubs, lifecycle
hook fragments and imports) plus a two-phase worklist::

    task = TaskDescription("imu_fusion")
    task.input_port("imu", "ImuSample")
    task.input_port("gps", "GpsFix")

    with task.stream_aligner() as aligner:
        aligner.max_latency(0.2)
        aligner.align_port("imu", 0.01)
        aligner.align_port("gps", 1.0)

    source = generate_task(task)

Declaration-time effects happen immediately. Work that needs the full
set of declarations is queued with :meth:`TaskDescription.add_generation_handler`
and drained once by :meth:`TaskDescription.run_deferred`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from pyrsistent import PRecord, field

from aligngen.core.errors import ConfigurationError, GenerationError, UnregisteredListenerError
from aligngen.core.options import GenerationOptions
from aligngen.core.port import Port, PortDirection, is_valid_name
from aligngen.listeners.loop import install_listener_loop
from aligngen.listeners.registry import ListenerRegistry, SampleHandler
from aligngen.utils.logging import get_logger

if TYPE_CHECKING:
    from aligngen.aligner.config import StreamAlignerDeclaration
    from aligngen.aligner.generator import StreamAlignerGenerator

logger = get_logger(__name__)

HOOKS: tuple[str, ...] = ("configure", "update", "stop", "cleanup")
"""Lifecycle hooks in the order they are rendered."""

GenerationHandler = Callable[[], None]


class TaskProperty(PRecord):
    name = field(type=str, mandatory=True)
    type_name = field(type=str, mandatory=True)
    default = field(mandatory=True)
    doc = field(type=(str, type(None)), initial=None)


class TaskMember(PRecord):
    """A typed member field initialised from a Python expression."""

    name = field(type=str, mandatory=True)
    type_name = field(type=str, mandatory=True)
    initial = field(type=str, mandatory=True)


class UserMethod(PRecord):
    name = field(type=str, mandatory=True)
    params = field(type=tuple, initial=())
    body = field(type=str, mandatory=True)
    doc = field(type=(str, type(None)), initial=None)


class TaskDescription:
    """Declarative description of one task being generated."""

    def __init__(self, name: str, *, options: GenerationOptions | None = None) -> None:
        if not is_valid_name(name):
            raise ConfigurationError(f"Task name must be a Python identifier, got {name!r}")
        if options is not None and not isinstance(options, GenerationOptions):
            raise TypeError(f"options must be GenerationOptions, got {type(options).__name__}")
        self.name = name
        self.options = options if options is not None else GenerationOptions()

        self._ports: dict[str, Port] = {}
        self._properties: dict[str, TaskProperty] = {}
        self._members: dict[str, TaskMember] = {}
        self._methods: dict[str, UserMethod] = {}
        self._hooks: dict[str, list[str]] = {hook: [] for hook in HOOKS}
        self._imports: list[str] = []
        self._attributes: dict[str, str] = {f"{hook}_hook": f"{hook} hook" for hook in HOOKS}

        self._handlers: list[GenerationHandler] = []
        self._late_handlers: list[GenerationHandler] = []
        self._deferred_state = "pending"

        self.listener_registry: ListenerRegistry | None = None
        self.stream_aligner_generator: StreamAlignerGenerator | None = None

    # ------------------------------------------------------------------
    # ports
    # ------------------------------------------------------------------

    def input_port(self, name: str, type_name: str) -> Port:
        return self._add_port(name, type_name, PortDirection.INPUT)

    def output_port(self, name: str, type_name: str) -> Port:
        return self._add_port(name, type_name, PortDirection.OUTPUT)

    def find_port(self, name: str) -> Port | None:
        return self._ports.get(name)

    @property
    def ports(self) -> tuple[Port, ...]:
        return tuple(self._ports.values())

    def _add_port(self, name: str, type_name: str, direction: PortDirection) -> Port:
        self._check_name(name, "port")
        if not isinstance(type_name, str) or not type_name:
            raise TypeError(f"Port type name must be a non-empty string, got {type_name!r}")
        if name in self._ports:
            raise ConfigurationError(f"Port {name!r} is already declared on task {self.name!r}")
        self._claim(f"_{name}", f"port {name!r}")
        port = Port(name=name, type_name=type_name, direction=direction)
        self._ports[name] = port
        return port

    # ------------------------------------------------------------------
    # properties, members, methods
    # ------------------------------------------------------------------

    def add_property(
        self,
        name: str,
        type_name: str,
        default: Any,
        *,
        doc: str | None = None,
    ) -> TaskProperty:
        self._check_name(name, "property")
        if name in self._properties:
            raise ConfigurationError(
                f"Property {name!r} is already declared on task {self.name!r}"
            )
        self._claim(name, f"property {name!r}")
        prop = TaskProperty(name=name, type_name=type_name, default=default, doc=doc)
        self._properties[name] = prop
        return prop

    def find_property(self, name: str) -> TaskProperty | None:
        return self._properties.get(name)

    @property
    def properties(self) -> tuple[TaskProperty, ...]:
        return tuple(self._properties.values())

    def add_member(self, name: str, type_name: str, initial: str) -> TaskMember:
        self._check_name(name, "member")
        if name in self._members:
            raise ConfigurationError(f"Member {name!r} is already declared on task {self.name!r}")
        self._claim(name, f"member {name!r}")
        member = TaskMember(name=name, type_name=type_name, initial=initial)
        self._members[name] = member
        return member

    @property
    def members(self) -> tuple[TaskMember, ...]:
        return tuple(self._members.values())

    def add_user_method(
        self,
        name: str,
        params: Iterable[str],
        body: str,
        *,
        doc: str | None = None,
    ) -> UserMethod:
        """Declare a method stub meant to be overridden by the task author."""
        self._check_name(name, "method")
        params = tuple(params)
        for param in params:
            self._check_name(param, "parameter")
        if name in self._methods:
            raise ConfigurationError(f"Method {name!r} is already declared on task {self.name!r}")
        self._claim(name, f"method {name!r}")
        method = UserMethod(name=name, params=params, body=body, doc=doc)
        self._methods[name] = method
        return method

    @property
    def user_methods(self) -> tuple[UserMethod, ...]:
        return tuple(self._methods.values())

    # ------------------------------------------------------------------
    # hooks and imports
    # ------------------------------------------------------------------

    def in_hook(self, hook: str, code: str, *, prepend: bool = False) -> None:
        """Add a code fragment to a lifecycle hook body."""
        if hook not in self._hooks:
            raise ValueError(f"Unknown hook {hook!r}. Expected one of: {', '.join(HOOKS)}")
        if not isinstance(code, str):
            raise TypeError(f"Hook code must be str, got {type(code).__name__}")
        if prepend:
            self._hooks[hook].insert(0, code)
        else:
            self._hooks[hook].append(code)

    def hook_code(self, hook: str) -> tuple[str, ...]:
        if hook not in self._hooks:
            raise ValueError(f"Unknown hook {hook!r}. Expected one of: {', '.join(HOOKS)}")
        return tuple(self._hooks[hook])

    def add_import(self, line: str) -> None:
        line = line.strip()
        if not line.startswith(("import ", "from ")):
            raise ValueError(f"Not an import statement: {line!r}")
        if line not in self._imports:
            self._imports.append(line)

    @property
    def imports(self) -> tuple[str, ...]:
        return tuple(self._imports)

    # ------------------------------------------------------------------
    # deferred generation
    # ------------------------------------------------------------------

    def add_generation_handler(self, handler: GenerationHandler, *, late: bool = False) -> None:
        """Queue *handler* to run once all declarations are known.

        Late handlers run after every regular handler, each group in
        enqueue order. Handlers may queue more handlers while the worklist
        drains; a regular handler queued by a late one runs before the
        next late handler.
        """
        if not callable(handler):
            raise TypeError(f"Generation handler must be callable, got {type(handler).__name__}")
        if self._deferred_state == "done":
            raise GenerationError(
                f"Cannot add generation handlers to task {self.name!r} after generation"
            )
        if late:
            self._late_handlers.append(handler)
        else:
            self._handlers.append(handler)

    def run_deferred(self) -> None:
        if self._deferred_state != "pending":
            raise GenerationError(f"Deferred generation already ran for task {self.name!r}")
        self._deferred_state = "draining"
        logger.debug(
            "Running %d deferred and %d late handlers for task %s",
            len(self._handlers),
            len(self._late_handlers),
            self.name,
        )
        regular = late = 0
        try:
            while regular < len(self._handlers) or late < len(self._late_handlers):
                if regular < len(self._handlers):
                    handler = self._handlers[regular]
                    regular += 1
                else:
                    handler = self._late_handlers[late]
                    late += 1
                handler()
        finally:
            self._deferred_state = "done"

    @property
    def deferred_ran(self) -> bool:
        return self._deferred_state == "done"

    # ------------------------------------------------------------------
    # port listeners
    # ------------------------------------------------------------------

    def register_listener_generator(self) -> ListenerRegistry:
        """Install the port-listener loop generator once; later calls are no-ops."""
        if self.listener_registry is None:
            registry = ListenerRegistry()
            self.listener_registry = registry
            self.add_generation_handler(lambda: install_listener_loop(self, registry), late=True)
        return self.listener_registry

    def add_listener(self, port_name: str, handler: SampleHandler) -> None:
        logger.info("Added port listener for port %s", port_name)
        if self.listener_registry is None:
            raise UnregisteredListenerError("add_listener")
        self.listener_registry.add_listener(port_name, handler)

    def add_post_read_block(self, code: str) -> None:
        if self.listener_registry is None:
            raise UnregisteredListenerError("add_post_read_block")
        self.listener_registry.add_post_read_block(code)

    # ------------------------------------------------------------------
    # stream aligner
    # ------------------------------------------------------------------

    def stream_aligner(self) -> StreamAlignerDeclaration:
        """Start a stream aligner declaration block.

        Example::

            with task.stream_aligner() as aligner:
                aligner.max_latency(0.5)
                aligner.align_port("laser", 0.025)
        """
        from aligngen.aligner.config import StreamAlignerDeclaration

        if self.stream_aligner_generator is not None:
            raise ConfigurationError(f"Task {self.name!r} already declares a stream aligner")
        return StreamAlignerDeclaration(self)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _check_name(self, name: str, what: str) -> None:
        if not is_valid_name(name):
            raise ConfigurationError(f"Invalid {what} name {name!r}: must be a Python identifier")

    def _claim(self, attribute: str, owner: str) -> None:
        existing = self._attributes.get(attribute)
        if existing is not None:
            raise ConfigurationError(
                f"{owner[:1].upper()}{owner[1:]} clashes with {existing} on attribute {attribute!r}"
            )
        self._attributes[attribute] = owner

    def __repr__(self) -> str:
        return f"TaskDescription({self.name!r}, ports={list(self._ports)})"
