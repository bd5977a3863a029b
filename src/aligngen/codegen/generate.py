"""Entry point turning a task description into module source."""

from __future__ import annotations

from aligngen.codegen.render import render_task
from aligngen.core.errors import GenerationError
from aligngen.core.task import TaskDescription
from aligngen.utils.logging import get_logger

logger = get_logger(__name__)


def generate_task(task: TaskDescription) -> str:
    """Run the deferred generation phase and return the module source.

    Raises:
        TypeError: If *task* is not a :class:`TaskDescription`.
        GenerationError: On any configuration error (subclasses of
            :class:`~aligngen.core.errors.ConfigurationError`) or when the
            emitted source does not compile. No source is returned then.
    """
    if not isinstance(task, TaskDescription):
        raise TypeError(f"task must be TaskDescription, got {type(task).__name__}")

    task.run_deferred()

    source = render_task(task)
    try:
        compile(source, f"{task.name}.py", "exec")
    except SyntaxError as exc:
        raise GenerationError(f"Generated source is invalid: {exc}") from exc

    logger.info(
        "Generated task %s: %d port(s), %d propert(ies), %d line(s)",
        task.name,
        len(task.ports),
        len(task.properties),
        source.count("\n"),
    )
    return source
