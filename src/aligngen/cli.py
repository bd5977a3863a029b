"""Command line entry point: ``aligngen generate MODULE[:ATTR]``."""

from __future__ import annotations

import argparse
import importlib
import runpy
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from aligngen.codegen import generate_task
from aligngen.core.errors import GenerationError
from aligngen.core.task import TaskDescription
from aligngen.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _split_target(target: str) -> tuple[str, str]:
    location, sep, attr = target.rpartition(":")
    if sep and attr.isidentifier() and location:
        return location, attr
    return target, "task"


def load_task(target: str) -> TaskDescription:
    """Load a task description from ``module.path[:attr]`` or ``file.py[:attr]``.

    The attribute may also be a zero-argument callable returning the task.
    """
    location, attr = _split_target(target)
    namespace: dict[str, Any]
    if location.endswith(".py") or Path(location).is_file():
        path = Path(location)
        if not path.is_file():
            raise FileNotFoundError(f"No such task file: {location}")
        namespace = runpy.run_path(str(path), run_name="__aligngen__")
    else:
        namespace = vars(importlib.import_module(location))

    if attr not in namespace:
        raise LookupError(f"{location!r} has no attribute {attr!r}")
    value = namespace[attr]
    if not isinstance(value, TaskDescription) and callable(value):
        value = value()
    if not isinstance(value, TaskDescription):
        raise TypeError(
            f"{location}:{attr} must be a TaskDescription, got {type(value).__name__}"
        )
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aligngen",
        description="Generate task base classes with port-listener loops and stream aligners.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $ALIGNGEN_LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate the module for one task.")
    generate.add_argument(
        "target",
        help="Task location as module.path[:attr] or path/to/file.py[:attr] (default attr: task).",
    )
    output = generate.add_mutually_exclusive_group()
    output.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file path (default: <task name>_base.py in the current directory).",
    )
    output.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated source instead of writing a file.",
    )
    return parser


def _run_generate(args: argparse.Namespace) -> int:
    task = load_task(args.target)
    source = generate_task(task)

    if args.stdout:
        sys.stdout.write(source)
        return 0

    output_path = Path(args.output) if args.output else Path(f"{task.name}_base.py")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(source, encoding="utf-8")
    logger.info("Wrote %s", output_path)
    print(f"Wrote {output_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return _run_generate(args)
    except (
        GenerationError,
        LookupError,
        TypeError,
        ValueError,
        SyntaxError,
        OSError,
        ImportError,
    ) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
