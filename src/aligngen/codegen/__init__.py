"""Python module generation for task descriptions."""

from __future__ import annotations

from aligngen.codegen.generate import generate_task
from aligngen.codegen.render import render_task

__all__ = ["generate_task", "render_task"]
