"""Text helpers shared by the emitters."""

from __future__ import annotations

import re
import textwrap

_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


def _fragment_lines(fragment: str) -> list[str]:
    """Split a code fragment into dedented lines, dropping blank edges."""
    text = textwrap.dedent(fragment.expandtabs(4)).strip("\n")
    if not text.strip():
        return []
    return [line.rstrip() for line in text.split("\n")]


def _indent_body(lines: list[str], spaces: int) -> list[str]:
    prefix = " " * spaces
    return [f"{prefix}{line}" if line else line for line in lines]


def _indent_fragment(fragment: str, spaces: int) -> list[str]:
    return _indent_body(_fragment_lines(fragment), spaces)


def _mangle_symbol(logical_name: str, suffix: str, used: set[str]) -> str:
    sanitized = _IDENT_RE.sub("_", logical_name)
    if not sanitized:
        sanitized = "_"
    if sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    candidate = f"{sanitized}{suffix}"
    if candidate not in used:
        used.add(candidate)
        return candidate
    n = 2
    while True:
        next_candidate = f"{candidate}_{n}"
        if next_candidate not in used:
            used.add(next_candidate)
            return next_candidate
        n += 1


def _class_name(task_name: str) -> str:
    parts = [part for part in _IDENT_RE.sub("_", task_name).split("_") if part]
    base = "".join(part[:1].upper() + part[1:] for part in parts) or "Task"
    if base[0].isdigit():
        base = f"_{base}"
    return f"{base}Base"
