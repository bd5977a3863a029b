"""Render a finished :class:`TaskDescription` as a Python module."""

from __future__ import annotations

import re

from aligngen.core.port import PortDirection
from aligngen.core.task import HOOKS, TaskDescription
from aligngen.utils.text import _class_name, _indent_body, _indent_fragment

_FROM_IMPORT_RE = re.compile(r"^from\s+(\S+)\s+import\s+([\w\s,]+)$")


def _render_imports(task: TaskDescription) -> list[str]:
    plain: list[str] = []
    from_names: dict[str, list[str]] = {}
    verbatim: list[str] = []

    port_classes = sorted(
        {"InputPort" if port.is_input else "OutputPort" for port in task.ports}
    )
    candidates = list(task.imports)
    if port_classes:
        candidates.insert(0, f"from {task.options.runtime_module} import {', '.join(port_classes)}")

    for line in candidates:
        if line.startswith("import "):
            if line not in plain:
                plain.append(line)
            continue
        match = _FROM_IMPORT_RE.match(line)
        if match is None:
            # Aliased or parenthesised imports are kept as written.
            if line not in verbatim:
                verbatim.append(line)
            continue
        module, names = match.groups()
        bucket = from_names.setdefault(module, [])
        for name in names.split(","):
            name = name.strip()
            if name and name not in bucket:
                bucket.append(name)

    lines: list[str] = sorted(plain)
    if lines and (from_names or verbatim):
        lines.append("")
    for module, names in from_names.items():
        lines.append(f"from {module} import {', '.join(sorted(names))}")
    lines.extend(verbatim)
    return lines


def _render_init(task: TaskDescription) -> list[str]:
    body: list[str] = []
    if task.properties:
        body.append("# Properties")
        for prop in task.properties:
            line = f"self.{prop.name} = {prop.default!r}"
            if prop.doc:
                line += f"  # {prop.doc}"
            body.append(line)
    if task.ports:
        body.append("# Ports")
        for port in task.ports:
            cls = "InputPort" if port.direction is PortDirection.INPUT else "OutputPort"
            body.append(f"self._{port.name} = {cls}({port.name!r}, {port.type_name!r})")
    if task.members:
        body.append("# Members")
        for member in task.members:
            body.append(f"self.{member.name} = {member.initial}")
    if not body:
        body.append("pass")

    return ["    def __init__(self):", *_indent_body(body, 8)]


def _render_user_methods(task: TaskDescription) -> list[str]:
    lines: list[str] = []
    for method in task.user_methods:
        params = ", ".join(("self", *method.params))
        lines.append("")
        lines.append(f"    def {method.name}({params}):")
        if method.doc:
            lines.append(f'        """{method.doc}"""')
        body = _indent_fragment(method.body, 8)
        lines.extend(body or ["        pass"])
    return lines


def _render_hooks(task: TaskDescription) -> list[str]:
    lines: list[str] = []
    for hook in HOOKS:
        body: list[str] = []
        for fragment in task.hook_code(hook):
            body.extend(_indent_fragment(fragment, 8))
        lines.append("")
        lines.append(f"    def {hook}_hook(self):")
        lines.extend(body or ["        pass"])
    return lines


def _render_code(task: TaskDescription) -> str:
    class_name = _class_name(task.name)
    lines: list[str] = [
        f'"""Generated task base for {task.name!r}. Do not edit; subclass {class_name}."""',
        "",
    ]

    import_lines = _render_imports(task)
    if import_lines:
        lines.extend(import_lines)
        lines.append("")

    lines.extend(
        [
            "",
            f"class {class_name}:",
            f'    """Lifecycle hooks for task {task.name!r}."""',
            "",
        ]
    )
    lines.extend(_render_init(task))
    lines.extend(_render_user_methods(task))
    lines.extend(_render_hooks(task))

    return "\n".join(lines) + "\n"


def render_task(task: TaskDescription) -> str:
    return _render_code(task)
