"""Line-based extraction of imports and declarations from Python sources."""

from __future__ import annotations

import os
import re
from pathlib import PurePath
from typing import Optional

from codetree.models import (
    Dependency,
    InterfaceInfo,
    LanguageProcessor,
    ParameterInfo,
    PathArg,
)

_IMPORT_RE = re.compile(r"^\s*import\s+([^\s#]+)")
_FROM_IMPORT_RE = re.compile(r"^\s*from\s+([^\s]+)\s+import")
_FUNCTION_RE = re.compile(r"^\s*def\s+(\w+)\s*\(([^)]*)\)\s*(?:->\s*([^:]+))?:")
_CLASS_RE = re.compile(r"^\s*class\s+(\w+)(?:\([^)]*\))?:")
_METHOD_RE = re.compile(r"^\s+def\s+(\w+)\s*\(([^)]*)\)\s*(?:->\s*([^:]+))?:")
_ASYNC_FUNCTION_RE = re.compile(
    r"^\s*async\s+def\s+(\w+)\s*\(([^)]*)\)\s*(?:->\s*([^:]+))?:"
)

_MARKERS = ("TODO", "FIXME", "NOTE", "HACK")
_IMPORTANT_PREFIXES = ("class ", "def ", "async def ", "import ", "from ")
_QUOTES = ('"""', "'''")


def _lines(content: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return from each line."""
    if not content:
        return []
    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _strip_prefix_repeated(text: str, prefix: str) -> str:
    while prefix and text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _strip_suffix_repeated(text: str, suffix: str) -> str:
    while suffix and text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


def _is_external(module: str) -> bool:
    return not module.startswith(".") and not module.startswith("__")


def _parse_parameters(params_str: str) -> list[ParameterInfo]:
    parameters: list[ParameterInfo] = []
    if not params_str.strip():
        return parameters

    for raw in params_str.split(","):
        param = raw.strip()
        if not param or param in ("self", "cls"):
            continue

        is_optional = "=" in param
        param_type = "Any"
        name = param

        if ":" in param:
            name_part, _, type_part = param.partition(":")
            name = name_part.strip()
            type_part = type_part.strip()
            param_type = type_part.split("=", 1)[0].strip() if "=" in type_part else type_part
        elif "=" in param:
            name = param.split("=", 1)[0].strip()

        if name.startswith("**"):
            name = _strip_prefix_repeated(name, "**")
            param_type = "dict"
        elif name.startswith("*"):
            name = name.lstrip("*")
            param_type = "tuple"

        parameters.append(ParameterInfo(name, param_type, is_optional))

    return parameters


def _extract_docstring(lines: list[str], current_line: int) -> Optional[str]:
    if current_line + 1 >= len(lines):
        return None
    next_line = lines[current_line + 1].strip()

    for quote in _QUOTES:
        if next_line.startswith(quote) and next_line.endswith(quote) and len(next_line) > 6:
            inner = _strip_suffix_repeated(_strip_prefix_repeated(next_line, quote), quote)
            return inner.strip()

    quote = next((q for q in _QUOTES if next_line.startswith(q)), None)
    if quote is None:
        return None

    doc_lines: list[str] = []
    first = _strip_prefix_repeated(next_line, quote).strip()
    if first and not first.endswith(quote):
        doc_lines.append(first)

    for raw in lines[current_line + 2:]:
        line = raw.strip()
        if line.endswith(quote):
            tail = _strip_suffix_repeated(line, quote).strip()
            if tail:
                doc_lines.append(tail)
            break
        if line:
            doc_lines.append(line)

    return " ".join(doc_lines) if doc_lines else None


def _method_visibility(name: str) -> str:
    if name.startswith("_"):
        if name.startswith("__") and name.endswith("__"):
            return "special"
        return "private"
    return "public"


class PythonProcessor(LanguageProcessor):
    """Processor for Python source files."""

    def supported_extensions(self) -> list[str]:
        return ["py"]

    def extract_dependencies(self, content: str, file_path: PathArg) -> list[Dependency]:
        source_file = os.fspath(file_path)
        dependencies: list[Dependency] = []

        for number, line in enumerate(_lines(content), start=1):
            match = _FROM_IMPORT_RE.match(line)
            kind = "from_import"
            if match is None:
                match = _IMPORT_RE.match(line)
                kind = "import"
            if match is None:
                continue
            module = match.group(1)
            dependencies.append(
                Dependency(
                    name=source_file,
                    path=module,
                    is_external=_is_external(module),
                    line_number=number,
                    dependency_type=kind,
                )
            )

        return dependencies

    def determine_component_type(self, file_path: PathArg, content: str) -> str:
        file_name = PurePath(os.fspath(file_path)).name

        if file_name == "__init__.py":
            return "python_package"
        if file_name in ("main.py", "app.py"):
            return "python_main"
        if file_name.startswith("test_") or file_name.endswith("_test.py"):
            return "python_test"

        if "class " in content and "def __init__" in content:
            return "python_class"
        if "def " in content:
            return "python_module"
        return "python_script"

    def is_important_line(self, line: str) -> bool:
        trimmed = line.strip()
        if trimmed.startswith(_IMPORTANT_PREFIXES):
            return True
        return any(marker in trimmed for marker in _MARKERS)

    def language_name(self) -> str:
        return "Python"

    def extract_interfaces(self, content: str, file_path: PathArg) -> list[InterfaceInfo]:
        lines = _lines(content)
        interfaces: list[InterfaceInfo] = []

        for index, line in enumerate(lines):
            match = _ASYNC_FUNCTION_RE.match(line)
            kind = "async_function"
            if match is None:
                match = _FUNCTION_RE.match(line)
                kind = "function"
            if match is not None:
                interfaces.append(self._callable(match, kind, "public", lines, index))

            class_match = _CLASS_RE.match(line)
            if class_match is not None:
                interfaces.append(
                    InterfaceInfo(
                        name=class_match.group(1),
                        interface_type="class",
                        visibility="public",
                        description=_extract_docstring(lines, index),
                    )
                )

            method_match = _METHOD_RE.match(line)
            if method_match is not None:
                visibility = _method_visibility(method_match.group(1))
                interfaces.append(
                    self._callable(method_match, "method", visibility, lines, index)
                )

        return interfaces

    @staticmethod
    def _callable(
        match: re.Match[str], kind: str, visibility: str, lines: list[str], index: int
    ) -> InterfaceInfo:
        return_type = match.group(3)
        return InterfaceInfo(
            name=match.group(1),
            interface_type=kind,
            visibility=visibility,
            parameters=_parse_parameters(match.group(2)),
            return_type=return_type.strip() if return_type is not None else None,
            description=_extract_docstring(lines, index),
        )