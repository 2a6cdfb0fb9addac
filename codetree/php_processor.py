"""Line-based extraction of namespaces, imports and declarations from PHP sources."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from typing import Optional

from codetree.models import Dependency, InterfaceInfo, LanguageProcessor, PathArg
from codetree.php_syntax import (
    describe_element,
    detect_internal_namespaces,
    iter_use_entries,
    normalize_namespace,
    parse_php_parameters,
    strip_quotes,
)

_NAMESPACE_RE = re.compile(r"^\s*namespace\s+([^;]+);")
_USE_RE = re.compile(r"^\s*use\s+(?:function\s+|const\s+)?([^;]+);")
_KEYWORD_RE = re.compile(r"^\s*(require_once|require|include_once|include)\b")
_COMPOSER_RE = re.compile(r"(?i)(?://|#)\s*composer:\s*(.*)")
_CLASS_RE = re.compile(r"^\s*((?:abstract\s+|final\s+|readonly\s+)?)(class)\s+(\w+)")
_TRAIT_RE = re.compile(r"^\s*trait\s+(\w+)")
_INTERFACE_RE = re.compile(r"^\s*interface\s+(\w+)")
_FUNCTION_RE = re.compile(r"^\s*function\s+(\w+)\s*\(([^)]*)\)\s*(?::\s*([^{;]+))?")
_METHOD_RE = re.compile(
    r"^\s*(?:(public|protected|private)\s+)?(?:(static)\s+)?(?:(abstract|final)\s+)?"
    r"function\s+(&)?\s*(\w+)\s*\(([^)]*)\)\s*(?::\s*([^{;]+))?"
)
_ENUM_RE = re.compile(r"^\s*enum\s+(\w+)(?:\s*:\s*\w+)?\s*\{?")

_MARKERS = ("TODO", "FIXME", "NOTE", "HACK")
_STRUCTURE_RES = (
    _CLASS_RE,
    _TRAIT_RE,
    _INTERFACE_RE,
    _ENUM_RE,
    _FUNCTION_RE,
    _METHOD_RE,
    _NAMESPACE_RE,
    _USE_RE,
    _KEYWORD_RE,
)
_COMPONENT_KINDS = (
    (_INTERFACE_RE, "php_interface"),
    (_TRAIT_RE, "php_trait"),
    (_ENUM_RE, "php_enum"),
    (_CLASS_RE, "php_class"),
)


def _lines(content: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return from each line."""
    if not content:
        return []
    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _strip_open_tag(trimmed: str) -> str:
    for tag in ("<?php", "<?"):
        if trimmed.startswith(tag):
            return trimmed[len(tag):].lstrip()
    return trimmed


def _optional_strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


class PhpProcessor(LanguageProcessor):
    """Processor for PHP source files."""

    def __init__(self, internal_namespaces: Optional[Iterable[str]] = None) -> None:
        if internal_namespaces is None:
            internal_namespaces = detect_internal_namespaces()
        self.internal_namespaces = set(internal_namespaces)

    def supported_extensions(self) -> list[str]:
        return ["php"]

    def language_name(self) -> str:
        return "PHP"

    def is_internal_namespace(self, namespace: str) -> bool:
        """Whether the first segment of ``namespace`` belongs to the project itself."""
        first = normalize_namespace(namespace)
        return bool(first) and first in self.internal_namespaces

    def extract_dependencies(self, content: str, file_path: PathArg) -> list[Dependency]:
        source_file = os.fspath(file_path)
        dependencies: list[Dependency] = []
        numbered = iter(enumerate(_lines(content), start=1))

        for number, line in numbered:
            trimmed = line.strip()
            if trimmed.startswith("use "):
                statement = trimmed
                while not statement.rstrip().endswith(";"):
                    following = next(numbered, None)
                    if following is None:
                        break
                    statement += " " + following[1].strip()
                dependencies.extend(self._use_dependencies(statement, number, source_file))
                continue

            for extractor in (
                self._namespace_dependency,
                self._keyword_dependency,
                self._composer_dependency,
            ):
                found = extractor(line, number, source_file)
                if found is not None:
                    dependencies.append(found)

        return dependencies

    def _use_dependencies(
        self, statement: str, number: int, source_file: str
    ) -> list[Dependency]:
        match = _USE_RE.search(statement)
        if match is None:
            return []
        return [
            Dependency(
                name=import_path,
                path=source_file,
                is_external=not self.is_internal_namespace(import_path),
                line_number=number,
                dependency_type="use",
            )
            for import_path in iter_use_entries(match.group(1))
        ]

    @staticmethod
    def _namespace_dependency(
        line: str, number: int, source_file: str
    ) -> Optional[Dependency]:
        match = _NAMESPACE_RE.search(line)
        if match is None:
            return None
        return Dependency(
            name=match.group(1).strip(),
            path=source_file,
            is_external=False,
            line_number=number,
            dependency_type="namespace",
        )

    @staticmethod
    def _keyword_dependency(
        line: str, number: int, source_file: str
    ) -> Optional[Dependency]:
        match = _KEYWORD_RE.search(line)
        if match is None:
            return None
        path_expr = line[match.end():].strip()
        if path_expr.startswith("("):
            path_expr = path_expr[1:].lstrip()
        path_expr = path_expr.rstrip(";").rstrip()
        if path_expr.endswith(")"):
            path_expr = path_expr[:-1].rstrip()

        name = strip_quotes(path_expr)
        if not name:
            return None
        return Dependency(
            name=name,
            path=source_file,
            is_external=False,
            line_number=number,
            dependency_type=match.group(1),
        )

    @staticmethod
    def _composer_dependency(
        line: str, number: int, source_file: str
    ) -> Optional[Dependency]:
        match = _COMPOSER_RE.search(line)
        if match is None:
            return None
        info = match.group(1).strip()
        if not info:
            return None
        return Dependency(
            name=info,
            path=source_file,
            is_external=True,
            line_number=number,
            dependency_type="composer",
        )

    def determine_component_type(self, file_path: PathArg, content: str) -> str:
        for regex, kind in _COMPONENT_KINDS:
            if regex.search(content):
                return kind
        return "php_file"

    def is_important_line(self, line: str) -> bool:
        trimmed = line.strip()
        processed = _strip_open_tag(trimmed)

        if any(regex.search(processed) for regex in _STRUCTURE_RES):
            return True
        if processed.startswith(("/**", "*", "#[")):
            return True
        return any(marker in trimmed for marker in _MARKERS)

    def extract_interfaces(self, content: str, file_path: PathArg) -> list[InterfaceInfo]:
        lines = _lines(content)
        interfaces: list[InterfaceInfo] = []
        in_class_body = False
        brace_level = 0

        for index, line in enumerate(lines):
            if _CLASS_RE.search(line) or _TRAIT_RE.search(line) or _INTERFACE_RE.search(line):
                in_class_body = True

            if in_class_body:
                brace_level += line.count("{") - line.count("}")
                if brace_level == 0:
                    in_class_body = False

            interfaces.extend(self._type_declarations(line, lines, index))
            callable_info = (
                self._method(line, lines, index)
                if in_class_body
                else self._function(line, lines, index)
            )
            if callable_info is not None:
                interfaces.append(callable_info)

        return interfaces

    @staticmethod
    def _type_declarations(line: str, lines: list[str], index: int) -> list[InterfaceInfo]:
        found: list[InterfaceInfo] = []

        class_match = _CLASS_RE.search(line)
        if class_match is not None:
            prefix = class_match.group(1).strip()
            found.append(
                InterfaceInfo(
                    name=class_match.group(3),
                    interface_type=f"{prefix} class" if prefix else "class",
                    visibility="public",
                    description=describe_element(lines, index),
                )
            )

        for regex, kind in ((_TRAIT_RE, "trait"), (_INTERFACE_RE, "interface")):
            match = regex.search(line)
            if match is not None:
                found.append(
                    InterfaceInfo(
                        name=match.group(1),
                        interface_type=kind,
                        visibility="public",
                        description=describe_element(lines, index),
                    )
                )

        if "case " not in line:
            enum_match = _ENUM_RE.search(line)
            if enum_match is not None:
                found.append(
                    InterfaceInfo(
                        name=enum_match.group(1),
                        interface_type="enum",
                        visibility="public",
                        description=describe_element(lines, index),
                    )
                )

        return found

    @staticmethod
    def _function(line: str, lines: list[str], index: int) -> Optional[InterfaceInfo]:
        match = _FUNCTION_RE.search(line)
        if match is None:
            return None
        return InterfaceInfo(
            name=match.group(1),
            interface_type="function",
            visibility="public",
            parameters=parse_php_parameters(match.group(2)),
            return_type=_optional_strip(match.group(3)),
            description=describe_element(lines, index),
        )

    @staticmethod
    def _method(line: str, lines: list[str], index: int) -> Optional[InterfaceInfo]:
        match = _METHOD_RE.search(line)
        if match is None:
            return None
        return InterfaceInfo(
            name=match.group(5),
            interface_type="method",
            visibility=match.group(1) or "public",
            parameters=parse_php_parameters(match.group(6)),
            return_type=_optional_strip(match.group(7)),
            description=describe_element(lines, index),
        )