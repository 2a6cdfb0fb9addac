"""Helpers for reading PHP syntax: use statements, parameters, docblocks and namespaces."""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

from codetree.models import ParameterInfo

DEFAULT_INTERNAL_NAMESPACES = frozenset({"app", "src", "lib", "core", "domain", "infra"})

_VISIBILITY_WORDS = frozenset({"public", "protected", "private", "readonly"})
_AUTOLOAD_SECTIONS = ("autoload", "autoload-dev")
_PSR_KEYS = ("psr-4", "psr-0")


def _ascii_lower(text: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in text)


def _strip_prefix_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _strip_suffix_repeated(text: str, suffix: str) -> str:
    while text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


def strip_use_alias(entry: str) -> str:
    """Drop an ``as alias`` suffix and any leading backslashes from a use entry."""
    return entry.split(" as ", 1)[0].strip().lstrip("\\")


def expand_use_part(part: str) -> list[str]:
    """Expand one comma-separated part of a use statement, including ``Foo\\{Bar, Baz}``."""
    part = part.strip()
    if not part:
        return []

    open_brace = part.find("{")
    close_brace = part.rfind("}")
    if open_brace >= 0 and close_brace >= 0:
        prefix = part[:open_brace].strip().rstrip("\\").strip()
        inner = part[open_brace + 1:close_brace]
        entries: list[str] = []
        for raw in inner.split(","):
            entry = raw.strip()
            if not entry:
                continue
            if prefix:
                combined = prefix.rstrip("\\") + "\\" + strip_use_alias(entry)
            else:
                combined = strip_use_alias(entry)
            cleaned = strip_use_alias(combined)
            if cleaned:
                entries.append(cleaned)
        return entries

    cleaned = strip_use_alias(part)
    return [cleaned] if cleaned else []


def iter_use_entries(segment: str) -> list[str]:
    """Every import path named by the body of a use statement, in order, without repeats."""
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0

    for ch in segment:
        if ch == "{":
            depth += 1
            buffer.append(ch)
        elif ch == "}":
            depth = max(depth - 1, 0)
            buffer.append(ch)
        elif ch == "," and depth == 0:
            parts.append("".join(buffer).strip())
            buffer.clear()
        else:
            buffer.append(ch)

    tail = "".join(buffer).strip()
    if tail:
        parts.append(tail)

    results: dict[str, None] = {}
    for part in parts:
        for entry in expand_use_part(part):
            results.setdefault(entry, None)
    return list(results)


def strip_quotes(entry: str) -> str:
    """Remove one pair of matching single or double quotes around ``entry``."""
    trimmed = entry.strip()
    if len(trimmed) >= 2 and trimmed[0] == trimmed[-1] and trimmed[0] in ("'", '"'):
        return trimmed[1:-1]
    return trimmed


def strip_attributes_prefix(param: str) -> str:
    """Remove leading ``#[...]`` attribute blocks from a parameter definition."""
    trimmed = param.strip()
    while trimmed.startswith("#["):
        end = trimmed.find("]")
        if end < 0:
            break
        trimmed = trimmed[end + 1:].strip()
    return trimmed


def _parse_single_parameter(param: str) -> Optional[ParameterInfo]:
    param = param.strip()
    if not param:
        return None
    cleaned = strip_attributes_prefix(param)
    if not cleaned:
        return None

    is_optional = "=" in cleaned
    name_start = cleaned.find("$")

    if name_start >= 0:
        type_segment = cleaned[:name_start].strip().rstrip("&").strip()
        param_type = "mixed"
        if type_segment:
            tokens = [
                token
                for token in type_segment.split()
                if _ascii_lower(token) not in _VISIBILITY_WORDS
            ]
            joined = " ".join(tokens)
            if joined.strip():
                param_type = joined
        words = cleaned[name_start:].split("=", 1)[0].lstrip("$").split()
        name = words[0] if words else ""
    else:
        param_type = "mixed"
        name = cleaned.split("=", 1)[0].lstrip("$")

    if not name:
        return None
    return ParameterInfo(name=name, param_type=param_type, is_optional=is_optional)


def parse_php_parameters(params_str: str) -> list[ParameterInfo]:
    """Parse the text between a PHP function's parentheses into parameters."""
    parameters: list[ParameterInfo] = []
    if not params_str.strip():
        return parameters

    current: list[str] = []
    paren_depth = 0
    bracket_depth = 0

    def flush() -> None:
        parsed = _parse_single_parameter("".join(current))
        if parsed is not None:
            parameters.append(parsed)

    for ch in params_str:
        if ch == "(":
            paren_depth += 1
        elif ch == ")":
            paren_depth -= 1
        elif ch == "[":
            bracket_depth += 1
        elif ch == "]":
            bracket_depth -= 1
        elif ch == "," and paren_depth == 0 and bracket_depth == 0:
            flush()
            current.clear()
            continue
        current.append(ch)

    if current:
        flush()
    return parameters


def normalize_namespace(namespace: str) -> str:
    """The first segment of a namespace, lower-cased, for prefix comparison."""
    return _ascii_lower(namespace.rstrip("\\").split("\\", 1)[0].strip())


def load_namespaces_from_composer(project_root: Union[str, os.PathLike]) -> set[str]:
    """Normalized PSR-4 and PSR-0 namespaces declared in ``composer.json``, if any."""
    namespaces: set[str] = set()
    composer_path = Path(project_root) / "composer.json"
    try:
        value = json.loads(composer_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return namespaces
    if not isinstance(value, dict):
        return namespaces

    for section in _AUTOLOAD_SECTIONS:
        loader = value.get(section)
        if not isinstance(loader, dict):
            continue
        for psr in _PSR_KEYS:
            mapping = loader.get(psr)
            if not isinstance(mapping, dict):
                continue
            for namespace in mapping:
                normalized = normalize_namespace(namespace)
                if normalized:
                    namespaces.add(normalized)
    return namespaces


def detect_internal_namespaces(
    project_root: Optional[Union[str, os.PathLike]] = None,
) -> set[str]:
    """Default internal namespace prefixes plus those declared by the project's composer file."""
    namespaces = set(DEFAULT_INTERNAL_NAMESPACES)
    if project_root is None:
        try:
            project_root = Path.cwd()
        except OSError:
            return namespaces
    namespaces.update(ns for ns in load_namespaces_from_composer(project_root) if ns)
    return namespaces


def _keep_doc_text(content: str) -> bool:
    return bool(content) and not content.startswith("@")


def extract_docblock(lines: Sequence[str], current_line: int) -> Optional[str]:
    """Descriptive text of the docblock just above ``current_line``, tags left out."""
    doc_lines: list[str] = []
    in_docblock = False

    for raw in reversed(lines[:current_line]):
        line = raw.strip()
        if line.endswith("*/"):
            in_docblock = True
            if line.startswith("/**"):
                content = _strip_suffix_repeated(_strip_prefix_repeated(line, "/**"), "*/").strip()
                if _keep_doc_text(content):
                    doc_lines.insert(0, content)
                break
            content = _strip_suffix_repeated(line, "*/").strip()
            if _keep_doc_text(content) and content != "*":
                doc_lines.insert(0, content.lstrip("*").strip())
        elif in_docblock:
            if line.startswith("/**"):
                content = _strip_prefix_repeated(line, "/**").strip()
                if _keep_doc_text(content):
                    doc_lines.insert(0, content)
                break
            if line.startswith("*"):
                content = line.lstrip("*").strip()
                if _keep_doc_text(content):
                    doc_lines.insert(0, content)
        elif line:
            break

    return " ".join(doc_lines) if doc_lines else None


def collect_attributes(lines: Sequence[str], current_line: int) -> list[str]:
    """Attribute lines (``#[...]``) directly above ``current_line``, top to bottom."""
    attributes: list[str] = []
    for raw in reversed(lines[:current_line]):
        trimmed = raw.strip()
        if trimmed.startswith("#["):
            attributes.insert(0, trimmed)
            continue
        if not trimmed or trimmed.startswith("/**") or trimmed.startswith("*"):
            continue
        break
    return attributes


def describe_element(lines: Sequence[str], current_line: int) -> Optional[str]:
    """Docblock text and attributes of the declaration at ``current_line``, if any."""
    parts: list[str] = []
    doc = extract_docblock(lines, current_line)
    if doc is not None:
        parts.append(doc)
    attributes = collect_attributes(lines, current_line)
    if attributes:
        parts.append("Attributes: " + " ".join(attributes))
    return " | ".join(parts) if parts else None