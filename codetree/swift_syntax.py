"""Helpers for reading Swift declarations: names, visibility, parameters, types and doc comments."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from codetree.models import ParameterInfo

_OPENERS = "<(["
_CLOSERS = ">)]"


def _strip_prefix_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _strip_suffix_repeated(text: str, suffix: str) -> str:
    while text.endswith(suffix):
        text = text[: -len(suffix)]
    return text


def _leading_identifier(text: str) -> str:
    name = []
    for ch in text:
        if not (ch.isalnum() or ch == "_"):
            break
        name.append(ch)
    return "".join(name)


def extract_visibility(line: str) -> str:
    """The access level named on ``line``, ``internal`` when none is given."""
    if "fileprivate " in line:
        return "fileprivate"
    if "private " in line:
        return "private"
    if "public " in line:
        return "public"
    if "open " in line:
        return "open"
    return "internal"


def extract_name_after_keyword(line: str, keyword: str) -> Optional[str]:
    """The identifier directly following the first occurrence of ``keyword``."""
    pos = line.find(keyword)
    if pos < 0:
        return None
    name = _leading_identifier(line[pos + len(keyword):])
    return name or None


def extract_func_name(line: str) -> Optional[str]:
    """The name of the function declared with ``func`` on ``line``."""
    return extract_name_after_keyword(line, "func ")


def extract_return_type(line: str) -> Optional[str]:
    """The text after ``->`` up to an opening brace, if any."""
    arrow = line.find("->")
    if arrow < 0:
        return None
    after = line[arrow + 2:].strip()
    collected = []
    for ch in after:
        if ch in "{\n":
            break
        collected.append(ch)
    result = "".join(collected).strip()
    return result or None


def _split_top_level(params_str: str) -> list[str]:
    params: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in params_str:
        if ch in _OPENERS:
            depth += 1
            current.append(ch)
        elif ch in _CLOSERS:
            depth -= 1
            current.append(ch)
        elif ch == "," and depth == 0:
            params.append("".join(current).strip())
            current.clear()
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail:
        params.append(tail)
    return params


def parse_parameters(params_str: str) -> list[ParameterInfo]:
    """Parse the text between an initializer's or function's parentheses."""
    if not params_str.strip():
        return []

    parameters: list[ParameterInfo] = []
    for param in _split_top_level(params_str):
        colon = param.rfind(":")
        if colon < 0:
            continue
        name_part = param[:colon].strip()
        type_part = param[colon + 1:].strip()
        words = name_part.split()
        name = words[-1] if words else name_part
        is_optional = type_part.endswith("?") or "Optional<" in type_part
        parameters.append(
            ParameterInfo(name=name, param_type=type_part, is_optional=is_optional)
        )
    return parameters


def extract_params_string(line: str) -> str:
    """The text inside the first balanced pair of parentheses on ``line``."""
    start = line.find("(")
    if start < 0:
        return ""
    depth = 0
    end = len(line)
    for offset, ch in enumerate(line[start:]):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                end = start + offset
                break
    if start + 1 < end:
        return line[start + 1:end]
    return ""


def infer_type_from_value(line: str) -> str:
    """A best guess at a property's type from the value it is assigned."""
    eq = line.find("=")
    if eq < 0:
        return "inferred"
    value = line[eq + 1:].strip()

    if value.startswith('"'):
        return "String"
    if value in ("true", "false"):
        return "Bool"
    if value == "nil":
        return "Optional"
    if value.startswith("[") and "]" in value:
        return "Dictionary" if ":" in value else "Array"
    if value and (value[0].isascii() and value[0].isdigit() or value[0] == "-"):
        return "Double" if "." in value else "Int"

    paren = value.find("(")
    if paren >= 0:
        collected = []
        for ch in value[:paren].strip():
            if not (ch.isalnum() or ch in "_<>."):
                break
            collected.append(ch)
        type_name = "".join(collected)
        if type_name and type_name[0].isupper():
            return type_name

    return "inferred"


def extract_doc_comment(lines: Sequence[str], current_line: int) -> Optional[str]:
    """Text of the ``///`` or ``/** */`` comment above ``current_line``, skipping attributes."""
    doc_lines: list[str] = []
    in_block = False

    for raw in reversed(lines[:current_line]):
        line = raw.strip()

        if line.startswith("///"):
            doc_lines.insert(0, _strip_prefix_repeated(line, "///").strip())
            continue

        if line.endswith("*/") and not in_block:
            in_block = True
            if line.startswith("/**"):
                content = _strip_suffix_repeated(
                    _strip_prefix_repeated(line, "/**"), "*/"
                ).strip()
                if content:
                    doc_lines.insert(0, content)
                break
            continue

        if in_block:
            if line.startswith("/**"):
                content = _strip_prefix_repeated(line, "/**").strip()
                if content:
                    doc_lines.insert(0, content)
                break
            if line.startswith("*"):
                content = line.lstrip("*").strip()
                if content and not content.startswith(("-", "@")):
                    doc_lines.insert(0, content)
            continue

        if line and not line.startswith("@"):
            break

    return " ".join(doc_lines) if doc_lines else None