"""Line-based extraction of use/mod statements and declarations from Rust sources."""

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

_USE_RE = re.compile(r"^\s*use\s+([^;]+);")
_MOD_RE = re.compile(r"^\s*mod\s+([^;]+);")
_FN_RE = re.compile(
    r"^\s*(pub\s+)?(async\s+)?fn\s+(\w+)\s*\(([^)]*)\)\s*(?:->\s*([^{]+))?"
)
_STRUCT_RE = re.compile(r"^\s*(pub\s+)?struct\s+(\w+)")
_TRAIT_RE = re.compile(r"^\s*(pub\s+)?trait\s+(\w+)")
_IMPL_RE = re.compile(r"^\s*impl(?:\s*<[^>]*>)?\s+(?:(\w+)\s+for\s+)?(\w+)")
_ENUM_RE = re.compile(r"^\s*(pub\s+)?enum\s+(\w+)")

_INTERNAL_PREFIXES = ("crate::", "super::", "self::")
_SELF_PARAMS = ("&self", "self", "&mut self")
_MARKERS = ("TODO", "FIXME", "NOTE", "HACK")
_IMPORTANT_PREFIXES = (
    "fn ",
    "pub fn ",
    "async fn ",
    "pub async fn ",
    "struct ",
    "pub struct ",
    "enum ",
    "pub enum ",
    "trait ",
    "pub trait ",
    "impl ",
    "macro_rules!",
    "use ",
    "mod ",
)
_SPECIAL_FILES = {
    "main.rs": "rust_main",
    "lib.rs": "rust_library",
    "mod.rs": "rust_module",
}
_CONTENT_KINDS = (
    ("struct", "rust_struct"),
    ("enum", "rust_enum"),
    ("trait", "rust_trait"),
    ("impl", "rust_implementation"),
    ("mod", "rust_module"),
)
_DOC_PREFIXES = ("///", "//!")


def _lines(content: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return from each line."""
    if not content:
        return []
    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _strip_prefix_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def _visibility(match: re.Match[str]) -> str:
    return "public" if match.group(1) is not None else "private"


def _simple_dependency_name(path: str) -> str:
    return path.split("::")[-1]


def _dependency_name(use_path: str) -> str:
    if "{" in use_path and "}" in use_path:
        start = use_path.find("{")
        end = use_path.find("}")
        inner = use_path[start + 1:end]
        return inner.split(",")[0].strip()

    head, sep, _ = use_path.partition(" as ")
    if sep:
        return _simple_dependency_name(head.strip())
    return _simple_dependency_name(use_path)


def _parse_parameters(params_str: str) -> list[ParameterInfo]:
    parameters: list[ParameterInfo] = []
    if not params_str.strip():
        return parameters

    for raw in params_str.split(","):
        param = raw.strip()
        if not param or param in _SELF_PARAMS:
            continue
        name, sep, type_part = param.partition(":")
        if not sep:
            continue
        param_type = type_part.strip()
        is_optional = param_type.startswith("Option<") or "?" in param_type
        parameters.append(ParameterInfo(name.strip(), param_type, is_optional))

    return parameters


def _extract_doc_comment(lines: list[str], current_line: int) -> Optional[str]:
    doc_lines: list[str] = []
    for raw in reversed(lines[:current_line]):
        line = raw.strip()
        prefix = next((p for p in _DOC_PREFIXES if line.startswith(p)), None)
        if prefix is not None:
            doc_lines.insert(0, _strip_prefix_repeated(line, prefix).strip())
        elif line:
            break
    return " ".join(doc_lines) if doc_lines else None


class RustProcessor(LanguageProcessor):
    """Processor for Rust source files."""

    def supported_extensions(self) -> list[str]:
        return ["rs"]

    def extract_dependencies(self, content: str, file_path: PathArg) -> list[Dependency]:
        source_file = os.fspath(file_path)
        dependencies: list[Dependency] = []

        for number, line in enumerate(_lines(content), start=1):
            use_match = _USE_RE.match(line)
            if use_match is not None:
                use_str = use_match.group(1).strip()
                dependencies.append(
                    Dependency(
                        name=_dependency_name(use_str),
                        path=source_file,
                        is_external=not use_str.startswith(_INTERNAL_PREFIXES),
                        line_number=number,
                        dependency_type="use",
                    )
                )

            mod_match = _MOD_RE.match(line)
            if mod_match is not None:
                dependencies.append(
                    Dependency(
                        name=mod_match.group(1).strip(),
                        path=source_file,
                        is_external=False,
                        line_number=number,
                        dependency_type="mod",
                    )
                )

        return dependencies

    def determine_component_type(self, file_path: PathArg, content: str) -> str:
        file_name = PurePath(os.fspath(file_path)).name
        special = _SPECIAL_FILES.get(file_name)
        if special is not None:
            return special

        if "fn main(" in content:
            return "rust_main"
        for keyword, kind in _CONTENT_KINDS:
            if keyword in content:
                return kind
        return "rust_file"

    def is_important_line(self, line: str) -> bool:
        trimmed = line.strip()
        if trimmed.startswith(_IMPORTANT_PREFIXES):
            return True
        return any(marker in trimmed for marker in _MARKERS)

    def language_name(self) -> str:
        return "Rust"

    def extract_interfaces(self, content: str, file_path: PathArg) -> list[InterfaceInfo]:
        lines = _lines(content)
        interfaces: list[InterfaceInfo] = []

        for index, line in enumerate(lines):
            fn_match = _FN_RE.match(line)
            if fn_match is not None:
                return_type = fn_match.group(5)
                interfaces.append(
                    InterfaceInfo(
                        name=fn_match.group(3),
                        interface_type=(
                            "async_function" if fn_match.group(2) is not None else "function"
                        ),
                        visibility=_visibility(fn_match),
                        parameters=_parse_parameters(fn_match.group(4)),
                        return_type=return_type.strip() if return_type is not None else None,
                        description=_extract_doc_comment(lines, index),
                    )
                )

            for regex, kind in ((_STRUCT_RE, "struct"), (_TRAIT_RE, "trait"), (_ENUM_RE, "enum")):
                match = regex.match(line)
                if match is not None:
                    interfaces.append(
                        InterfaceInfo(
                            name=match.group(2),
                            interface_type=kind,
                            visibility=_visibility(match),
                            description=_extract_doc_comment(lines, index),
                        )
                    )

            impl_match = _IMPL_RE.match(line)
            if impl_match is not None:
                trait_name, type_name = impl_match.group(1), impl_match.group(2)
                name = f"{trait_name} for {type_name}" if trait_name is not None else type_name
                interfaces.append(
                    InterfaceInfo(
                        name=name,
                        interface_type="implementation",
                        visibility="public",
                        description=_extract_doc_comment(lines, index),
                    )
                )

        return interfaces