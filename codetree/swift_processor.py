"""Line-based extraction of imports and declarations from Swift sources."""

from __future__ import annotations

import os
import re
from pathlib import PurePath
from typing import Optional

from codetree.models import Dependency, InterfaceInfo, LanguageProcessor, PathArg
from codetree.swift_syntax import (
    extract_doc_comment,
    extract_func_name,
    extract_name_after_keyword,
    extract_params_string,
    extract_return_type,
    extract_visibility,
    infer_type_from_value,
    parse_parameters,
)

_IMPORT_RE = re.compile(r"^\s*(?:@\w+\s+)*import\s+(\w+)")
_FUNC_RE = re.compile(
    r"(?:@\w+(?:\([^)]*\))?\s+)*(?:(?:public|private|internal|fileprivate|open)\s+)?"
    r"(?:final\s+)?(?:static\s+)?(?:class\s+)?(?:override\s+)?(?:mutating\s+)?func\s+(\w+)"
)
_INIT_RE = re.compile(
    r"(?:@\w+(?:\([^)]*\))?\s+)*(?:(?:public|private|internal|fileprivate|open)\s+)?"
    r"(?:convenience\s+)?(?:required\s+)?(?:override\s+)?init\s*(?:<[^>]+>)?\s*(\?|!)?\s*\("
)

_MARKERS = ("TODO", "FIXME", "NOTE", "HACK", "MARK:", "WARNING")
_TYPE_KEYWORDS = ("class ", "struct ", "enum ", "protocol ", "extension ")
_INIT_MARKERS = ("init(", "init?(", "init!(")
_LOCAL_EXCLUDERS = (
    "private ",
    "public ",
    "internal ",
    "fileprivate ",
    "open ",
    "static ",
    "lazy ",
    "weak ",
    "unowned ",
)
_SPECIAL_FILES = {
    "AppDelegate.swift": "swift_app_delegate",
    "SceneDelegate.swift": "swift_scene_delegate",
}
_CONTENT_KINDS = (
    ("protocol ", "swift_protocol"),
    ("class ", "swift_class"),
    ("struct ", "swift_struct"),
    ("enum ", "swift_enum"),
    ("extension ", "swift_extension"),
)


def _lines(content: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return from each line."""
    if not content:
        return []
    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _resembles_local(trimmed: str) -> bool:
    return (
        not trimmed.startswith(("let ", "var ", "@"))
        and not any(word in trimmed for word in _LOCAL_EXCLUDERS)
    )


def _property_type(trimmed: str) -> Optional[str]:
    colon = trimmed.find(":")
    if colon >= 0:
        collected = []
        for ch in trimmed[colon + 1:]:
            if ch in "={":
                break
            collected.append(ch)
        text = "".join(collected).strip()
        return text or None
    if "=" in trimmed:
        return infer_type_from_value(trimmed)
    return None


def _property_kind(trimmed: str, is_var: bool) -> str:
    if "static " in trimmed:
        return "static_property"
    if not is_var:
        return "constant"
    if "lazy " in trimmed:
        return "lazy_property"
    if "weak " in trimmed:
        return "weak_property"
    return "property"


class SwiftProcessor(LanguageProcessor):
    """Processor for Swift source files."""

    def supported_extensions(self) -> list[str]:
        return ["swift"]

    def language_name(self) -> str:
        return "Swift"

    def extract_dependencies(self, content: str, file_path: PathArg) -> list[Dependency]:
        source_file = os.fspath(file_path)
        dependencies: list[Dependency] = []
        for number, line in enumerate(_lines(content), start=1):
            match = _IMPORT_RE.match(line)
            if match is None:
                continue
            # Every Swift import names another module, so all are external.
            dependencies.append(
                Dependency(
                    name=match.group(1),
                    path=source_file,
                    is_external=True,
                    line_number=number,
                    dependency_type="import",
                )
            )
        return dependencies

    def determine_component_type(self, file_path: PathArg, content: str) -> str:
        file_name = PurePath(os.fspath(file_path)).name

        special = _SPECIAL_FILES.get(file_name)
        if special is not None:
            return special
        if file_name.endswith("ViewController.swift"):
            return "swift_view_controller"
        if file_name.endswith(("Tests.swift", "Test.swift")):
            return "swift_test"

        if "@main" in content and ": App" in content:
            return "swift_swiftui_app"
        if "@main" in content or "@UIApplicationMain" in content:
            return "swift_main"
        if ": View" in content and "var body" in content:
            return "swift_swiftui_view"
        if ": UIViewController" in content:
            return "swift_view_controller"
        for keyword, kind in _CONTENT_KINDS:
            if keyword in content:
                return kind
        return "swift_file"

    def is_important_line(self, line: str) -> bool:
        trimmed = line.strip()
        if any(keyword in trimmed for keyword in _TYPE_KEYWORDS):
            return True
        if "func " in trimmed or any(marker in trimmed for marker in _INIT_MARKERS):
            return True
        if ("var " in trimmed or "let " in trimmed) and ":" in trimmed:
            return True
        if "typealias " in trimmed:
            return True
        if trimmed.startswith(("import ", "@_exported import ", "@")):
            return True
        if any(marker in trimmed for marker in _MARKERS):
            return True
        return trimmed.startswith("case ")

    def extract_interfaces(self, content: str, file_path: PathArg) -> list[InterfaceInfo]:
        lines = _lines(content)
        interfaces: list[InterfaceInfo] = []

        for index, line in enumerate(lines):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("//"):
                continue

            def describe() -> Optional[str]:
                return extract_doc_comment(lines, index)

            if _FUNC_RE.search(trimmed):
                name = extract_func_name(trimmed)
                if name is not None:
                    interfaces.append(
                        InterfaceInfo(
                            name=name,
                            interface_type=(
                                "async_function" if " async " in trimmed else "function"
                            ),
                            visibility=extract_visibility(trimmed),
                            parameters=parse_parameters(extract_params_string(trimmed)),
                            return_type=extract_return_type(trimmed),
                            description=describe(),
                        )
                    )

            if _INIT_RE.search(trimmed):
                if "init!" in trimmed:
                    init_name = "init!"
                elif "init?" in trimmed:
                    init_name = "init?"
                else:
                    init_name = "init"
                interfaces.append(
                    InterfaceInfo(
                        name=init_name,
                        interface_type="initializer",
                        visibility=extract_visibility(trimmed),
                        parameters=parse_parameters(extract_params_string(trimmed)),
                        description=describe(),
                    )
                )

            if "class " in trimmed and "class func" not in trimmed:
                name = extract_name_after_keyword(trimmed, "class ")
                if name is not None:
                    interfaces.append(
                        InterfaceInfo(
                            name=name,
                            interface_type="final_class" if "final " in trimmed else "class",
                            visibility=extract_visibility(trimmed),
                            description=describe(),
                        )
                    )

            for keyword, kind in (
                ("struct ", "struct"),
                ("protocol ", "protocol"),
                ("enum ", "enum"),
                ("extension ", "extension"),
            ):
                if keyword not in trimmed:
                    continue
                name = extract_name_after_keyword(trimmed, keyword)
                if name is None:
                    continue
                if kind == "enum" and "indirect " in trimmed:
                    kind = "indirect_enum"
                interfaces.append(
                    InterfaceInfo(
                        name=name,
                        interface_type=kind,
                        visibility=extract_visibility(trimmed),
                        description=describe(),
                    )
                )

            if "var " in trimmed or "let " in trimmed:
                is_var = "var " in trimmed
                name = extract_name_after_keyword(trimmed, "var " if is_var else "let ")
                if name is not None:
                    if _resembles_local(trimmed) and ":" not in trimmed:
                        continue
                    interfaces.append(
                        InterfaceInfo(
                            name=name,
                            interface_type=_property_kind(trimmed, is_var),
                            visibility=extract_visibility(trimmed),
                            return_type=_property_type(trimmed),
                            description=describe(),
                        )
                    )

            if "typealias " in trimmed:
                name = extract_name_after_keyword(trimmed, "typealias ")
                if name is not None:
                    eq = trimmed.find("=")
                    aliased = trimmed[eq + 1:].strip() if eq >= 0 else None
                    interfaces.append(
                        InterfaceInfo(
                            name=name,
                            interface_type="typealias",
                            visibility=extract_visibility(trimmed),
                            return_type=aliased,
                            description=describe(),
                        )
                    )

        return interfaces