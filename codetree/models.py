"""Records produced by language processors and the interface they share."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Union

PathArg = Union[str, "os.PathLike[str]"]


@dataclass
class Dependency:
    """A dependency found in a source file."""

    name: str
    path: Optional[str]
    is_external: bool
    line_number: Optional[int]
    dependency_type: str
    version: Optional[str] = None


@dataclass
class ParameterInfo:
    """One parameter of a function, method or initializer."""

    name: str
    param_type: str
    is_optional: bool
    description: Optional[str] = None


@dataclass
class InterfaceInfo:
    """A declared element of a source file: function, class, method and so on."""

    name: str
    interface_type: str
    visibility: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: Optional[str] = None
    description: Optional[str] = None


class LanguageProcessor(ABC):
    """Extracts structure and dependencies from source files of one language."""

    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions, without the dot, handled by this processor."""

    @abstractmethod
    def extract_dependencies(self, content: str, file_path: PathArg) -> list[Dependency]:
        """Dependencies declared in ``content``."""

    @abstractmethod
    def determine_component_type(self, file_path: PathArg, content: str) -> str:
        """A short label describing what kind of component the file is."""

    @abstractmethod
    def is_important_line(self, line: str) -> bool:
        """Whether ``line`` carries structural or notable information."""

    @abstractmethod
    def language_name(self) -> str:
        """Human-readable name of the language."""

    @abstractmethod
    def extract_interfaces(self, content: str, file_path: PathArg) -> list[InterfaceInfo]:
        """Declared elements found in ``content``."""