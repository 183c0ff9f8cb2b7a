"""Base parser class and data models for lockfile parsing."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from ..exceptions import LockfileError


@dataclass
class Dependency:
    """A locked gem."""

    name: str
    version: str
    platform: Optional[str] = None
    source: Optional[str] = None
    line_number: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the dependency."""
        if not self.name or not self.name.strip():
            raise ValueError("Dependency name cannot be empty")
        self.name = self.name.strip()

    def as_pair(self) -> Tuple[str, str]:
        return (self.name, self.version)

    def __hash__(self) -> int:
        return hash((self.name, self.version, self.platform))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Dependency):
            return False
        return (self.name, self.version, self.platform) == (other.name, other.version, other.platform)


@dataclass
class ParsedLockfile:
    """Dependencies and gem sources read from one lockfile."""

    dependencies: List[Dependency] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    source_file: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_dependency(self, dependency: Dependency) -> None:
        self.dependencies.append(dependency)

    def add_source(self, source: str) -> None:
        if source not in self.sources:
            self.sources.append(source)

    def pairs(self) -> List[Tuple[str, str]]:
        """``(name, version)`` pairs in lockfile order, one per distinct pair."""
        seen: Set[Tuple[str, str]] = set()
        pairs = []
        for dependency in self.dependencies:
            pair = dependency.as_pair()
            if pair not in seen:
                seen.add(pair)
                pairs.append(pair)
        return pairs

    def find_dependency(self, name: str) -> Optional[Dependency]:
        """Find a dependency by name.

        Args:
            name: Gem name to find

        Returns:
            First dependency with that name, or None
        """
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        return None


class BaseParser(ABC):
    """Abstract base class for lockfile parsers."""

    file_names: Tuple[str, ...] = ()

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file."""
        return file_path.name in self.file_names

    @abstractmethod
    def parse_text(self, text: str, source_file: Optional[Path] = None) -> ParsedLockfile:
        """Parse lockfile contents."""

    def parse(self, file_path: Path) -> ParsedLockfile:
        """Read and parse a lockfile.

        Args:
            file_path: Path to the lockfile

        Returns:
            Parsed lockfile

        Raises:
            LockfileError: If the file is not valid UTF-8 or not a lockfile
        """
        self.validate_file(file_path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise LockfileError(f"Cannot decode {file_path}: {e}") from e
        return self.parse_text(text, source_file=file_path)

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Raises:
            FileNotFoundError: If file doesn't exist
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
