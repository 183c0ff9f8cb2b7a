"""Read-only index of advisories laid out one directory per gem."""

import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

import yaml

from ..utils.logging import get_logger
from ..utils.performance import benchmark
from .advisory import Advisory
from .exceptions import GemShieldError, NotADirectory
from .versions import GemVersion

ADVISORY_SUFFIXES = (".yml", ".yaml")


class AdvisoryStore:
    """Advisories under ``root``, partitioned by gem name.

    ``root`` holds one subdirectory per gem and each subdirectory holds one
    YAML record per advisory. Records are decoded lazily on every
    enumeration, so a store sees the directory as it is when iterated. A
    record that cannot be read or validated is logged and skipped.

    The store performs no writes and keeps no mutable state, so one
    instance may be shared between threads.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        """Open the store.

        Args:
            root: Directory containing one subdirectory per gem

        Raises:
            NotADirectory: If ``root`` is not a readable directory
        """
        root = Path(root).expanduser()
        if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
            raise NotADirectory(f"{str(root)!r} is not a directory")

        self.root = root
        self.logger = get_logger("AdvisoryStore")

    @classmethod
    def open(cls, root: Union[str, Path]) -> "AdvisoryStore":
        return cls(root)

    def advisories(self) -> Iterator[Advisory]:
        """Yield every advisory in the store.

        Each call re-reads the directory.
        """
        for path in self._advisory_paths():
            advisory = self._load(path)
            if advisory is not None:
                yield advisory

    def advisories_for(self, name: str) -> Iterator[Advisory]:
        """Yield the advisories for one gem.

        An unknown gem yields nothing.
        """
        for path in self._advisory_paths_for(name):
            advisory = self._load(path)
            if advisory is not None:
                yield advisory

    def check_dependency(
        self,
        name: str,
        version: Union[str, GemVersion]
    ) -> Iterator[Advisory]:
        """Yield the advisories for ``name`` that ``version`` is vulnerable to.

        Args:
            name: Gem name
            version: Locked version of the gem

        Returns:
            Iterator of matching advisories

        Raises:
            MalformedVersion: Immediately, if ``version`` cannot be parsed
        """
        version = GemVersion.coerce(version)
        return (
            advisory
            for advisory in self.advisories_for(name)
            if advisory.is_vulnerable(version)
        )

    @benchmark
    def size(self) -> int:
        """Number of advisory files, counted without decoding them."""
        return sum(1 for _ in self._advisory_paths())

    def gems(self) -> List[str]:
        """Names of all gems with an advisory directory."""
        return [partition.name for partition in self._partitions()]

    def _partitions(self) -> List[Path]:
        try:
            return sorted(p for p in self.root.iterdir() if p.is_dir() and not p.name.startswith("."))
        except OSError as e:
            self.logger.warning(f"Failed to list {self.root}: {e}")
            return []

    def _advisory_paths(self) -> Iterator[Path]:
        for partition in self._partitions():
            yield from self._record_files(partition)

    def _advisory_paths_for(self, name: str) -> Iterator[Path]:
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            return iter(())
        partition = self.root / name
        if not partition.is_dir():
            return iter(())
        return self._record_files(partition)

    def _record_files(self, partition: Path) -> Iterator[Path]:
        try:
            files = sorted(
                p for p in partition.iterdir()
                if p.suffix in ADVISORY_SUFFIXES and p.is_file()
            )
        except OSError as e:
            self.logger.warning(f"Failed to list {partition}: {e}")
            return
        yield from files

    def _load(self, path: Path) -> Optional[Advisory]:
        """Decode and validate one record, or return None if it is unusable."""
        try:
            # safe_load raises a bare ValueError for impossible timestamps
            with open(path, 'r', encoding='utf-8') as f:
                record = yaml.safe_load(f)
            return Advisory.load(record, path=path)
        except (OSError, UnicodeDecodeError, ValueError, TypeError, yaml.YAMLError, GemShieldError) as e:
            self.logger.warning(f"Skipping advisory {path}: {e}")
            return None

    def __str__(self) -> str:
        return str(self.root)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.root}>"
