"""Bundler ``Gemfile.lock`` parser."""

import re
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from ..exceptions import LockfileError
from ...utils.logging import get_logger
from ...utils.performance import benchmark
from .base import BaseParser, Dependency, ParsedLockfile

SOURCE_SECTIONS = ("GEM", "GIT", "PATH", "PLUGIN SOURCE")

INSECURE_SCHEMES = ("git", "http")
INTERNAL_HOSTS = ("localhost", "127.0.0.1", "::1")

# Four-space indented "name (version)" or "name (version-platform)"
_SPEC_RE = re.compile(r"^    (?P<name>[^\s(]+) \((?P<version>[^)\-]+)(?:-(?P<platform>[^)]+))?\)$")
_REMOTE_RE = re.compile(r"^  remote: (?P<remote>\S+)$")


class GemfileLockParser(BaseParser):
    """Parser for Bundler lockfiles."""

    file_names = ("Gemfile.lock", "gems.locked")

    def __init__(self) -> None:
        self.logger = get_logger("GemfileLockParser")

    @benchmark
    def parse_text(self, text: str, source_file: Optional[Path] = None) -> ParsedLockfile:
        """Parse lockfile contents.

        Only the ``GEM``, ``GIT``, ``PATH`` and ``PLUGIN SOURCE`` sections
        contribute dependencies and sources; nested requirement lines are
        ignored.

        Args:
            text: Lockfile contents
            source_file: Optional path recorded on the result

        Returns:
            Parsed lockfile

        Raises:
            LockfileError: If the text has no source section at all
        """
        result = ParsedLockfile(source_file=source_file)
        section: Optional[str] = None
        remote: Optional[str] = None
        seen_source_section = False

        for line_number, line in enumerate(text.splitlines(), 1):
            line = line.rstrip()
            if not line:
                continue

            if not line.startswith(" "):
                section = line.strip()
                remote = None
                seen_source_section = seen_source_section or section in SOURCE_SECTIONS
                continue

            if section == "BUNDLED WITH":
                result.metadata["bundler_version"] = line.strip()
                continue

            if section not in SOURCE_SECTIONS:
                continue

            remote_match = _REMOTE_RE.match(line)
            if remote_match:
                remote = remote_match.group("remote")
                if section in ("GEM", "GIT"):
                    result.add_source(remote)
                continue

            spec_match = _SPEC_RE.match(line)
            if spec_match:
                result.add_dependency(Dependency(
                    name=spec_match.group("name"),
                    version=spec_match.group("version"),
                    platform=spec_match.group("platform"),
                    source=remote,
                    line_number=line_number,
                    metadata={"section": section},
                ))

        if not seen_source_section:
            raise LockfileError(f"No gem sources found in {source_file or 'lockfile'}")

        self.logger.debug(
            f"Parsed {len(result.dependencies)} gems from {len(result.sources)} sources"
        )
        return result


def is_insecure_source(source: str) -> bool:
    """Check whether a gem source is fetched without transport security."""
    uri = urlparse(source)
    if uri.scheme not in INSECURE_SCHEMES:
        return False
    if uri.scheme == "http" and uri.hostname in INTERNAL_HOSTS:
        return False
    return True


def insecure_sources(sources: Iterable[str]) -> List[str]:
    """Sources using ``git://`` or ``http://`` (other than to localhost)."""
    return [source for source in sources if is_insecure_source(source)]
