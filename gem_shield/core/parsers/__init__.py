"""Lockfile parsers."""

from .base import BaseParser, Dependency, ParsedLockfile
from .lockfile import GemfileLockParser, insecure_sources, is_insecure_source

__all__ = [
    "BaseParser",
    "Dependency",
    "ParsedLockfile",
    "GemfileLockParser",
    "insecure_sources",
    "is_insecure_source",
]
