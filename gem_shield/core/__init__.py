"""Advisory matching engine for GemShield."""

from .advisory import Advisory, Criticality
from .exceptions import (
    DatabaseSyncError,
    GemShieldError,
    InvalidAdvisory,
    LockfileError,
    MalformedSpec,
    MalformedVersion,
    NotADirectory,
)
from .matcher import (
    DependencyError,
    InsecureSource,
    MatchEngine,
    MatchResult,
    Report,
    UnpatchedMatch,
)
from .store import AdvisoryStore
from .versions import GemVersion, VersionSpec

__all__ = [
    "Advisory",
    "AdvisoryStore",
    "Criticality",
    "DatabaseSyncError",
    "DependencyError",
    "GemShieldError",
    "GemVersion",
    "InsecureSource",
    "InvalidAdvisory",
    "LockfileError",
    "MalformedSpec",
    "MalformedVersion",
    "MatchEngine",
    "MatchResult",
    "NotADirectory",
    "Report",
    "UnpatchedMatch",
    "VersionSpec",
]
