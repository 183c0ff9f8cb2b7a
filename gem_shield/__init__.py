"""GemShield - audit Bundler lockfiles against the ruby-advisory-db."""

__version__ = "0.1.0"

from .core.advisory import Advisory, Criticality
from .core.matcher import MatchEngine, Report
from .core.store import AdvisoryStore
from .core.versions import GemVersion, VersionSpec
from .database import AdvisoryDatabase, DatabaseConfig
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "Advisory",
    "AdvisoryDatabase",
    "AdvisoryStore",
    "ConsoleFormatter",
    "Criticality",
    "DatabaseConfig",
    "GemVersion",
    "JSONFormatter",
    "MatchEngine",
    "Report",
    "VersionSpec",
]
