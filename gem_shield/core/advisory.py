"""Advisory records from the ruby-advisory-db."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from ..utils.logging import get_logger
from .exceptions import InvalidAdvisory
from .versions import GemVersion, VersionSpec

logger = get_logger("Advisory")


@total_ordering
class Criticality(Enum):
    """Ordered severity of an advisory."""

    UNKNOWN = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Criticality):
            return NotImplemented
        return self.value < other.value

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "Criticality":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise InvalidAdvisory(f"Unknown criticality: {name!r}") from None

    @classmethod
    def from_cvss_v3(cls, score: float) -> "Criticality":
        if score == 0.0:
            return cls.UNKNOWN
        if score < 4.0:
            return cls.LOW
        if score < 7.0:
            return cls.MEDIUM
        if score < 9.0:
            return cls.HIGH
        return cls.CRITICAL

    @classmethod
    def from_cvss_v2(cls, score: float) -> "Criticality":
        if score < 4.0:
            return cls.LOW
        if score < 7.0:
            return cls.MEDIUM
        return cls.HIGH


@dataclass(frozen=True, eq=False)
class Advisory:
    """A single vulnerability advisory for one gem.

    Equality and hashing use the identity fields (``cve``, ``osvdb``,
    ``ghsa``) only, so callers can deduplicate advisories that appear more
    than once in the backing data.
    """

    gem: str
    title: str
    cve: Optional[str] = None
    osvdb: Optional[str] = None
    ghsa: Optional[str] = None
    id: Optional[str] = None
    url: Optional[str] = None
    date: Optional[datetime.date] = None
    description: Optional[str] = None
    cvss_v2: Optional[float] = None
    cvss_v3: Optional[float] = None
    criticality: Criticality = Criticality.UNKNOWN
    unaffected_versions: Tuple[VersionSpec, ...] = ()
    patched_versions: Tuple[VersionSpec, ...] = ()
    affected_versions: Tuple[VersionSpec, ...] = ()
    path: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not (self.cve or self.osvdb or self.ghsa):
            raise InvalidAdvisory("Advisory requires at least one of cve, osvdb or ghsa")
        if not self.title:
            raise InvalidAdvisory("Advisory requires a title")

    @classmethod
    def load(cls, record: Mapping[str, Any], path: Optional[Path] = None) -> "Advisory":
        """Build an advisory from a decoded record.

        Args:
            record: Mapping decoded from an advisory file
            path: Optional path of the file the record came from

        Returns:
            Validated Advisory

        Raises:
            InvalidAdvisory: If the record has the wrong shape or lacks identity/title
            MalformedSpec: If a version requirement cannot be parsed
        """
        if not isinstance(record, Mapping):
            raise InvalidAdvisory(f"Advisory record must be a mapping, got {type(record).__name__}")

        cvss_v2 = _optional_float(record, "cvss_v2")
        cvss_v3 = _optional_float(record, "cvss_v3")

        return cls(
            gem=_optional_str(record, "gem") or (path.parent.name if path else ""),
            title=_optional_str(record, "title") or "",
            cve=_optional_str(record, "cve"),
            osvdb=_optional_str(record, "osvdb"),
            ghsa=_optional_str(record, "ghsa"),
            id=path.stem if path else None,
            url=_optional_str(record, "url"),
            date=_parse_date(record.get("date")),
            description=_optional_str(record, "description"),
            cvss_v2=cvss_v2,
            cvss_v3=cvss_v3,
            criticality=_criticality(record.get("criticality"), cvss_v2, cvss_v3),
            unaffected_versions=_parse_specs(record, "unaffected_versions"),
            patched_versions=_parse_specs(record, "patched_versions"),
            affected_versions=_parse_specs(record, "affected_versions"),
            path=path,
        )

    @property
    def identity(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        return (self.cve, self.osvdb, self.ghsa)

    @property
    def identifiers(self) -> List[str]:
        """Display identifiers, e.g. ``["CVE-2013-0156", "OSVDB-89026"]``."""
        identifiers = []
        if self.cve:
            identifiers.append(_prefixed("CVE-", self.cve))
        if self.osvdb:
            identifiers.append(_prefixed("OSVDB-", self.osvdb))
        if self.ghsa:
            identifiers.append(_prefixed("GHSA-", self.ghsa))
        return identifiers

    @property
    def primary_identifier(self) -> str:
        return self.identifiers[0]

    def is_patched(self, version: Union[str, GemVersion]) -> bool:
        version = GemVersion.coerce(version)
        return any(spec.matches(version) for spec in self.patched_versions)

    def is_unaffected(self, version: Union[str, GemVersion]) -> bool:
        version = GemVersion.coerce(version)
        return any(spec.matches(version) for spec in self.unaffected_versions)

    def is_vulnerable(self, version: Union[str, GemVersion]) -> bool:
        """Check whether ``version`` is affected by this advisory.

        A version is vulnerable unless it is excluded by an unaffected or a
        patched requirement. With neither list present every version is
        vulnerable.

        Raises:
            MalformedVersion: If ``version`` is an unparsable string
        """
        version = GemVersion.coerce(version)
        return not self.is_unaffected(version) and not self.is_patched(version)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Advisory):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __str__(self) -> str:
        return self.primary_identifier


def _prefixed(prefix: str, value: str) -> str:
    return value if value.upper().startswith(prefix) else f"{prefix}{value}"


def _optional_str(record: Mapping[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise InvalidAdvisory(f"Field {key!r} must be a scalar")
    value = str(value).strip()
    return value or None


def _optional_float(record: Mapping[str, Any], key: str) -> Optional[float]:
    value = record.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidAdvisory(f"Field {key!r} must be a number, got {value!r}") from None


def _parse_date(value: Any) -> Optional[datetime.date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidAdvisory(f"Invalid advisory date: {value!r}") from None


def _parse_specs(record: Mapping[str, Any], key: str) -> Tuple[VersionSpec, ...]:
    value = record.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise InvalidAdvisory(f"Field {key!r} must be a string or a list of strings")
    return tuple(VersionSpec.parse(item) for item in value)


def _criticality(
    explicit: Any,
    cvss_v2: Optional[float],
    cvss_v3: Optional[float],
) -> Criticality:
    if explicit:
        try:
            return Criticality.from_name(str(explicit))
        except InvalidAdvisory as e:
            logger.warning(f"{e}, deriving from CVSS scores")
    if cvss_v3 is not None:
        return Criticality.from_cvss_v3(cvss_v3)
    if cvss_v2 is not None:
        return Criticality.from_cvss_v2(cvss_v2)
    return Criticality.UNKNOWN

