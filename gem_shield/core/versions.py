"""RubyGems version parsing and requirement matching."""

import functools
import re
from typing import Any, List, Tuple, Union

from .exceptions import MalformedSpec, MalformedVersion

VERSION_PATTERN = r"[0-9]+(?:\.[0-9a-zA-Z]+)*(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"

_VERSION_RE = re.compile(rf"^\s*(?:{VERSION_PATTERN})?\s*$")
_SEGMENT_RE = re.compile(r"[0-9]+|[a-zA-Z]+")
_CONSTRAINT_RE = re.compile(rf"^\s*(=|!=|>=|<=|>|<|~>)?\s*({VERSION_PATTERN})\s*$")

Segment = Union[int, str]


@functools.total_ordering
class GemVersion:
    """A RubyGems-style version.

    Digit runs are numeric segments and letter runs are string segments, so
    ``1.0.rc1`` has the segments ``1, 0, "rc", 1``. Any string segment makes
    the version a pre-release, which sorts before the release it precedes.
    """

    __slots__ = ("_text", "_segments", "_canonical")

    def __init__(self, text: str) -> None:
        if not isinstance(text, str) or not _VERSION_RE.match(text):
            raise MalformedVersion(f"Malformed version number string: {text!r}")

        text = text.strip() or "0"
        self._text = text
        self._segments: Tuple[Segment, ...] = tuple(
            int(part) if part.isdigit() else part
            for part in _SEGMENT_RE.findall(text.replace("-", ".pre."))
        )
        self._canonical = self._canonical_segments()

    @classmethod
    def coerce(cls, value: Union[str, "GemVersion"]) -> "GemVersion":
        """Return ``value`` as a GemVersion, parsing it if needed."""
        if isinstance(value, GemVersion):
            return value
        return cls(value)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def prerelease(self) -> bool:
        return any(isinstance(segment, str) for segment in self._segments)

    def release(self) -> "GemVersion":
        """The version with all pre-release segments removed."""
        if not self.prerelease:
            return self
        return GemVersion(".".join(str(s) for s in self._numeric_prefix()))

    def bump(self) -> "GemVersion":
        """The next significant release, used by the pessimistic operator.

        ``1.2.3`` bumps to ``1.3`` and ``1`` bumps to ``2``.
        """
        segments = list(self._numeric_prefix())
        if len(segments) > 1:
            segments.pop()
        segments[-1] += 1
        return GemVersion(".".join(str(s) for s in segments))

    def _numeric_prefix(self) -> List[int]:
        segments = list(self._segments)
        while any(isinstance(s, str) for s in segments):
            segments.pop()
        return segments or [0]

    def _canonical_segments(self) -> Tuple[Segment, ...]:
        # Trailing zeros are dropped from the numeric prefix and from the
        # pre-release tail independently.
        string_start = next(
            (i for i, s in enumerate(self._segments) if isinstance(s, str)),
            len(self._segments),
        )
        canonical: List[Segment] = []
        for part in (self._segments[:string_start], self._segments[string_start:]):
            part = list(part)
            while part and part[-1] == 0:
                part.pop()
            canonical.extend(part)
        return tuple(canonical)

    def _compare(self, other: "GemVersion") -> int:
        lhs, rhs = self._canonical, other._canonical
        for i in range(max(len(lhs), len(rhs))):
            left = lhs[i] if i < len(lhs) else 0
            right = rhs[i] if i < len(rhs) else 0
            if left == right:
                continue
            if isinstance(left, str) and isinstance(right, int):
                return -1
            if isinstance(left, int) and isinstance(right, str):
                return 1
            return -1 if left < right else 1
        return 0

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, GemVersion):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, GemVersion):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        return hash(self._canonical)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"GemVersion({self._text!r})"


def _pessimistic(version: GemVersion, requirement: GemVersion) -> bool:
    return version >= requirement and version.release() < requirement.bump()


_OPERATORS = {
    "=": lambda v, r: v == r,
    "!=": lambda v, r: v != r,
    ">": lambda v, r: v > r,
    ">=": lambda v, r: v >= r,
    "<": lambda v, r: v < r,
    "<=": lambda v, r: v <= r,
    "~>": _pessimistic,
}


class VersionSpec:
    """An immutable conjunction of version constraints, e.g. ``>= 1.0, < 2.3.1``.

    The empty spec matches nothing.
    """

    __slots__ = ("_constraints",)

    def __init__(self, constraints: Tuple[Tuple[str, GemVersion], ...] = ()) -> None:
        for operator, _ in constraints:
            if operator not in _OPERATORS:
                raise MalformedSpec(f"Unknown version operator: {operator!r}")
        self._constraints = tuple(constraints)

    @classmethod
    def parse(cls, text: str) -> "VersionSpec":
        """Parse a comma-separated list of constraints.

        Args:
            text: Requirement string such as ``"~> 3.0.20"`` or ``">= 1.0, < 2"``

        Returns:
            Parsed VersionSpec

        Raises:
            MalformedSpec: If a constraint has no recognisable operator and version
        """
        if not isinstance(text, str):
            raise MalformedSpec(f"Version requirement must be a string, got {type(text).__name__}")
        if not text.strip():
            return cls()

        constraints = []
        for part in text.split(","):
            match = _CONSTRAINT_RE.match(part)
            if not match:
                raise MalformedSpec(f"Illformed requirement: {part.strip()!r} in {text!r}")
            operator = match.group(1) or "="
            constraints.append((operator, GemVersion(match.group(2))))
        return cls(tuple(constraints))

    @property
    def constraints(self) -> Tuple[Tuple[str, GemVersion], ...]:
        return self._constraints

    def matches(self, version: Union[str, GemVersion]) -> bool:
        """Check whether ``version`` satisfies every constraint.

        Raises:
            MalformedVersion: If ``version`` is an unparsable string
        """
        version = GemVersion.coerce(version)
        if not self._constraints:
            return False
        return all(_OPERATORS[op](version, req) for op, req in self._constraints)

    def __contains__(self, version: Union[str, GemVersion]) -> bool:
        return self.matches(version)

    def __bool__(self) -> bool:
        return bool(self._constraints)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self._constraints == other._constraints

    def __hash__(self) -> int:
        return hash(self._constraints)

    def __str__(self) -> str:
        return ", ".join(f"{op} {req}" for op, req in self._constraints)

    def __repr__(self) -> str:
        return f"VersionSpec({str(self)!r})"
