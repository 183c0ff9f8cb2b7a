"""Matching of locked gems against the advisory store."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Set, Tuple, Union

from ..utils.logging import get_logger
from ..utils.performance import PerformanceMonitor
from .advisory import Advisory
from .exceptions import MalformedVersion
from .store import AdvisoryStore


@dataclass(frozen=True)
class InsecureSource:
    """A gem source fetched over an unencrypted transport."""

    source: str


@dataclass(frozen=True)
class UnpatchedMatch:
    """A locked gem whose version falls inside an advisory's vulnerable range."""

    name: str
    version: str
    advisory: Advisory


@dataclass(frozen=True)
class DependencyError:
    """A dependency that could not be audited, e.g. because its version is malformed."""

    name: str
    version: str
    message: str


MatchResult = Union[InsecureSource, UnpatchedMatch, DependencyError]


@dataclass
class Report:
    """Ordered results of one audit run."""

    results: List[MatchResult] = field(default_factory=list)

    def add(self, result: MatchResult) -> None:
        self.results.append(result)

    @property
    def insecure_sources(self) -> List[InsecureSource]:
        return [r for r in self.results if isinstance(r, InsecureSource)]

    @property
    def unpatched(self) -> List[UnpatchedMatch]:
        return [r for r in self.results if isinstance(r, UnpatchedMatch)]

    @property
    def errors(self) -> List[DependencyError]:
        return [r for r in self.results if isinstance(r, DependencyError)]

    @property
    def vulnerable(self) -> bool:
        return any(isinstance(r, (InsecureSource, UnpatchedMatch)) for r in self.results)

    @property
    def vulnerable_gems(self) -> Set[str]:
        return {r.name for r in self.unpatched}

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)


class MatchEngine:
    """Crosses locked dependencies with the advisories in a store."""

    def __init__(self, enable_performance_monitoring: bool = True) -> None:
        """Initialize the match engine.

        Args:
            enable_performance_monitoring: Record scan timings
        """
        self.logger = get_logger("MatchEngine")
        self.performance_monitor = PerformanceMonitor(enable_performance_monitoring)

    def scan(
        self,
        dependencies: Iterable[Tuple[str, str]],
        store: AdvisoryStore,
        insecure_sources: Iterable[str] = (),
        ignore: Iterable[str] = ()
    ) -> Report:
        """Audit dependencies against the store.

        Insecure sources come first, then one group of results per
        dependency in the given order. A dependency with a malformed
        version produces a DependencyError and the scan carries on.

        Args:
            dependencies: ``(name, version)`` pairs
            store: Advisory store to query
            insecure_sources: Source URLs already flagged as insecure
            ignore: Advisory identifiers (e.g. ``CVE-2013-0156``) to skip

        Returns:
            Report with the ordered results
        """
        report = Report()
        ignored = {identifier.upper() for identifier in ignore}

        with self.performance_monitor.measure("scan") as metric:
            for source in insecure_sources:
                report.add(InsecureSource(source))

            for name, version in dependencies:
                metric.items += 1
                for result in self._check_dependency(name, version, store, ignored):
                    report.add(result)

        self.logger.info(
            f"Scanned {metric.items} dependencies: {len(report.unpatched)} unpatched, "
            f"{len(report.errors)} errors"
        )
        return report

    def _check_dependency(
        self,
        name: str,
        version: str,
        store: AdvisoryStore,
        ignored: Set[str]
    ) -> Iterator[MatchResult]:
        try:
            advisories = store.check_dependency(name, version)
        except MalformedVersion as e:
            self.logger.warning(f"Cannot audit {name} {version}: {e}")
            yield DependencyError(name, str(version), str(e))
            return

        seen: Set[Advisory] = set()
        for advisory in advisories:
            if advisory in seen:
                self.logger.debug(f"Duplicate advisory {advisory} for {name}, skipping")
                continue
            seen.add(advisory)

            if ignored.intersection(i.upper() for i in advisory.identifiers):
                self.logger.debug(f"Ignoring {advisory} for {name} {version}")
                continue

            self.logger.debug(f"MATCH: {name} {version} is vulnerable to {advisory}")
            yield UnpatchedMatch(name, str(version), advisory)

