"""Shared fixtures for GemShield tests."""

from pathlib import Path

import pytest

from .helpers import LOCKFILE, make_record, write_advisory


@pytest.fixture
def gems_root(tmp_path: Path) -> Path:
    """An advisory tree for ``foo`` and ``rack``, laid out one directory per gem."""
    root = tmp_path / "ruby-advisory-db" / "gems"
    root.mkdir(parents=True)

    write_advisory(root, "foo", "CVE-2020-0001.yml", make_record())
    write_advisory(root, "foo", "CVE-2020-0002.yml", make_record(
        cve="2020-0002",
        title="Denial of service in foo",
        cvss_v3=None,
        cvss_v2=5.0,
        unaffected_versions=["< 0.5"],
        patched_versions=["~> 1.2.5", ">= 1.3.1"],
    ))
    write_advisory(root, "rack", "GHSA-aaaa-bbbb-cccc.yml", make_record(
        gem="rack",
        cve=None,
        ghsa="aaaa-bbbb-cccc",
        title="Header injection in rack",
        cvss_v3=9.8,
        patched_versions=["~> 2.2.8", ">= 3.0.9"],
    ))
    return root


@pytest.fixture
def database_dir(gems_root: Path) -> Path:
    """Root of the advisory database clone containing ``gems_root``."""
    return gems_root.parent


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory containing a Gemfile.lock."""
    project = tmp_path / "project"
    project.mkdir()
    (project / "Gemfile.lock").write_text(LOCKFILE, encoding="utf-8")
    return project
