"""Builders for advisory trees and lockfiles used across the tests."""

from pathlib import Path
from typing import Any, Dict

import yaml


def write_advisory(root: Path, gem: str, file_name: str, record: Dict[str, Any]) -> Path:
    """Write one advisory record as YAML under ``root/gem/file_name``."""
    gem_dir = root / gem
    gem_dir.mkdir(parents=True, exist_ok=True)
    path = gem_dir / file_name
    path.write_text(yaml.safe_dump(record, sort_keys=False), encoding="utf-8")
    return path


def make_record(**overrides: Any) -> Dict[str, Any]:
    record = {
        "gem": "foo",
        "cve": "2020-0001",
        "url": "https://example.com/advisory",
        "title": "Remote code execution in foo",
        "date": "2020-01-15",
        "description": "Foo evaluates untrusted input.",
        "cvss_v3": 7.5,
        "patched_versions": [">= 2.0"],
    }
    record.update(overrides)
    return record


LOCKFILE = """\
GEM
  remote: https://rubygems.org/
  specs:
    bar (9.9)
    foo (1.0)
      bar (>= 1.0)
    nokogiri (1.15.4-x86_64-linux)
      racc (~> 1.4)
    rack (2.2.8)

GIT
  remote: git://github.com/example/widget.git
  revision: 0123456789abcdef0123456789abcdef01234567
  specs:
    widget (0.3.0)

PLATFORMS
  ruby
  x86_64-linux

DEPENDENCIES
  foo
  rack (~> 2.2)
  widget!

BUNDLED WITH
   2.4.10
"""
