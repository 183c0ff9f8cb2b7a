"""Tests for the lockfile parser."""

import pytest

from gem_shield.core.exceptions import LockfileError
from gem_shield.core.parsers import (
    Dependency,
    GemfileLockParser,
    ParsedLockfile,
    insecure_sources,
    is_insecure_source,
)

from .helpers import LOCKFILE


class TestGemfileLockParser:
    """Test Gemfile.lock parsing."""

    def test_can_parse(self, tmp_path):
        parser = GemfileLockParser()
        assert parser.can_parse(tmp_path / "Gemfile.lock")
        assert parser.can_parse(tmp_path / "gems.locked")
        assert not parser.can_parse(tmp_path / "Gemfile")

    def test_parse_file(self, project_dir):
        parser = GemfileLockParser()
        result = parser.parse(project_dir / "Gemfile.lock")

        assert isinstance(result, ParsedLockfile)
        assert result.source_file == project_dir / "Gemfile.lock"
        assert [d.name for d in result.dependencies] == ["bar", "foo", "nokogiri", "rack", "widget"]

    def test_versions_and_platforms(self):
        result = GemfileLockParser().parse_text(LOCKFILE)

        nokogiri = result.find_dependency("nokogiri")
        assert nokogiri.version == "1.15.4"
        assert nokogiri.platform == "x86_64-linux"
        assert result.find_dependency("rack").version == "2.2.8"
        assert result.find_dependency("rack").platform is None

    def test_nested_requirements_are_ignored(self):
        result = GemfileLockParser().parse_text(LOCKFILE)
        assert result.find_dependency("racc") is None
        assert len(result.dependencies) == 5

    def test_sources(self):
        result = GemfileLockParser().parse_text(LOCKFILE)
        assert result.sources == ["https://rubygems.org/", "git://github.com/example/widget.git"]
        assert result.find_dependency("widget").source == "git://github.com/example/widget.git"
        assert result.find_dependency("widget").metadata["section"] == "GIT"

    def test_bundler_version(self):
        result = GemfileLockParser().parse_text(LOCKFILE)
        assert result.metadata["bundler_version"] == "2.4.10"

    def test_line_numbers(self):
        result = GemfileLockParser().parse_text(LOCKFILE)
        assert result.find_dependency("bar").line_number == 4

    def test_pairs(self):
        result = GemfileLockParser().parse_text(LOCKFILE)
        assert result.pairs()[:2] == [("bar", "9.9"), ("foo", "1.0")]

    def test_pairs_drop_platform_duplicates(self):
        text = (
            "GEM\n"
            "  remote: https://rubygems.org/\n"
            "  specs:\n"
            "    nokogiri (1.15.4)\n"
            "    nokogiri (1.15.4-arm64-darwin)\n"
            "    nokogiri (1.15.4-x86_64-linux)\n"
        )
        result = GemfileLockParser().parse_text(text)
        assert len(result.dependencies) == 3
        assert result.pairs() == [("nokogiri", "1.15.4")]

    def test_duplicate_remotes(self):
        text = (
            "GEM\n"
            "  remote: https://rubygems.org/\n"
            "  specs:\n"
            "GEM\n"
            "  remote: https://rubygems.org/\n"
            "  specs:\n"
        )
        assert GemfileLockParser().parse_text(text).sources == ["https://rubygems.org/"]

    def test_path_sources_are_not_remotes(self):
        text = (
            "PATH\n"
            "  remote: .\n"
            "  specs:\n"
            "    mygem (0.1.0)\n"
        )
        result = GemfileLockParser().parse_text(text)
        assert result.sources == []
        assert result.pairs() == [("mygem", "0.1.0")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GemfileLockParser().parse(tmp_path / "Gemfile.lock")

    def test_directory_is_not_a_lockfile(self, tmp_path):
        with pytest.raises(ValueError):
            GemfileLockParser().parse(tmp_path)

    def test_text_without_sources(self):
        with pytest.raises(LockfileError, match="No gem sources"):
            GemfileLockParser().parse_text("source 'https://rubygems.org'\ngem 'rack'\n")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "Gemfile.lock"
        path.write_bytes(b"GEM\n  specs:\n    caf\xe9 (1.0)\n")
        with pytest.raises(LockfileError):
            GemfileLockParser().parse(path)


class TestInsecureSources:
    """Test insecure source detection."""

    @pytest.mark.parametrize("source", [
        "http://rubygems.org/",
        "git://github.com/example/widget.git",
    ])
    def test_insecure(self, source):
        assert is_insecure_source(source)

    @pytest.mark.parametrize("source", [
        "https://rubygems.org/",
        "git@github.com:example/widget.git",
        "https://github.com/example/widget.git",
        "http://localhost:9292/",
        "http://127.0.0.1/",
    ])
    def test_secure(self, source):
        assert not is_insecure_source(source)

    def test_insecure_sources_preserves_order(self):
        sources = ["git://a.example/x.git", "https://rubygems.org/", "http://b.example/"]
        assert insecure_sources(sources) == ["git://a.example/x.git", "http://b.example/"]


class TestDependencyModel:
    """Test the Dependency data model."""

    def test_name_is_stripped(self):
        assert Dependency(name="  rack ", version="1.0").name == "rack"

    def test_empty_name(self):
        with pytest.raises(ValueError, match="Dependency name cannot be empty"):
            Dependency(name="", version="1.0")

    def test_equality(self):
        assert Dependency(name="rack", version="1.0") == Dependency(name="rack", version="1.0", line_number=3)
        assert Dependency(name="rack", version="1.0") != Dependency(name="rack", version="1.1")
        assert len({Dependency(name="rack", version="1.0"), Dependency(name="rack", version="1.0")}) == 1

    def test_as_pair(self):
        assert Dependency(name="rack", version="1.0", platform="java").as_pair() == ("rack", "1.0")

    def test_find_dependency_missing(self):
        assert ParsedLockfile().find_dependency("rack") is None
