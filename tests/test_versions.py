"""Tests for version parsing and requirement matching."""

import itertools

import pytest

from gem_shield.core.exceptions import MalformedSpec, MalformedVersion
from gem_shield.core.versions import GemVersion, VersionSpec


class TestGemVersion:
    """Test RubyGems version semantics."""

    def test_segments(self):
        """Digit and letter runs become separate segments."""
        assert GemVersion("1.0.rc1").segments == (1, 0, "rc", 1)
        assert GemVersion("2.3.1").segments == (2, 3, 1)

    def test_dash_is_prerelease(self):
        """A dash reads as a pre-release marker."""
        version = GemVersion("1.0.0-rc1")
        assert version.prerelease
        assert version < GemVersion("1.0.0")

    def test_trailing_zeros_are_insignificant(self):
        assert GemVersion("1.0") == GemVersion("1")
        assert GemVersion("1.0.0") == GemVersion("1")
        assert hash(GemVersion("1.0")) == hash(GemVersion("1"))

    def test_numeric_segments_compare_numerically(self):
        assert GemVersion("1.10") > GemVersion("1.9")
        assert GemVersion("0.10.0") > GemVersion("0.9.12")

    def test_prerelease_sorts_before_release(self):
        assert GemVersion("1.0.a") < GemVersion("1.0")
        assert GemVersion("1.0") < GemVersion("1.0.1")
        assert GemVersion("2.0.0.beta2") < GemVersion("2.0.0.rc1")
        assert GemVersion("2.0.0.rc1") < GemVersion("2.0.0")

    def test_blank_is_zero(self):
        assert GemVersion("") == GemVersion("0")
        assert GemVersion("  1.2  ") == GemVersion("1.2")

    @pytest.mark.parametrize("text", ["not-a-version", "1..2", "v1.0", "1.0 beta", "="])
    def test_malformed_versions(self, text):
        with pytest.raises(MalformedVersion):
            GemVersion(text)

    def test_non_string_is_malformed(self):
        with pytest.raises(MalformedVersion):
            GemVersion(None)

    def test_total_order(self):
        """Exactly one of <, ==, > holds and ordering is transitive."""
        versions = [GemVersion(v) for v in [
            "0.1", "1", "1.0.a", "1.0.0.pre", "1.0.0.rc1", "1.0.1", "1.2",
            "1.10", "2.0.0.beta", "2.0", "10.0",
        ]]

        for a, b in itertools.product(versions, repeat=2):
            outcomes = [a < b, a == b, a > b]
            assert outcomes.count(True) == 1, (a, b)

        for a, b, c in itertools.product(versions, repeat=3):
            if a < b and b < c:
                assert a < c, (a, b, c)

    def test_release(self):
        assert GemVersion("1.2.rc1").release() == GemVersion("1.2")
        assert str(GemVersion("1.2.3").release()) == "1.2.3"

    def test_bump(self):
        assert GemVersion("1.2.3").bump() == GemVersion("1.3")
        assert GemVersion("1").bump() == GemVersion("2")
        assert GemVersion("1.2.a").bump() == GemVersion("2")

    def test_coerce(self):
        version = GemVersion("1.0")
        assert GemVersion.coerce(version) is version
        assert GemVersion.coerce("1.0") == version


class TestVersionSpec:
    """Test requirement parsing and matching."""

    def test_range(self):
        spec = VersionSpec.parse(">= 1.0, < 2.3.1")
        assert spec.matches("1.0")
        assert spec.matches("2.3.0")
        assert not spec.matches("2.3.1")
        assert not spec.matches("0.9")

    def test_implicit_equality(self):
        spec = VersionSpec.parse("1.2.3")
        assert spec.constraints[0][0] == "="
        assert spec.matches("1.2.3")
        assert not spec.matches("1.2.4")

    def test_not_equal(self):
        spec = VersionSpec.parse("!= 1.0")
        assert spec.matches("1.1")
        assert not spec.matches("1.0.0")

    def test_strict_operators(self):
        assert VersionSpec.parse("> 1.0").matches("1.0.1")
        assert not VersionSpec.parse("> 1.0").matches("1.0")
        assert VersionSpec.parse("<= 1.0").matches("1.0")

    def test_pessimistic(self):
        """``~> 3.0.20`` allows 3.0.x from 3.0.20 on."""
        spec = VersionSpec.parse("~> 3.0.20")
        assert spec.matches("3.0.20")
        assert spec.matches("3.0.25")
        assert not spec.matches("3.0.19")
        assert not spec.matches("3.1.0")

    def test_pessimistic_two_segments(self):
        spec = VersionSpec.parse("~> 2.2")
        assert spec.matches("2.9.1")
        assert not spec.matches("3.0")

    def test_empty_spec_matches_nothing(self):
        spec = VersionSpec.parse("")
        assert not spec
        assert not spec.matches("1.0")
        assert not VersionSpec().matches("0")

    @pytest.mark.parametrize("text", [">> 1.0", ">= 1.0,", "~> ", "=> 1.0", ">= abc"])
    def test_malformed_specs(self, text):
        with pytest.raises(MalformedSpec):
            VersionSpec.parse(text)

    def test_non_string_spec(self):
        with pytest.raises(MalformedSpec):
            VersionSpec.parse(1.0)

    def test_malformed_version_propagates(self):
        spec = VersionSpec.parse(">= 1.0")
        with pytest.raises(MalformedVersion):
            spec.matches("not-a-version")

    def test_contains(self):
        assert "1.5" in VersionSpec.parse(">= 1.0, < 2")
        assert "2.0" not in VersionSpec.parse(">= 1.0, < 2")

    def test_str(self):
        assert str(VersionSpec.parse(">=1.0,<2")) == ">= 1.0, < 2"
        assert str(VersionSpec.parse("~> 3.0.20")) == "~> 3.0.20"

    def test_equality(self):
        assert VersionSpec.parse(">= 1.0") == VersionSpec.parse(">=1.0")
        assert VersionSpec.parse(">= 1.0") != VersionSpec.parse("> 1.0")
