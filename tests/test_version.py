"""Tests for package version comparison."""

import pytest

from dust.modules.version import Version, combine, parse_evr, rpmvercmp, vercmp


class TestVercmp:
    @pytest.mark.parametrize("a, b, expected", [
        ("1.2-1", "1.1-3", 1),
        ("1.0", "1.0", 0),
        ("1.0", "1.0.1", -1),
        ("1.0a", "1.0", -1),
        ("1.0alpha", "1.0beta", -1),
        ("1.0", "1.0rc1", 1),
        ("1.010", "1.9", 1),
        ("1.001", "1.1", 0),
        ("1:1.0", "2.0", 1),
        ("0:1.0", "1.0", 0),
        ("2.0-1", "2.0-2", -1),
        ("2.0", "2.0-5", 0),
        ("1.0.a", "1.0a", 1),
        ("r1234.abcdef", "r1235.aaaaaa", -1),
    ])
    def test_ordering(self, a, b, expected):
        assert vercmp(a, b) == expected

    def test_is_antisymmetric(self):
        pairs = [("1.2-1", "1.1-3"), ("1.0a", "1.0"), ("1:0.1", "9.9"), ("1.0..1", "1.0.1")]
        for a, b in pairs:
            assert vercmp(a, b) == -vercmp(b, a)

    def test_numeric_segment_beats_alpha(self):
        assert rpmvercmp("1.1", "1.a") == 1
        assert rpmvercmp("1.a", "1.1") == -1


class TestParseEvr:
    def test_full(self):
        assert parse_evr("2:1.4.2-3") == ("2", "1.4.2", "3")

    def test_no_epoch_no_release(self):
        assert parse_evr("1.4.2") == ("0", "1.4.2", None)

    def test_release_split_on_last_dash(self):
        assert parse_evr("1.0-beta-2") == ("0", "1.0-beta", "2")


class TestCombine:
    def test_with_release(self):
        assert combine("1.2", "3") == "1.2-3"

    def test_without_release(self):
        assert combine("1.2", "") == "1.2"
        assert combine("1.2", None) == "1.2"

    def test_with_epoch(self):
        assert combine("2.0", "1", "1") == "1:2.0-1"
        assert combine("2.0", None, "2") == "2:2.0"
        assert combine("2.0", "1", "") == "2.0-1"


class TestVersion:
    def test_ordering_operators(self):
        assert Version("1.2-1") > Version("1.1-3")
        assert Version("1.0") == Version("1.0")
        assert Version("1.0") <= "1.0.1"
        assert sorted([Version("1.10"), Version("1.9"), Version("1.0a")]) == \
            [Version("1.0a"), Version("1.9"), Version("1.10")]

    def test_from_parts(self):
        v = Version.from_parts("3.1", "2")
        assert str(v) == "3.1-2"
        assert v.pkgver == "3.1"
        assert v.pkgrel == "2"
        assert v.epoch == "0"
