"""Tests for .SRCINFO reading and constraint stripping."""

import pytest

from dust.modules.srcinfo import SrcinfoError, read_depends, read_fields, read_version, strip_constraint

SRCINFO = """\
pkgbase = yay
\tpkgdesc = Yet another yogurt
\tpkgver = 12.3.5
\tpkgrel = 1
\tmakedepends = go>=1.21
\tdepends = pacman>6.1
\tdepends = git
\tdepends_x86_64 = lib32-glibc
\toptdepends = sudo: privilege elevation

pkgname = yay
"""


@pytest.fixture
def srcinfo(tmp_path):
    path = tmp_path / ".SRCINFO"
    path.write_text(SRCINFO, encoding="utf-8")
    return str(path)


class TestStripConstraint:
    @pytest.mark.parametrize("ref", ["foo>=1.2", "foo", "foo=1.0", "foo<2", "foo>1", " foo<=3 "])
    def test_constraints_are_removed(self, ref):
        assert strip_constraint(ref) == "foo"

    def test_keeps_names_with_dashes_and_dots(self):
        assert strip_constraint("python-foo.bar>=2") == "python-foo.bar"


class TestReadSrcinfo:
    def test_version_combines_pkgver_and_pkgrel(self, srcinfo):
        assert read_version(srcinfo) == "12.3.5-1"

    def test_version_without_release(self, tmp_path):
        path = tmp_path / ".SRCINFO"
        path.write_text("pkgbase = x\n\tpkgver = 2.0\n", encoding="utf-8")
        assert read_version(str(path)) == "2.0"

    def test_version_carries_epoch(self, tmp_path):
        path = tmp_path / ".SRCINFO"
        path.write_text("pkgbase = x\n\tpkgver = 2.1\n\tpkgrel = 1\n\tepoch = 1\n", encoding="utf-8")
        assert read_version(str(path)) == "1:2.1-1"

    def test_fields_keep_first_value(self, srcinfo):
        fields = read_fields(srcinfo)
        assert fields["depends"] == "pacman>6.1"
        assert fields["pkgdesc"] == "Yetanotheryogurt"

    def test_only_plain_depends_lines(self, srcinfo):
        assert read_depends(srcinfo) == ["pacman", "git"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SrcinfoError):
            read_depends(str(tmp_path / ".SRCINFO"))
