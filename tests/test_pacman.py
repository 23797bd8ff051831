"""Tests for the installed-package oracle."""

from unittest.mock import MagicMock, patch

import pytest

from dust.modules.errors import TransportFailure
from dust.modules.pacman import PackageOracle


def completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def oracle():
    return PackageOracle(pacman="pacman", sudo="sudo")


class TestInstalled:
    def test_installed_version(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", return_value=completed(stdout="yay 12.3.5-1\n")) as run:
            assert oracle.installed_version("yay") == "12.3.5-1"
        assert run.call_args[0][0] == ["pacman", "-Q", "yay"]

    def test_not_installed(self, oracle):
        with patch("dust.modules.pacman.subprocess.run",
                   return_value=completed(1, stderr="error: package 'nope' was not found")):
            assert oracle.installed_version("nope") is None
            assert not oracle.is_installed("nope")

    def test_constraint_is_stripped(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", return_value=completed(stdout="foo 1.3-1\n")) as run:
            assert oracle.is_installed("foo>=1.2")
        assert run.call_args[0][0] == ["pacman", "-Q", "foo"]

    def test_missing_pacman_binary(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", side_effect=FileNotFoundError("pacman")):
            with pytest.raises(TransportFailure):
                oracle.installed_version("yay")


class TestForeign:
    def test_lists_foreign_names(self, oracle):
        out = "yay 12.3.5-1\nspotify 1:1.2.31-1\n"
        with patch("dust.modules.pacman.subprocess.run", return_value=completed(stdout=out)):
            assert oracle.list_foreign() == {"yay", "spotify"}

    def test_no_foreign_packages(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", return_value=completed(1)):
            assert oracle.list_foreign() == set()


class TestRemove:
    def test_runs_privileged_removal(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", return_value=completed()) as run:
            oracle.remove("yay")
        assert run.call_args[0][0] == ["sudo", "pacman", "-Rsc", "yay", "--noconfirm"]

    def test_failure_raises(self, oracle):
        with patch("dust.modules.pacman.subprocess.run", return_value=completed(1, stderr="target not found")):
            with pytest.raises(TransportFailure, match="target not found"):
                oracle.remove("yay")
