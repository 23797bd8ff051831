"""Tests for migrating already-installed packages."""

import os

import pytest

from conftest import FakeClient, FakeOracle

from dust.modules.errors import Kind
from dust.modules.migrate import MigrateError, MigrationManager
from dust.modules.resolver import DependencyResolver


def make_manager(store, packages, installed=None, foreign=()):
    client = FakeClient(packages)
    oracle = FakeOracle(installed=installed, foreign=foreign)
    resolver = DependencyResolver(client, oracle, store)
    return MigrationManager(resolver, client, oracle, store), oracle


class TestMigrateAll:
    def test_remote_packages_gain_entries_others_skipped_silently(self, store):
        manager, _ = make_manager(store, {"a": ["dep-a"]}, foreign={"a", "b"})

        result = manager.migrate_all()

        assert os.path.isdir(store.path_for("a"))
        assert not os.path.exists(store.path_for("b"))
        assert not result.plan
        assert result.cloned == ["a"]
        assert {d.kind for d in result.diagnostics} == {Kind.CLONING, Kind.SUCCESS}
        assert all(d.package == "a" for d in result.diagnostics)

    def test_dependencies_are_not_followed(self, store):
        manager, oracle = make_manager(store, {"a": ["dep-a"], "dep-a": []}, foreign={"a"})

        manager.migrate_all()

        assert store.cloned == ["a"]
        assert oracle.lookups == []

    def test_no_names_means_all(self, store):
        manager, _ = make_manager(store, {"a": []}, foreign={"a"})

        assert manager.migrate().cloned == ["a"]
        assert manager.migrate(["all"]).cloned == []


class TestMigrateOne:
    def test_installed_remote_package(self, store):
        manager, _ = make_manager(store, {"a": ["x"]}, installed={"a": "1.0-1"})

        result = manager.migrate(["a"])

        assert store.cloned == ["a"]
        assert not result.plan

    def test_already_tracked_is_fatal(self, store):
        store.add_entry("a")
        manager, _ = make_manager(store, {"a": []}, installed={"a": "1.0-1"})

        with pytest.raises(MigrateError, match="already been migrated"):
            manager.migrate(["a"])

    def test_not_installed_is_fatal(self, store):
        manager, _ = make_manager(store, {"a": []})

        with pytest.raises(MigrateError, match="not installed"):
            manager.migrate(["a"])

    def test_not_remote_is_fatal(self, store):
        manager, _ = make_manager(store, {}, installed={"bash": "5.2-1"})

        with pytest.raises(MigrateError, match="not a remote"):
            manager.migrate(["bash"])
        assert store.cloned == []
