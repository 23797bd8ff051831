# dust/modules/migrate.py
"""
migrate.py - start tracking packages that were installed without dust.

Clones the repository of already-installed foreign packages so later updates
can find them. Runs the resolver in migrating mode: no dependency walk, no
install plan, and packages the remote repository does not know are skipped
without a word.
"""

from __future__ import annotations
from typing import Iterable, Optional

from dust.modules import logger as _logger
from dust.modules.errors import FatalPrecondition
from dust.modules.resolver import AcquireResult, TraversalContext

ALL = "all"


class MigrateError(FatalPrecondition):
    pass


class MigrationManager:
    def __init__(self, resolver, client, oracle, store):
        self.resolver = resolver
        self.client = client
        self.oracle = oracle
        self.store = store
        self.log = _logger.Logger("migrate")

    def migrate(self, names: Optional[Iterable[str]] = None, sink=None) -> AcquireResult:
        """names: None, [] or ["all"] migrates every foreign package."""
        names = [n for n in (names or []) if n]
        if not names or names == [ALL]:
            return self.migrate_all(sink=sink)
        for name in names:
            self._check(name)
        return self._run(names, sink)

    def migrate_all(self, sink=None) -> AcquireResult:
        foreign = sorted(self.oracle.list_foreign())
        self.log.info(f"Migrating {len(foreign)} foreign package(s)")
        return self._run(foreign, sink)

    def _check(self, name: str):
        if self.store.exists(name):
            raise MigrateError(f"{name} has already been migrated")
        if not self.oracle.is_installed(name):
            raise MigrateError(f"{name} is not installed on your system. "
                               f"Only installed packages can be migrated")
        if not self.client.query(name).exists:
            raise MigrateError(f"{name} is not a remote repository package. "
                               f"Only remote repository packages can be migrated")

    def _run(self, names, sink) -> AcquireResult:
        ctx = TraversalContext(is_migrating=True)
        result = self.resolver.acquire(names, ctx=ctx, sink=sink)
        for name in result.cloned:
            self.log.info(f"Migrated {name}", to_history=True)
        return result
