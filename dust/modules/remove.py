# dust/modules/remove.py
"""
remove.py - uninstall a tracked package and forget it.

The package is removed from the base system through the package manager
(pacman -Rsc) and its directory is deleted from the local repository.
"""

from __future__ import annotations
from typing import Optional

from dust.modules import logger as _logger
from dust.modules.errors import Diagnostics, FatalPrecondition, Kind


class RemoveError(FatalPrecondition):
    pass


class Remover:
    def __init__(self, oracle, store):
        self.oracle = oracle
        self.store = store
        self.log = _logger.Logger("remove")

    def check(self, name: Optional[str]):
        if not name:
            raise FatalPrecondition("Package name required")
        if not self.store.exists(name):
            raise RemoveError(f"{name} is not tracked in {self.store.repo_dir}")

    def remove(self, name: str, sink=None) -> Diagnostics:
        """Caller is expected to have asked for consent already."""
        self.check(name)
        diags = Diagnostics(self.log, sink)
        self.oracle.remove(name)
        self.store.delete(name)
        diags.emit(Kind.REMOVED, name, name)
        self.log.info(f"Removed {name}", to_history=True)
        return diags
