# dust/modules/upgrade.py
"""
upgrade.py - find tracked packages with a newer version upstream.

For every tracked package (or just the one asked for):
 - .SRCINFO must exist in its directory, otherwise it is reported and skipped
 - the package must be installed; a tracked-but-uninstalled package is an
   inconsistency: reported, and its directory removed instead of planned
 - git pull, then pkgver[-pkgrel] from .SRCINFO is compared with the installed
   version; strictly newer goes into the plan, anything else is "current"
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from dust.modules import logger as _logger
from dust.modules import srcinfo as _srcinfo
from dust.modules.errors import Diagnostics, FatalPrecondition, InconsistentState, Kind, TransportFailure
from dust.modules.plan import InstallPlan
from dust.modules.version import vercmp


@dataclass
class UpdateResult:
    plan: InstallPlan
    diagnostics: Diagnostics
    removed: List[str] = field(default_factory=list)


class UpgradeManager:
    def __init__(self, oracle, store, remove_stale: bool = True):
        self.oracle = oracle
        self.store = store
        self.remove_stale = remove_stale
        self.log = _logger.Logger("upgrade")

    def check_updates(self, names: Optional[Iterable[str]] = None, sink=None) -> UpdateResult:
        if self.store.is_empty():
            raise FatalPrecondition("Your local repository is empty. Use 'dust migrate' to migrate packages")

        if names:
            names = list(names)
            for name in names:
                if not self.store.exists(name):
                    raise FatalPrecondition(f"{name} not a package in {self.store.repo_dir}")
        else:
            names = self.store.list_packages()

        result = UpdateResult(plan=InstallPlan(), diagnostics=Diagnostics(self.log, sink))
        for name in names:
            try:
                self._check_one(name, result)
            except (InconsistentState, TransportFailure) as e:
                result.diagnostics.emit(Kind.ERROR, name, str(e))
        return result

    def _check_one(self, name: str, result: UpdateResult):
        diags = result.diagnostics
        pkg_dir = self.store.path_for(name)
        srcinfo = _srcinfo.srcinfo_path(pkg_dir)
        if not os.path.isfile(srcinfo):
            raise _srcinfo.SrcinfoError(f"Can not resolve a non existing file .SRCINFO {pkg_dir}")

        installed = self.oracle.installed_version(name)
        if installed is None:
            diags.emit(Kind.ERROR, name, f"{name} is not installed but was requested for use")
            if self.remove_stale:
                self.store.delete(name)
                result.removed.append(name)
            return

        try:
            self.store.pull(name)
        except TransportFailure as e:
            diags.emit(Kind.FAILURE, name, str(e))
            return

        available = _srcinfo.read_version(srcinfo)
        if not available:
            raise InconsistentState(f"No pkgver declared in {srcinfo}")

        if vercmp(available, installed) > 0:
            result.plan.add(name)
            diags.emit(Kind.UPDATE, name, f"{name} {available}. Successfully downloaded build files.")
        else:
            diags.emit(Kind.CURRENT, name, f"{name} is up to date ({installed})")
