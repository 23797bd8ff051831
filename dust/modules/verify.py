# dust/modules/verify.py
"""
verify.py - read-only check that a package's dependencies are installed.

Two sources for the dependency list:
 - remote: the remote repository's declared Depends
 - local:  depends= lines of the tracked package's .SRCINFO
Nothing is cloned, pulled or deleted here.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dust.modules import logger as _logger
from dust.modules import srcinfo as _srcinfo
from dust.modules.errors import Diagnostics, FatalPrecondition, Kind, PackageNotFound, TransportFailure

MODE_REMOTE = "remote"
MODE_LOCAL = "local"


class VerifyError(FatalPrecondition):
    pass


@dataclass
class VerifyReport:
    package: str
    mode: str
    diagnostics: Diagnostics
    found: bool = True
    dependencies: List[Tuple[str, bool]] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return [name for name, installed in self.dependencies if not installed]

    @property
    def satisfied(self) -> bool:
        return self.found and not self.missing


class DependencyVerifier:
    def __init__(self, client, oracle, store):
        self.client = client
        self.oracle = oracle
        self.store = store
        self.log = _logger.Logger("verify")

    def verify_remote(self, name: str, sink=None) -> VerifyReport:
        report = VerifyReport(package=name, mode=MODE_REMOTE, diagnostics=Diagnostics(self.log, sink))
        try:
            record = self.client.query(name).require()
        except TransportFailure as e:
            report.found = False
            report.diagnostics.emit(Kind.FAILURE, name, str(e))
            return report
        except PackageNotFound as e:
            report.found = False
            report.diagnostics.emit(Kind.ERROR, name, str(e))
            return report
        self._check(report, [_srcinfo.strip_constraint(d) for d in record.dependencies])
        return report

    def verify_local(self, name: str, sink=None) -> VerifyReport:
        if not self.store.exists(name):
            self._explain_untracked(name)

        pkg_dir = self.store.path_for(name)
        path = _srcinfo.srcinfo_path(pkg_dir)
        if not os.path.isfile(path):
            raise VerifyError(f".SRCINFO does not exist in {pkg_dir}")

        report = VerifyReport(package=name, mode=MODE_LOCAL, diagnostics=Diagnostics(self.log, sink))
        self._check(report, _srcinfo.read_depends(path))
        return report

    def _explain_untracked(self, name: str):
        if not self.oracle.is_installed(name):
            raise VerifyError(f"{name} is not installed on the base system")
        if not self.client.query(name).exists:
            raise VerifyError(f"{name} is not a remote repository package")
        raise VerifyError(f"{name} is installed but not tracked by dust. "
                          f"To migrate it run: dust migrate {name}")

    def _check(self, report: VerifyReport, deps: List[str]):
        for dep in deps:
            if not dep:
                continue
            installed = self.oracle.is_installed(dep)
            report.dependencies.append((dep, installed))
            if installed:
                report.diagnostics.emit(Kind.INSTALLED, dep, dep)
            else:
                report.diagnostics.emit(Kind.NOT_INSTALLED, dep, dep)
