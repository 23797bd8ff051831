# dust/modules/errors.py
"""
errors.py - exception hierarchy and per-package diagnostics.

Engines never let a single package's failure abort its siblings: collaborators
raise the exceptions below, and the engines turn them into Diagnostic records
which are logged and handed to the caller. Only FatalPrecondition (and its
subclasses) is allowed to end a whole invocation.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DustError(Exception):
    pass


class FatalPrecondition(DustError):
    """Invalid request shape or unusable state; terminates the invocation."""
    pass


class PackageNotFound(DustError):
    pass


class AlreadyPresent(DustError):
    pass


class TransportFailure(DustError):
    """A query, clone, pull or external command failed."""
    pass


class InconsistentState(DustError):
    pass


class UserAbandoned(DustError):
    pass


class Kind(Enum):
    CLONING = "cloning"
    SUCCESS = "success"
    MISSING = "missing"
    DEFERRED = "deferred"
    PKGSKIP = "pkgskip"
    PKGGOOD = "pkggood"
    FAILURE = "failure"
    PROBLEM = "problem"
    HEADING = "heading"
    UPDATE = "update"
    CURRENT = "current"
    ERROR = "error"
    INSTALLED = "installed"
    NOT_INSTALLED = "not-installed"
    ABANDONED = "abandoned"
    REMOVED = "removed"


LABELS = {
    Kind.CLONING: "CLONING",
    Kind.SUCCESS: "SUCCESS",
    Kind.MISSING: "MISSING",
    Kind.DEFERRED: "MISSING",
    Kind.PKGSKIP: "PKGSKIP",
    Kind.PKGGOOD: "PKGGOOD",
    Kind.FAILURE: "FAILURE",
    Kind.PROBLEM: "PROBLEM",
    Kind.HEADING: "DEPENDENCIES",
    Kind.UPDATE: "*UPDATE",
    Kind.CURRENT: "CURRENT",
    Kind.ERROR: "ERROR",
    Kind.INSTALLED: "INSTALLED",
    Kind.NOT_INSTALLED: "NOT INSTALLED",
    Kind.ABANDONED: "ABANDONED",
    Kind.REMOVED: "REMOVED",
}

# Log level each diagnostic is written at
LEVELS = {
    Kind.SUCCESS: "success",
    Kind.UPDATE: "success",
    Kind.MISSING: "warning",
    Kind.DEFERRED: "warning",
    Kind.PKGSKIP: "warning",
    Kind.ABANDONED: "warning",
    Kind.NOT_INSTALLED: "warning",
    Kind.FAILURE: "error",
    Kind.PROBLEM: "error",
    Kind.ERROR: "error",
}


@dataclass(frozen=True)
class Diagnostic:
    kind: Kind
    package: Optional[str]
    message: str

    @property
    def label(self) -> str:
        return LABELS[self.kind]

    @property
    def level(self) -> str:
        return LEVELS.get(self.kind, "info")

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class Diagnostics(list):
    """Ordered diagnostics of one run, optionally forwarded as they arrive."""

    def __init__(self, log=None, sink=None):
        super().__init__()
        self.log = log
        self.sink = sink

    def emit(self, kind: Kind, package: Optional[str], message: str) -> Diagnostic:
        diag = Diagnostic(kind, package, message)
        self.append(diag)
        if self.log is not None:
            self.log.log(diag.level, str(diag))
        if self.sink is not None:
            self.sink(diag)
        return diag

    def of_kind(self, kind: Kind):
        return [d for d in self if d.kind is kind]

    def packages(self, kind: Kind):
        return [d.package for d in self if d.kind is kind]
