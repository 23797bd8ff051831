# dust/modules/resolver.py
"""
resolver.py - fetch a package and, transitively, the dependencies the base
system is missing; produce the InstallPlan for the run.

Walk (depth-first, explicit stack, dependencies in declared order):
 1. query the remote repository
 2. not there     -> skipped silently when migrating, advisory when it is a
                     dependency (makepkg will pull it from the distribution),
                     "not found" otherwise. Never fatal.
 3. already cloned -> skipped. This is the visited-set of the walk: a package
                     present on disk is never cloned or descended into again,
                     so dependency cycles terminate.
 4. clone          -> on failure the node and its subtree are dropped; on
                     success the package is planned (not when migrating).
 5. dependencies   -> constraint suffix stripped, installed ones reported as
                     satisfied, the rest visited as dependencies.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from dust.modules import logger as _logger
from dust.modules.errors import AlreadyPresent, Diagnostics, Kind, TransportFailure
from dust.modules.plan import InstallPlan
from dust.modules.srcinfo import strip_constraint


@dataclass
class TraversalContext:
    """State owned by a single run; a fresh one is made per top-level call."""
    is_dependency: bool = False
    is_migrating: bool = False
    # presentation only: print the DEPENDENCIES heading once per requested package
    dependency_heading_shown: bool = False


@dataclass
class AcquireResult:
    plan: InstallPlan
    diagnostics: Diagnostics
    cloned: List[str] = field(default_factory=list)


@dataclass
class _Frame:
    ref: str
    is_dependency: bool
    parent: Optional[str] = None
    check_installed: bool = False
    depth: int = 0


class DependencyResolver:
    def __init__(self, client, oracle, store, max_depth: Optional[int] = None):
        self.client = client
        self.oracle = oracle
        self.store = store
        self.max_depth = max_depth
        self.log = _logger.Logger("resolver")

    def acquire(self, names: Iterable[str], ctx: Optional[TraversalContext] = None,
                sink=None) -> AcquireResult:
        """
        Process each requested name in order. Names are not de-duplicated: a
        repeated name simply hits the "already cloned" skip the second time.
        sink, if given, is called with every Diagnostic as it is produced.
        """
        ctx = ctx or TraversalContext()
        result = AcquireResult(plan=InstallPlan(), diagnostics=Diagnostics(self.log, sink))

        for ref in names:
            ctx.dependency_heading_shown = False
            stack = [_Frame(ref=ref, is_dependency=ctx.is_dependency)]
            while stack:
                frame = stack.pop()
                deps = self._visit(frame, ctx, result)
                # reversed so the first declared dependency is handled first
                for dep in reversed(deps):
                    stack.append(_Frame(ref=dep, is_dependency=True, parent=strip_constraint(frame.ref),
                                        check_installed=True, depth=frame.depth + 1))
        return result

    def _visit(self, frame: _Frame, ctx: TraversalContext, result: AcquireResult) -> List[str]:
        name = strip_constraint(frame.ref)
        diags = result.diagnostics
        plan = result.plan

        if frame.check_installed:
            try:
                installed = self.oracle.is_installed(name)
            except TransportFailure as e:
                diags.emit(Kind.FAILURE, name, f"Could not check whether {name} is installed: {e}")
                return []
            if installed:
                diags.emit(Kind.PKGGOOD, name, f"{name} installed")
                return []

        try:
            record = self.client.query(name)
        except TransportFailure as e:
            diags.emit(Kind.FAILURE, name, f"Could not query {name}: {e}")
            return []

        if not record.exists:
            if ctx.is_migrating:
                # migrated packages' dependencies are already on the system
                return []
            if frame.is_dependency:
                diags.emit(Kind.DEFERRED, name,
                           f"{name} not in the remote repository. makepkg will install it with pacman")
            else:
                diags.emit(Kind.MISSING, name,
                           f"{name} is not in the remote repository. Use pacman to search the official repositories")
            return []

        if self.store.exists(name):
            diags.emit(Kind.PKGSKIP, name, f"{name} already exists in local repository")
            if frame.parent is not None:
                plan.add_edge(frame.parent, name)
            return []

        diags.emit(Kind.CLONING, name, name)
        try:
            cloned = self.store.clone(name)
        except AlreadyPresent as e:
            diags.emit(Kind.PKGSKIP, name, str(e))
            return []
        if not cloned:
            diags.emit(Kind.FAILURE, name, f"Failed to clone Git repository for {name}")
            return []
        if not self.store.exists(name):
            diags.emit(Kind.PROBLEM, name, f"An unknown error occurred. {name} not downloaded")
            return []
        diags.emit(Kind.SUCCESS, name, f"{name} successfully cloned Git repository")
        result.cloned.append(name)

        if ctx.is_migrating:
            return []

        plan.add(name)
        if frame.parent is not None:
            plan.add_edge(frame.parent, name)

        deps = [d for d in record.dependencies if d and strip_constraint(d)]
        if not deps:
            return []
        if self.max_depth is not None and frame.depth >= self.max_depth:
            diags.emit(Kind.ERROR, name,
                       f"Dependency depth limit ({self.max_depth}) reached at {name}; dependencies not followed")
            return []
        if not ctx.dependency_heading_shown:
            ctx.dependency_heading_shown = True
            diags.emit(Kind.HEADING, name, "DEPENDENCIES")
        return deps
