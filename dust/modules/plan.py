# dust/modules/plan.py
"""
plan.py - the ordered list of packages a run wants built and installed.

Entries are kept in discovery order. A traversal discovers a package before
its dependencies, so dependencies sit *after* their dependents; install_order()
hands them back dependency-first. Edges recorded with add_edge() keep that
order correct even when a dependency was discovered through an earlier
branch of the walk (diamonds).
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Set


class InstallPlan:
    def __init__(self, names=None):
        self._entries: List[str] = []
        self._edges: Dict[str, Set[str]] = {}
        for name in names or []:
            self.add(name)

    def add(self, name: str) -> bool:
        """Append name; returns False if it was already planned."""
        if name in self._edges:
            return False
        self._entries.append(name)
        self._edges[name] = set()
        return True

    def add_edge(self, dependent: str, dependency: str):
        """Record that dependent needs dependency installed first."""
        if dependent in self._edges and dependency in self._edges and dependent != dependency:
            self._edges[dependent].add(dependency)

    def dependencies_of(self, name: str) -> Set[str]:
        return set(self._edges.get(name, ()))

    def remove(self, name: str):
        if name not in self._edges:
            return
        self._entries.remove(name)
        del self._edges[name]
        for deps in self._edges.values():
            deps.discard(name)

    def clear(self):
        self._entries.clear()
        self._edges.clear()

    def extend(self, other: "InstallPlan"):
        for name in other:
            self.add(name)
        for name in other:
            for dep in other.dependencies_of(name):
                self.add_edge(name, dep)

    def install_order(self) -> List[str]:
        """
        Dependency-first order. Among packages whose planned dependencies are
        already placed, the most recently discovered one goes first, which is
        plain reverse discovery order for a tree. A cycle is broken the same
        way, by taking the most recently discovered remaining package.
        """
        index = {name: i for i, name in enumerate(self._entries)}
        placed: Set[str] = set()
        remaining = list(self._entries)
        order: List[str] = []
        while remaining:
            ready = [n for n in remaining if self._edges[n] <= placed]
            pick = max(ready or remaining, key=index.__getitem__)
            order.append(pick)
            placed.add(pick)
            remaining.remove(pick)
        return order

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, name) -> bool:
        return name in self._edges

    def __repr__(self):
        return f"InstallPlan({self._entries!r})"
