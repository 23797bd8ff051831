# dust/modules/srcinfo.py
"""
srcinfo.py - readers for the metadata shipped in each package directory.

 - PKGBUILD: the build manifest handed to makepkg (only its presence matters here)
 - .SRCINFO: "key = value" lines; pkgver/pkgrel give the declared version and
   depends lines give the runtime dependencies.
"""

from __future__ import annotations
import os
import re
from typing import Dict, List, Optional

from dust.modules.errors import InconsistentState
from dust.modules.version import combine

BUILD_MANIFEST = "PKGBUILD"
SRCINFO = ".SRCINFO"

_CONSTRAINT = re.compile(r"[<>=].*$")
_WHITESPACE = re.compile(r"\s+")


class SrcinfoError(InconsistentState):
    pass


def strip_constraint(ref: str) -> str:
    """'foo>=1.2' -> 'foo'. Constraints are dropped, never evaluated."""
    return _CONSTRAINT.sub("", ref.strip())


def manifest_path(pkg_dir: str) -> str:
    return os.path.join(pkg_dir, BUILD_MANIFEST)


def srcinfo_path(pkg_dir: str) -> str:
    return os.path.join(pkg_dir, SRCINFO)


def _read_lines(path: str) -> List[str]:
    if not os.path.isfile(path):
        raise SrcinfoError(f"Can not resolve a non existing file {path}")
    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        return fh.read().splitlines()


def read_fields(path: str) -> Dict[str, str]:
    """First value of every key, whitespace removed from the value."""
    fields: Dict[str, str] = {}
    for line in _read_lines(path):
        if "=" not in line or line.lstrip().startswith("#"):
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key and key not in fields:
            fields[key] = _WHITESPACE.sub("", value)
    return fields


def read_version(path: str) -> Optional[str]:
    """Combined "[epoch:]pkgver[-pkgrel]" declared in a .SRCINFO."""
    fields = read_fields(path)
    pkgver = fields.get("pkgver")
    if not pkgver:
        return None
    return combine(pkgver, fields.get("pkgrel"), fields.get("epoch"))


def read_depends(path: str) -> List[str]:
    """Names from 'depends =' lines, in file order, constraints stripped."""
    deps = []
    for line in _read_lines(path):
        line = _WHITESPACE.sub("", line)
        if not line.startswith("depends="):
            continue
        dep = strip_constraint(line[len("depends="):])
        if dep:
            deps.append(dep)
    return deps
