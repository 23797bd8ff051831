# dust/modules/version.py
"""
version.py - package version comparison.

Versions have the form [epoch:]pkgver[-pkgrel]. Ordering follows the system
package manager's vercmp:
 - epoch is compared first (missing epoch counts as 0)
 - then pkgver, segment by segment
 - then pkgrel, but only when both sides carry one

Segments are maximal runs of digits or of letters; anything else separates
them. Numeric segments beat alpha segments, numbers compare without leading
zeros, and a trailing alpha segment is older than no segment at all
(1.0a < 1.0) while a trailing numeric segment is newer (1.0.1 > 1.0).
"""

from __future__ import annotations
from functools import total_ordering
from typing import Optional, Tuple


def _isalnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _isalpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _isdigit(ch: str) -> bool:
    return ch in "0123456789"


def rpmvercmp(a: str, b: str) -> int:
    """Compare two plain version strings (no epoch, no release)."""
    if a == b:
        return 0

    i = j = 0
    la, lb = len(a), len(b)
    while i < la and j < lb:
        start_i, start_j = i, j
        while i < la and not _isalnum(a[i]):
            i += 1
        while j < lb and not _isalnum(b[j]):
            j += 1

        if i >= la or j >= lb:
            break

        # different separator lengths decide on their own
        if (i - start_i) != (j - start_j):
            return -1 if (i - start_i) < (j - start_j) else 1

        end_i, end_j = i, j
        if _isdigit(a[i]):
            while end_i < la and _isdigit(a[end_i]):
                end_i += 1
            while end_j < lb and _isdigit(b[end_j]):
                end_j += 1
            isnum = True
        else:
            while end_i < la and _isalpha(a[end_i]):
                end_i += 1
            while end_j < lb and _isalpha(b[end_j]):
                end_j += 1
            isnum = False

        seg_a, seg_b = a[i:end_i], b[j:end_j]

        # segments of different types: numeric is newer
        if not seg_b:
            return 1 if isnum else -1

        if isnum:
            seg_a = seg_a.lstrip("0")
            seg_b = seg_b.lstrip("0")
            if len(seg_a) != len(seg_b):
                return 1 if len(seg_a) > len(seg_b) else -1

        if seg_a != seg_b:
            return -1 if seg_a < seg_b else 1

        i, j = end_i, end_j

    rest_a, rest_b = a[i:], b[j:]
    if not rest_a and not rest_b:
        return 0

    # a remaining alpha string never beats an empty one
    if (not rest_a and not _isalpha(rest_b[0])) or (rest_a and _isalpha(rest_a[0])):
        return -1
    return 1


def parse_evr(evr: str) -> Tuple[str, str, Optional[str]]:
    """Split "epoch:version-release" into its three parts."""
    pos = 0
    while pos < len(evr) and _isdigit(evr[pos]):
        pos += 1

    if pos < len(evr) and evr[pos] == ":":
        epoch = evr[:pos] or "0"
        rest = evr[pos + 1:]
    else:
        epoch = "0"
        rest = evr

    if "-" in rest:
        version, release = rest.rsplit("-", 1)
    else:
        version, release = rest, None
    return epoch, version, release


def vercmp(a: str, b: str) -> int:
    """Return -1, 0 or 1 as a is older than, equal to, or newer than b."""
    if a == b:
        return 0
    epoch_a, ver_a, rel_a = parse_evr(a)
    epoch_b, ver_b, rel_b = parse_evr(b)

    ret = rpmvercmp(epoch_a, epoch_b)
    if ret == 0:
        ret = rpmvercmp(ver_a, ver_b)
        if ret == 0 and rel_a is not None and rel_b is not None:
            ret = rpmvercmp(rel_a, rel_b)
    return ret


def combine(pkgver: Optional[str], pkgrel: Optional[str], epoch: Optional[str] = None) -> str:
    """[epoch:]pkgver[-pkgrel], the form pacman reports installed versions in."""
    pkgver = (pkgver or "").strip()
    pkgrel = (pkgrel or "").strip()
    epoch = (epoch or "").strip()
    if epoch:
        pkgver = f"{epoch}:{pkgver}"
    if pkgrel:
        return f"{pkgver}-{pkgrel}"
    return pkgver


@total_ordering
class Version:
    __slots__ = ("raw",)

    def __init__(self, raw: str):
        self.raw = str(raw).strip()

    @classmethod
    def from_parts(cls, pkgver: Optional[str], pkgrel: Optional[str] = None) -> "Version":
        return cls(combine(pkgver, pkgrel))

    @property
    def epoch(self) -> str:
        return parse_evr(self.raw)[0]

    @property
    def pkgver(self) -> str:
        return parse_evr(self.raw)[1]

    @property
    def pkgrel(self) -> Optional[str]:
        return parse_evr(self.raw)[2]

    def compare(self, other) -> int:
        other_raw = other.raw if isinstance(other, Version) else str(other)
        return vercmp(self.raw, other_raw)

    def __eq__(self, other):
        if not isinstance(other, (Version, str)):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other):
        if not isinstance(other, (Version, str)):
            return NotImplemented
        return self.compare(other) < 0

    def __str__(self):
        return self.raw

    def __repr__(self):
        return f"Version({self.raw!r})"
