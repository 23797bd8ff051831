# dust/modules/rpc.py
"""
rpc.py - client for the remote repository's RPC interface.

 - info:   /rpc/?v=5&type=info&arg[]=<name>    -> existence + declared Depends
 - search: /rpc/?v=5&type=search&by=name&arg=<term>

No timeouts are applied; a stalled server stalls the run.
"""

from __future__ import annotations
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from dust.modules import logger as _logger
from dust.modules.config import config
from dust.modules.errors import PackageNotFound, TransportFailure
from dust.modules.srcinfo import strip_constraint


@dataclass(frozen=True)
class RemotePackageRecord:
    name: str
    exists: bool
    dependencies: Tuple[str, ...] = ()
    version: Optional[str] = None

    @classmethod
    def missing(cls, name: str) -> "RemotePackageRecord":
        return cls(name=name, exists=False)

    def require(self) -> "RemotePackageRecord":
        if not self.exists:
            raise PackageNotFound(f"{self.name} is not a remote repository package")
        return self


class MetadataClient:
    def __init__(self, base_url: Optional[str] = None, rpc_version: Optional[int] = None, opener=None):
        self.base_url = (base_url or config.get("remote", "base_url")).rstrip("/")
        self.rpc_version = rpc_version or config.getint("remote", "rpc_version", fallback=5)
        self.log = _logger.Logger("rpc")
        self._open = opener or urllib.request.urlopen

    # -----------------------
    # URLs
    # -----------------------
    def info_url(self, name: str) -> str:
        query = urllib.parse.urlencode({"v": self.rpc_version, "type": "info", "arg[]": name})
        return f"{self.base_url}/rpc/?{query}"

    def search_url(self, term: str) -> str:
        query = urllib.parse.urlencode({"v": self.rpc_version, "type": "search", "by": "name", "arg": term})
        return f"{self.base_url}/rpc/?{query}"

    def _fetch(self, url: str) -> Dict[str, Any]:
        self.log.debug(f"GET {url}")
        try:
            with self._open(url) as resp:
                payload = resp.read()
        except (urllib.error.URLError, OSError) as e:
            raise TransportFailure(f"Request to {url} failed: {e}") from e
        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise TransportFailure(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise TransportFailure(f"Unexpected response from {url}")
        if data.get("type") == "error":
            raise TransportFailure(f"Remote error for {url}: {data.get('error')}")
        return data

    # -----------------------
    # Queries
    # -----------------------
    def query(self, name: str) -> RemotePackageRecord:
        """Look up one package; the constraint suffix is never sent."""
        name = strip_constraint(name)
        data = self._fetch(self.info_url(name))
        results = data.get("results") or []
        if not results:
            self.log.debug(f"{name}: not in remote repository")
            return RemotePackageRecord.missing(name)

        info = results[0]
        # "Depends" may be absent, null or an empty list
        depends = info.get("Depends") or []
        return RemotePackageRecord(
            name=info.get("Name") or name,
            exists=True,
            dependencies=tuple(depends),
            version=info.get("Version"),
        )

    def exists(self, name: str) -> bool:
        return self.query(name).exists

    def search(self, term: str) -> List[str]:
        data = self._fetch(self.search_url(term))
        return [r.get("Name") for r in (data.get("results") or []) if r.get("Name")]
