# dust/modules/pacman.py
"""
pacman.py - what the base system already has installed.

Thin wrapper around the system package manager:
 - pacman -Q <name>   installed? which version?
 - pacman -Qm         foreign packages (not from the distribution repositories)
 - pacman -Rsc <name> uninstall, with dependencies no longer needed
"""

from __future__ import annotations
import shlex
import subprocess
from typing import List, Optional, Set

from dust.modules import logger as _logger
from dust.modules.config import config
from dust.modules.errors import TransportFailure
from dust.modules.srcinfo import strip_constraint


class PackageOracle:
    def __init__(self, pacman: Optional[str] = None, sudo: Optional[str] = None):
        self.pacman = shlex.split(pacman or config.get("system", "pacman", fallback="pacman"))
        self.sudo = shlex.split(sudo if sudo is not None else config.get("system", "sudo", fallback="sudo"))
        self.log = _logger.Logger("pacman")

    def _run(self, args: List[str], privileged: bool = False) -> subprocess.CompletedProcess:
        cmd = (self.sudo if privileged else []) + self.pacman + args
        self.log.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
        except OSError as e:
            raise TransportFailure(f"Could not run {cmd[0]}: {e}") from e

    def installed_version(self, name: str) -> Optional[str]:
        """Installed version string, or None if the package is not installed."""
        name = strip_constraint(name)
        res = self._run(["-Q", name])
        if res.returncode != 0:
            return None
        # output: "<name> <version>"
        parts = res.stdout.strip().split(None, 1)
        if len(parts) < 2:
            return None
        return parts[1].replace(" ", "")

    def is_installed(self, name: str) -> bool:
        return self.installed_version(name) is not None

    def list_foreign(self) -> Set[str]:
        res = self._run(["-Qm"])
        if res.returncode != 0:
            # pacman exits 1 when no foreign packages are installed
            if not res.stdout.strip():
                return set()
            raise TransportFailure(f"pacman -Qm failed: {res.stderr.strip()}")
        return {line.split()[0] for line in res.stdout.splitlines() if line.strip()}

    def remove(self, name: str):
        res = self._run(["-Rsc", name, "--noconfirm"], privileged=True)
        if res.returncode != 0:
            raise TransportFailure(f"Failed to remove {name}: {res.stderr.strip()}")
        self.log.info(f"Removed {name} from the base system", to_history=True)
