# dust/modules/build.py
"""
build.py - build and install planned packages.

 - Builder runs makepkg inside a package directory. Default flags -sirc:
   -s sync missing dependencies with pacman, -i install on success,
   -r remove build-time dependencies afterwards, -c clean the build files.
 - Installer walks an InstallPlan dependency-first. After one consent prompt
   for the whole plan, every package gets an audit prompt:
       Y / empty  show the PKGBUILD in the editor, then ask to continue
       N          build without auditing
       other      abandon this package
   A declined or abandoned package has its directory removed, unless the
   Installer was created with remove_on_decline=False (update runs, where the
   directory belongs to an installed package).
 - A failed build is reported and the walk continues; packages installed
   earlier in the same run stay installed. A failing pre_build hook counts
   as a failed build; post_build hook failures are only logged.
"""

from __future__ import annotations
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Console

from dust.modules import logger as _logger
from dust.modules import srcinfo as _srcinfo
from dust.modules.config import config
from dust.modules.errors import Diagnostics, Kind, UserAbandoned
from dust.modules.hooks import HookError

STATUS_INSTALLED = "installed"
STATUS_DECLINED = "declined"
STATUS_ABANDONED = "abandoned"
STATUS_MISSING_MANIFEST = "missing-manifest"
STATUS_BUILD_FAILED = "build-failed"


class InstallDeclined(UserAbandoned):
    """The user read the PKGBUILD and chose not to continue."""
    pass


def is_yes(answer: Optional[str], default: bool = True) -> bool:
    answer = (answer or "").strip().lower()
    if not answer:
        return default
    return answer.startswith("y")


def is_no(answer: Optional[str]) -> bool:
    return (answer or "").strip().lower().startswith("n")


class Builder:
    def __init__(self, makepkg: Optional[str] = None, flags: Optional[str] = None):
        self.makepkg = makepkg or config.get("system", "makepkg", fallback="makepkg")
        self.flags = flags if flags is not None else config.get("system", "makepkg_flags", fallback="-sirc")
        self.log = _logger.Logger("build")

    def command(self) -> List[str]:
        return shlex.split(self.makepkg) + shlex.split(self.flags)

    def build(self, pkg_dir: str) -> bool:
        cmd = self.command()
        self.log.info(f"Running {' '.join(cmd)} in {pkg_dir}")
        try:
            res = subprocess.run(cmd, cwd=pkg_dir)
        except OSError as e:
            self.log.error(f"Could not run {cmd[0]}: {e}")
            return False
        if res.returncode != 0:
            self.log.error(f"{cmd[0]} exited with {res.returncode} in {pkg_dir}")
            return False
        return True


class ConsolePrompter:
    """Interactive questions on the terminal; the editor shows the PKGBUILD."""

    def __init__(self, console: Optional[Console] = None, editor: Optional[str] = None):
        self.console = console or Console()
        self.editor = (editor or os.environ.get("VISUAL") or os.environ.get("EDITOR")
                       or config.get("system", "editor", fallback="nano"))
        self.log = _logger.Logger("prompt")

    def show(self, title: str, names: List[str]):
        self.console.print()
        self.console.print(title)
        if not names:
            return
        self.console.print()
        for name in names:
            self.console.print(f"  [cyan]{name}[/cyan]")
        self.console.print()

    def ask(self, question: str) -> str:
        return self.console.input(f"{question} ").strip()

    def audit(self, manifest: str):
        cmd = shlex.split(self.editor) + [manifest]
        try:
            subprocess.run(cmd)
        except OSError as e:
            self.log.error(f"Could not open editor {cmd[0]}: {e}")
            self.console.print(f"[red]Could not open editor {cmd[0]}: {e}[/red]")


@dataclass
class InstallReport:
    outcomes: List[Dict[str, Any]] = field(default_factory=list)
    diagnostics: Optional[Diagnostics] = None
    consented: bool = True

    def by_status(self, status: str) -> List[str]:
        return [o["package"] for o in self.outcomes if o["status"] == status]

    @property
    def ok(self) -> bool:
        return all(o["status"] == STATUS_INSTALLED for o in self.outcomes)


class Installer:
    def __init__(self, store, builder=None, prompter=None, hooks=None, remove_on_decline: bool = True):
        self.store = store
        self.builder = builder or Builder()
        self.prompter = prompter or ConsolePrompter()
        self.hooks = hooks
        self.remove_on_decline = remove_on_decline
        self.log = _logger.Logger("install")

    def install(self, plan, sink=None) -> InstallReport:
        report = InstallReport(diagnostics=Diagnostics(self.log, sink))
        if not plan:
            return report

        order = plan.install_order()
        self.prompter.show("Download and install the package(s)?", list(plan))
        if not is_yes(self.prompter.ask("ENTER [Y/n]")):
            report.consented = False
            for name in order:
                self._discard(name)
                report.outcomes.append(self._outcome(name, STATUS_DECLINED))
            return report

        for name in order:
            report.outcomes.append(self.install_one(name, report.diagnostics))
        return report

    def install_one(self, name: str, diags: Diagnostics) -> Dict[str, Any]:
        pkg_dir = self.store.path_for(name)
        manifest = _srcinfo.manifest_path(pkg_dir)
        if not os.path.isfile(manifest):
            diags.emit(Kind.ERROR, name, f"Can not resolve non existing PKGBUILD file. {pkg_dir}")
            return self._outcome(name, STATUS_MISSING_MANIFEST, "PKGBUILD missing")

        self.prompter.show(f"[cyan]INSTALLING {name}[/cyan]", [])
        try:
            self._review(name, manifest)
        except InstallDeclined as e:
            self._discard(name)
            diags.emit(Kind.ABANDONED, name, str(e))
            return self._outcome(name, STATUS_DECLINED)
        except UserAbandoned as e:
            self._discard(name)
            diags.emit(Kind.ABANDONED, name, str(e))
            return self._outcome(name, STATUS_ABANDONED)

        if not self._run_hooks("pre_build", name, pkg_dir):
            diags.emit(Kind.FAILURE, name, f"pre_build hook failed for {name}; not built")
            return self._outcome(name, STATUS_BUILD_FAILED, "pre_build hook failed")
        ok = self.builder.build(pkg_dir)
        if not ok:
            diags.emit(Kind.FAILURE, name, f"makepkg failed for {name}")
            return self._outcome(name, STATUS_BUILD_FAILED, "makepkg failed")
        self._run_hooks("post_build", name, pkg_dir)
        diags.emit(Kind.INSTALLED, name, f"{name} built and installed")
        self.log.info(f"Installed {name}", to_history=True)
        return self._outcome(name, STATUS_INSTALLED)

    def _review(self, name: str, manifest: str):
        answer = self.prompter.ask(f"Before installing {name}, audit the PKGBUILD file? [Y/N]")
        if is_no(answer):
            return
        if not is_yes(answer):
            raise UserAbandoned("Request abandoned")
        self.prompter.audit(manifest)
        if not is_yes(self.prompter.ask("Continue the installation? [Y/n]")):
            raise InstallDeclined(f"Installation of {name} declined")

    def _discard(self, name: str):
        if self.remove_on_decline:
            self.store.delete(name)

    def _run_hooks(self, stage: str, name: str, pkg_dir: str) -> bool:
        if self.hooks is None:
            return True
        try:
            self.hooks.run_hooks(stage, {"name": name}, pkg_dir)
        except HookError as e:
            self.log.error(f"{stage} hook failed for {name}: {e}")
            return False
        return True

    @staticmethod
    def _outcome(name: str, status: str, error: Optional[str] = None) -> Dict[str, Any]:
        return {"package": name, "status": status, "error": error}
