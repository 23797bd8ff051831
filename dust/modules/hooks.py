# dust/modules/hooks.py
import os
import subprocess
from typing import Callable, Dict, List, Optional

from dust.modules import logger
from dust.modules.config import config

STAGES = ("pre_clone", "post_clone", "pre_build", "post_build")


class HookError(Exception):
    pass


class HookManager:
    """
    Runs user hooks around clones and builds.
    - Shell commands come from the [hooks] section of the configuration,
      one comma-separated list per stage.
    - Python callables can be registered with register().
    Commands get DUST_PACKAGE and DUST_PKGDIR in their environment and run
    inside the package directory when it exists.
    """

    def __init__(self, dry_run: bool = False, commands: Optional[Dict[str, List[str]]] = None):
        self.hooks: Dict[str, List] = {}
        self.log = logger.Logger("hooks")
        self.dry_run = dry_run
        if commands is None:
            commands = {stage: config.getlist("hooks", stage) for stage in STAGES}
        for stage, cmds in commands.items():
            for cmd in cmds:
                self.register(stage, cmd)

    def register(self, stage: str, hook):
        """hook is a shell command string or a callable(package, pkg_dir)"""
        if stage not in STAGES:
            raise HookError(f"Unknown hook stage: {stage}")
        self.hooks.setdefault(stage, []).append(hook)
        self.log.debug(f"Hook registered for stage={stage}: {hook}")

    def run_hooks(self, stage: str, package: Dict, pkg_dir: Optional[str] = None):
        hooks = self.hooks.get(stage, [])
        if not hooks:
            return
        self.log.info(f"Running {len(hooks)} hook(s) for stage={stage} ({package.get('name')})")
        for hook in hooks:
            if callable(hook):
                self._execute_func(hook, package, pkg_dir)
            else:
                self._execute_command(hook, package, pkg_dir)

    def _execute_func(self, func: Callable, package: Dict, pkg_dir: Optional[str]):
        if self.dry_run:
            self.log.info(f"[DRY-RUN] Would run Python hook: {getattr(func, '__name__', func)}")
            return
        try:
            func(package, pkg_dir)
        except Exception as e:
            self.log.error(f"Python hook {func} failed: {e}")
            raise HookError(str(e)) from e

    def _execute_command(self, command: str, package: Dict, pkg_dir: Optional[str]):
        self.log.info(f"Running hook command: {command}")
        if self.dry_run:
            self.log.info(f"[DRY-RUN] Not executed: {command}")
            return

        env = os.environ.copy()
        env["DUST_PACKAGE"] = package.get("name") or ""
        if pkg_dir:
            env["DUST_PKGDIR"] = pkg_dir
        cwd = pkg_dir if pkg_dir and os.path.isdir(pkg_dir) else None

        try:
            subprocess.run(command, shell=True, check=True, env=env, cwd=cwd)
        except subprocess.CalledProcessError as e:
            self.log.error(f"Hook '{command}' failed: {e}")
            raise HookError(str(e)) from e

    def list_hooks(self) -> Dict[str, List[str]]:
        return {stage: [getattr(h, "__name__", h) for h in hooks] for stage, hooks in self.hooks.items()}
