# dust/modules/repo.py
"""
repo.py - the local mirror of package source repositories.

One git checkout per tracked package, directly under repo_dir and named after
the package. A directory's existence is what makes a package "tracked".
Clones and pulls go through GitPython. A failing pre_clone hook stops the clone;
post_clone hooks run after it and their failures are only logged.
"""

from __future__ import annotations
import os
import shutil
from typing import List, Optional

from git import Repo
from git.exc import GitError

from dust.modules import logger as _logger
from dust.modules.config import config
from dust.modules.errors import AlreadyPresent, TransportFailure
from dust.modules.hooks import HookError


class RepositoryStore:
    def __init__(self, repo_dir: Optional[str] = None, git_url: Optional[str] = None, hooks=None):
        self.repo_dir = os.path.abspath(os.path.expanduser(repo_dir)) if repo_dir \
            else config.getpath("paths", "repo_dir", fallback="~/.dust")
        self.git_url = git_url or config.get("remote", "git_url", fallback="https://aur.archlinux.org/%s.git")
        self.hooks = hooks
        self.log = _logger.Logger("repo")

    def ensure_root(self) -> str:
        os.makedirs(self.repo_dir, exist_ok=True)
        return self.repo_dir

    def path_for(self, name: str) -> str:
        return os.path.join(self.repo_dir, name)

    def url_for(self, name: str) -> str:
        return self.git_url % name if "%s" in self.git_url else self.git_url.rstrip("/") + f"/{name}.git"

    def exists(self, name: str) -> bool:
        return os.path.isdir(self.path_for(name))

    def list_packages(self) -> List[str]:
        if not os.path.isdir(self.repo_dir):
            return []
        return sorted(d for d in os.listdir(self.repo_dir)
                      if not d.startswith(".") and os.path.isdir(os.path.join(self.repo_dir, d)))

    def is_empty(self) -> bool:
        return not self.list_packages()

    # -----------------------
    # git operations
    # -----------------------
    def clone(self, name: str) -> bool:
        """
        Clone the package's repository. Returns git's own verdict: False when
        a pre_clone hook or git fails. Whether the directory really exists
        afterwards is left to the caller. An existing entry is never overwritten.
        """
        self.ensure_root()
        path = self.path_for(name)
        if os.path.exists(path):
            raise AlreadyPresent(f"{path} already exists")
        url = self.url_for(name)
        if not self._run_hooks("pre_clone", name, path):
            return False
        self.log.info(f"Cloning {url} into {path}")
        try:
            Repo.clone_from(url, path)
        except (GitError, OSError) as e:
            self.log.error(f"Clone of {name} failed: {e}")
            return False
        if not os.path.isdir(path):
            self.log.warning(f"Clone of {name} reported success but {path} does not exist")
            return True
        self._run_hooks("post_clone", name, path)
        return True

    def pull(self, name: str):
        path = self.path_for(name)
        try:
            repo = Repo(path)
            repo.remotes.origin.pull()
        except (GitError, OSError, AttributeError) as e:
            raise TransportFailure(f"git pull failed for {name}: {e}") from e
        self.log.debug(f"Pulled {name}")

    def delete(self, name: str):
        path = self.path_for(name)
        if os.path.isdir(path):
            shutil.rmtree(path)
            self.log.info(f"Removed local repository {path}")

    def _run_hooks(self, stage: str, name: str, path: str) -> bool:
        if self.hooks is None:
            return True
        try:
            self.hooks.run_hooks(stage, {"name": name}, path)
        except HookError as e:
            self.log.error(f"{stage} hook failed for {name}: {e}")
            return False
        return True
