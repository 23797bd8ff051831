import os

# must happen before any dust module reads its configuration
os.environ["DUST_CONFIG"] = os.path.join(os.path.dirname(os.path.abspath(__file__)), "dust-test.conf")

import pytest

from dust.modules.errors import TransportFailure
from dust.modules.repo import RepositoryStore
from dust.modules.rpc import RemotePackageRecord
from dust.modules.srcinfo import strip_constraint


def write_srcinfo(pkg_dir, pkgver="1.0", pkgrel="1", depends=(), makedepends=()):
    lines = ["pkgbase = pkg", f"\tpkgver = {pkgver}"]
    if pkgrel is not None:
        lines.append(f"\tpkgrel = {pkgrel}")
    lines += [f"\tmakedepends = {d}" for d in makedepends]
    lines += [f"\tdepends = {d}" for d in depends]
    lines += ["", "pkgname = pkg", ""]
    with open(os.path.join(pkg_dir, ".SRCINFO"), "w", encoding="utf-8") as fh:
        fh.write("\n".join(lines))


class FakeClient:
    """Remote repository: name -> declared dependency list (None allowed)."""

    def __init__(self, packages=None, failing=()):
        self.packages = dict(packages or {})
        self.failing = set(failing)
        self.queries = []

    def query(self, name):
        name = strip_constraint(name)
        self.queries.append(name)
        if name in self.failing:
            raise TransportFailure(f"cannot reach remote for {name}")
        if name not in self.packages:
            return RemotePackageRecord.missing(name)
        return RemotePackageRecord(name=name, exists=True, dependencies=tuple(self.packages[name] or ()))

    def search(self, term):
        return [n for n in self.packages if term in n]


class FakeOracle:
    def __init__(self, installed=None, foreign=()):
        self.installed = dict(installed or {})
        self.foreign = set(foreign)
        self.lookups = []
        self.removed = []

    def installed_version(self, name):
        self.lookups.append(name)
        return self.installed.get(name)

    def is_installed(self, name):
        return self.installed_version(name) is not None

    def list_foreign(self):
        return set(self.foreign)

    def remove(self, name):
        self.removed.append(name)
        self.installed.pop(name, None)


class FakeStore(RepositoryStore):
    """Real directories under tmp_path; git replaced by directory creation."""

    def __init__(self, repo_dir, fail_clone=(), no_dir=(), fail_pull=(), upstream=None):
        super().__init__(repo_dir=str(repo_dir), git_url="https://example.invalid/%s.git")
        self.fail_clone = set(fail_clone)
        self.no_dir = set(no_dir)
        self.fail_pull = set(fail_pull)
        # name -> (pkgver, pkgrel) written to .SRCINFO on pull
        self.upstream = dict(upstream or {})
        self.cloned = []
        self.pulled = []
        self.deleted = []

    def add_entry(self, name, pkgver="1.0", pkgrel="1", depends=(), manifest=True, srcinfo=True):
        path = self.path_for(name)
        os.makedirs(path, exist_ok=True)
        if manifest:
            with open(os.path.join(path, "PKGBUILD"), "w", encoding="utf-8") as fh:
                fh.write(f"pkgname={name}\npkgver={pkgver}\n")
        if srcinfo:
            write_srcinfo(path, pkgver, pkgrel, depends)
        return path

    def clone(self, name):
        self.cloned.append(name)
        if name in self.fail_clone:
            return False
        if name in self.no_dir:
            return True
        self.ensure_root()
        self.add_entry(name)
        return True

    def pull(self, name):
        self.pulled.append(name)
        if name in self.fail_pull:
            raise TransportFailure(f"git pull failed for {name}")
        if name in self.upstream:
            pkgver, pkgrel = self.upstream[name]
            write_srcinfo(self.path_for(name), pkgver, pkgrel)

    def delete(self, name):
        self.deleted.append(name)
        super().delete(name)


class FakeBuilder:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.built = []

    def build(self, pkg_dir):
        name = os.path.basename(pkg_dir)
        self.built.append(name)
        return name not in self.failing


class FakePrompter:
    """Answers questions from a queue; an empty queue answers with default."""

    def __init__(self, answers=(), default=""):
        self.answers = list(answers)
        self.default = default
        self.questions = []
        self.audited = []
        self.shown = []

    def show(self, title, names):
        self.shown.append((title, list(names)))

    def ask(self, question):
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return self.default

    def audit(self, manifest):
        self.audited.append(manifest)


@pytest.fixture
def store(tmp_path):
    return FakeStore(tmp_path / "repo")


@pytest.fixture
def oracle():
    return FakeOracle()
