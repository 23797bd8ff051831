# dust/modules/cli.py
"""
Command line for dust.
- Uses rich for colored labels, headings and tables.
- Every subcommand keeps the one/two letter alias of the classic flags
  (dust i pkg, dust u, dust vl pkg, ...).

Usage examples:
  dust install yay            # download, audit and install yay and its missing dependencies
  dust update                 # check every tracked package for updates
  dust update yay             # check one package
  dust search yay             # search the remote repository
  dust query                  # list tracked packages
  dust verify-local yay       # are the .SRCINFO depends installed?
  dust verify-remote yay      # are the remote Depends installed?
  dust migrate                # track every installed foreign package
  dust migrate yay            # track one
  dust remove yay             # uninstall and forget
"""

from __future__ import annotations
import argparse
import sys
import traceback
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from dust import __version__
from dust.modules import logger as _logger
from dust.modules.build import Builder, ConsolePrompter, Installer, STATUS_BUILD_FAILED, \
    STATUS_MISSING_MANIFEST, is_yes
from dust.modules.config import config
from dust.modules.errors import Diagnostic, DustError, FatalPrecondition, Kind
from dust.modules.hooks import HookManager
from dust.modules.migrate import MigrationManager
from dust.modules.pacman import PackageOracle
from dust.modules.remove import Remover
from dust.modules.repo import RepositoryStore
from dust.modules.resolver import DependencyResolver
from dust.modules.rpc import MetadataClient
from dust.modules.search import PackageSearch
from dust.modules.upgrade import UpgradeManager
from dust.modules.verify import DependencyVerifier

LOG = _logger.Logger("cli")

STYLES = {
    Kind.CLONING: "yellow",
    Kind.SUCCESS: "green",
    Kind.MISSING: "red",
    Kind.DEFERRED: "dark_orange",
    Kind.PKGSKIP: "red",
    Kind.PKGGOOD: "green",
    Kind.FAILURE: "red",
    Kind.PROBLEM: "red",
    Kind.UPDATE: "yellow",
    Kind.CURRENT: "green",
    Kind.ERROR: "red",
    Kind.INSTALLED: "green",
    Kind.NOT_INSTALLED: "red",
    Kind.ABANDONED: "yellow",
    Kind.REMOVED: "red",
}

# short flag -> subcommand
ALIASES = {
    "install": ["i"],
    "update": ["u"],
    "search": ["s"],
    "query": ["q"],
    "remove": ["r"],
    "migrate": ["m"],
    "verify-local": ["vl"],
    "verify-remote": ["vr"],
}


def make_console(no_color: bool, quiet: bool = False) -> Console:
    if no_color:
        return Console(color_system=None, force_terminal=False, quiet=quiet)
    return Console(quiet=quiet)


def require_name(name: Optional[str]) -> str:
    if not name:
        raise FatalPrecondition("Package name required. Enter 'dust --help' for more info")
    return name


class CLI:
    def __init__(self, console: Console, client=None, oracle=None, store=None,
                 builder=None, prompter=None, hooks=None):
        self.console = console
        self.hooks = hooks if hooks is not None else HookManager()
        self.client = client or MetadataClient()
        self.oracle = oracle or PackageOracle()
        self.store = store or RepositoryStore(hooks=self.hooks)
        self.builder = builder or Builder()
        self.prompter = prompter or ConsolePrompter(console=console)
        self.resolver = DependencyResolver(self.client, self.oracle, self.store)

    # -----------------------
    # output
    # -----------------------
    def show(self, diag: Diagnostic):
        if diag.kind is Kind.HEADING:
            self.console.print()
            self.console.print("[bold]DEPENDENCIES[/bold]")
            self.console.print()
            return
        style = STYLES.get(diag.kind, "white")
        self.console.print(f"[{style}]{diag.label}:[/{style}] {escape(diag.message)}")

    def heading(self, text: str):
        self.console.print(f"[bold]{escape(text)}[/bold]")
        self.console.print()

    def _installer(self, remove_on_decline: bool) -> Installer:
        return Installer(self.store, builder=self.builder, prompter=self.prompter,
                         hooks=self.hooks, remove_on_decline=remove_on_decline)

    def _finish_install(self, report) -> int:
        failed = report.by_status(STATUS_BUILD_FAILED) + report.by_status(STATUS_MISSING_MANIFEST)
        return 1 if failed else 0

    # -----------------------
    # install
    # -----------------------
    def cmd_install(self, args: argparse.Namespace) -> int:
        names = [require_name(n) for n in (args.packages or [None])]
        self.store.ensure_root()
        result = self.resolver.acquire(names, sink=self.show)
        report = self._installer(remove_on_decline=True).install(result.plan, sink=self.show)
        self.console.print()
        return self._finish_install(report)

    # -----------------------
    # update
    # -----------------------
    def cmd_update(self, args: argparse.Namespace) -> int:
        self.heading("CHECKING FOR UPDATES")
        upgrader = UpgradeManager(self.oracle, self.store)
        result = upgrader.check_updates([args.package] if args.package else None, sink=self.show)
        report = self._installer(remove_on_decline=False).install(result.plan, sink=self.show)
        self.console.print()
        return self._finish_install(report)

    # -----------------------
    # search / query
    # -----------------------
    def cmd_search(self, args: argparse.Namespace) -> int:
        term = require_name(args.term)
        searcher = PackageSearch(self.client, self.store)
        names = searcher.search(term)
        if not names:
            self.console.print(f"[red]NO RESULTS:[/red] No results for \"[cyan]{escape(term)}[/cyan]\"")
            return 0
        self.heading("SEARCH RESULTS")
        for name in names:
            self.console.print(" ", searcher.highlight(name, term))
        self.console.print()
        return 0

    def cmd_query(self, args: argparse.Namespace) -> int:
        self.heading("INSTALLED PACKAGES")
        for name in PackageSearch(self.client, self.store).local():
            self.console.print(f"  [cyan]{escape(name)}[/cyan]")
        self.console.print()
        return 0

    # -----------------------
    # verify
    # -----------------------
    def _print_verify(self, report) -> int:
        if report.found and not report.dependencies:
            self.console.print(f"[red]{escape(report.package)} requires no dependencies[/red]")
        self.console.print()
        return 0 if report.satisfied else 1

    def cmd_verify_remote(self, args: argparse.Namespace) -> int:
        name = require_name(args.package)
        self.heading(f"VERIFYING DEPENDENCIES FOR {name}")
        verifier = DependencyVerifier(self.client, self.oracle, self.store)
        return self._print_verify(verifier.verify_remote(name, sink=self.show))

    def cmd_verify_local(self, args: argparse.Namespace) -> int:
        name = require_name(args.package)
        verifier = DependencyVerifier(self.client, self.oracle, self.store)
        self.heading(f"VERIFYING DEPENDENCIES FOR {name}")
        return self._print_verify(verifier.verify_local(name, sink=self.show))

    # -----------------------
    # migrate
    # -----------------------
    def cmd_migrate(self, args: argparse.Namespace) -> int:
        migrator = MigrationManager(self.resolver, self.client, self.oracle, self.store)
        self.store.ensure_root()
        if args.package:
            self.heading(f"MIGRATING {args.package} TO DUST")
            migrator.migrate([args.package], sink=self.show)
        else:
            self.heading("MIGRATING INSTALLED PACKAGES TO DUST")
            migrator.migrate_all(sink=self.show)
        self.console.print()
        return 0

    # -----------------------
    # remove
    # -----------------------
    def cmd_remove(self, args: argparse.Namespace) -> int:
        name = require_name(args.package)
        remover = Remover(self.oracle, self.store)
        remover.check(name)
        self.prompter.show("Proceed to remove the package?", [name])
        if not is_yes(self.prompter.ask("ENTER [y/N]"), default=False):
            self.console.print("Exit dust")
            return 0
        remover.remove(name, sink=self.show)
        self.console.print()
        return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="dust", description="Remote source-package helper")
    ap.add_argument("--version", action="version", version=f"dust {__version__}")
    ap.add_argument("--config", help="Configuration file to use")
    ap.add_argument("--repo-dir", help="Local repository directory (default ~/.dust)")
    ap.add_argument("--no-color", action="store_true", help="Disable colored output")
    ap.add_argument("--quiet", action="store_true", help="Do not show the version heading")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("install", aliases=ALIASES["install"],
                       help="Download and install packages and their dependencies")
    p.add_argument("packages", nargs="*")

    p = sub.add_parser("update", aliases=ALIASES["update"], help="Update one or all tracked packages")
    p.add_argument("package", nargs="?")

    p = sub.add_parser("search", aliases=ALIASES["search"], help="Search the remote repository")
    p.add_argument("term", nargs="?")

    sub.add_parser("query", aliases=ALIASES["query"], help="List packages tracked by dust")

    p = sub.add_parser("remove", aliases=ALIASES["remove"], help="Uninstall a tracked package")
    p.add_argument("package", nargs="?")

    p = sub.add_parser("migrate", aliases=ALIASES["migrate"],
                       help="Track installed foreign packages (all of them without a name)")
    p.add_argument("package", nargs="?")

    p = sub.add_parser("verify-local", aliases=ALIASES["verify-local"],
                       help="Verify dependencies declared in a tracked package's .SRCINFO")
    p.add_argument("package", nargs="?")

    p = sub.add_parser("verify-remote", aliases=ALIASES["verify-remote"],
                       help="Verify dependencies declared by the remote repository")
    p.add_argument("package", nargs="?")
    return ap


def canonical(cmd: str) -> str:
    for name, aliases in ALIASES.items():
        if cmd == name or cmd in aliases:
            return name
    return cmd


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.config:
        config.reload([args.config])
    if args.repo_dir:
        config.set("paths", "repo_dir", args.repo_dir)

    console = make_console(args.no_color)
    if not args.quiet:
        console.print(Panel(f"dust {__version__}", style="magenta", expand=False))

    handlers = {
        "install": "cmd_install",
        "update": "cmd_update",
        "search": "cmd_search",
        "query": "cmd_query",
        "remove": "cmd_remove",
        "migrate": "cmd_migrate",
        "verify-local": "cmd_verify_local",
        "verify-remote": "cmd_verify_remote",
    }
    try:
        cli = CLI(console)
        return getattr(cli, handlers[canonical(args.cmd)])(args)
    except DustError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        LOG.error(str(e))
        LOG.debug(traceback.format_exc())
        return 1
    except KeyboardInterrupt:
        console.print()
        console.print("[yellow]Interrupted[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
