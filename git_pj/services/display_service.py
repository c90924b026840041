"""Display and formatting service for repositories and worktrees"""
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import List, Optional

from git_pj.constants import PREFIX_SUCCESS, PREFIX_WARNING, REPO_COLUMNS, WORKTREE_COLUMNS
from git_pj.formatters import (
    format_relative,
    format_short_commit,
    format_worktree_flags,
    format_worktree_name_with_indent,
)
from git_pj.logging_config import get_logger
from git_pj.models.repo import RepositoryEntity
from git_pj.models.worktree import WorktreeList

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False, debug: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self.debug_mode = debug

    def success(self, message: str) -> None:
        self.console.print(f"{PREFIX_SUCCESS} [green]{escape(message)}[/green]")

    def warn(self, message: str) -> None:
        self.console.print(f"{PREFIX_WARNING} [yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error: {escape(message)}[/red]")

    def info(self, message: str) -> None:
        self.console.print(escape(message))

    def display_repo_table(self, repos: List[RepositoryEntity]) -> None:
        """Display a table of tracked repositories."""
        if not repos:
            self.console.print("[dim]No repos tracked yet. Add one with `pj add <uri>`.[/dim]")
            return

        table = Table()
        for col in REPO_COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for repo in repos:
            style = None if repo.directory.exists() else "dim"
            table.add_row(
                escape(str(repo.directory)),
                repo.identity.protocol.value,
                escape(repo.identity.hostname),
                escape(repo.identity.user),
                escape(repo.identity.repo),
                escape(repo.identity.uri),
                format_relative(repo.last_opened_at),
                style=style,
            )

        self.console.print(table)
        if self.verbose:
            missing = sum(1 for repo in repos if not repo.directory.exists())
            self.console.print(f"\nTotal repos: {len(repos)}")
            if missing:
                self.console.print(f"Not cloned: {missing} (run `pj pull`)")

    def display_worktree_table(self, worktrees: WorktreeList) -> None:
        """Display the worktrees of one repository, main first."""
        table = Table()
        for col in WORKTREE_COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for worktree in worktrees.all():
            table.add_row(
                escape(format_worktree_name_with_indent(worktree)),
                escape(str(worktree.path)),
                format_short_commit(worktree.commit),
                format_worktree_flags(worktree),
                style="cyan" if worktree.is_main else None,
            )

        self.console.print(table)
        if self.verbose:
            self.console.print(f"\nTotal worktrees: {worktrees.count()}")
