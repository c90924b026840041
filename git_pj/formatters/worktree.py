"""Worktree formatting utilities."""

from pathlib import Path

from git_pj.constants import SYMBOL_LOCKED, SYMBOL_MISSING, SYMBOL_PRUNABLE
from git_pj.models.worktree import GitWorktree


def format_short_commit(commit: str) -> str:
    return commit[:8]


def format_worktree_flags(worktree: GitWorktree) -> str:
    """
    Format worktree state indicators.

    Args:
        worktree: Worktree to describe

    Returns:
        Compact flag string, e.g. "L P" for a locked, prunable worktree
    """
    flags = []
    if worktree.locked:
        flags.append(SYMBOL_LOCKED)
    if worktree.prunable:
        flags.append(SYMBOL_PRUNABLE)
    if not Path(worktree.path).exists():
        flags.append(SYMBOL_MISSING)
    return " ".join(flags)


def format_worktree_name_with_indent(worktree: GitWorktree) -> str:
    """Display name, indented under the main worktree for linked entries."""
    indent = "" if worktree.is_main else "  └─ "
    return f"{indent}{worktree.display_name}"
