"""Formatting utilities for git-pj.

- date: Date and time formatting
- worktree: Worktree names and state flags
"""

from .date import format_relative
from .worktree import (
    format_short_commit,
    format_worktree_flags,
    format_worktree_name_with_indent,
)

__all__ = [
    # Date
    "format_relative",
    # Worktree
    "format_short_commit",
    "format_worktree_flags",
    "format_worktree_name_with_indent",
]
