"""Utility functions for git-pj.

This package provides utility modules:
- files: locked, atomic JSON reads and writes
- fuzzy: fuzzy scoring and ranking for repository search
- shell: handing the terminal to a shell in another directory
"""

from .files import atomic_write_json, locked_read_json, acquire_file_lock
from .fuzzy import fuzzy_score, fuzzy_rank
from .shell import launch_shell, resolve_shell

__all__ = [
    # Files
    "atomic_write_json",
    "locked_read_json",
    "acquire_file_lock",
    # Fuzzy
    "fuzzy_score",
    "fuzzy_rank",
    # Shell
    "launch_shell",
    "resolve_shell",
]
