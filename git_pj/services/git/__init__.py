"""Git-related services for git-pj."""

from .operations import GitOperations
from .remote import parse_git_uri, try_parse_git_uri
from .worktrees import (
    WorktreeService,
    parse_worktree_porcelain,
    is_linked_worktree,
    resolve_main_repo,
    find_repo_root,
    default_worktree_path,
)

__all__ = [
    "GitOperations",
    "WorktreeService",
    "parse_git_uri",
    "try_parse_git_uri",
    "parse_worktree_porcelain",
    "is_linked_worktree",
    "resolve_main_repo",
    "find_repo_root",
    "default_worktree_path",
]
