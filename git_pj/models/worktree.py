"""Worktree data models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class GitWorktree:
    """A single git worktree."""

    path: Path
    branch: Optional[str]  # None = detached HEAD
    commit: str
    is_main: bool  # Is this the main working tree?
    locked: bool = False
    prunable: bool = False

    @property
    def display_name(self) -> str:
        """Branch name, with the main worktree marked and detached HEADs shown by short sha."""
        if self.is_main:
            return f"{self.branch or 'detached'} (main)"
        return self.branch or self.commit[:8]

    def __str__(self) -> str:
        """String representation of worktree."""
        return f"{self.display_name} @ {self.path}"


@dataclass
class WorktreeList:
    """All worktrees of one repository."""

    main: GitWorktree
    linked: List[GitWorktree] = field(default_factory=list)

    def all(self) -> List[GitWorktree]:
        """Main worktree first, then linked ones."""
        return [self.main, *self.linked]

    def has_linked(self) -> bool:
        return bool(self.linked)

    def count(self) -> int:
        return 1 + len(self.linked)

    def find(self, path: Path) -> Optional[GitWorktree]:
        """Worktree whose path resolves to ``path``, if any."""
        target = Path(path).resolve()
        for worktree in self.all():
            if Path(worktree.path).resolve() == target:
                return worktree
        return None
