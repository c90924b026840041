"""Worktree discovery and lifecycle service for git-pj."""

import git
from pathlib import Path
from typing import Optional, List, Union

from git_pj.constants import WORKTREES_DIR_SUFFIX
from git_pj.exceptions import GitOperationError, NotAGitRepositoryError
from git_pj.models.worktree import GitWorktree, WorktreeList
from git_pj.logging_config import get_logger

logger = get_logger(__name__)

GITDIR_PREFIX = "gitdir: "
HEADS_PREFIX = "refs/heads/"


def parse_worktree_porcelain(output: str) -> List[GitWorktree]:
    """Parse the output of ``git worktree list --porcelain``.

    Format::

        worktree /path/to/main
        HEAD abc123
        branch refs/heads/main

        worktree /path/to/feature
        HEAD def456
        detached

    The first non-bare entry is the main worktree. Bare entries are dropped
    since they have no working tree. A record is emitted once it has both a
    path and a HEAD commit.
    """
    worktrees: List[GitWorktree] = []
    current: dict = {}

    def flush():
        if current.get("path") is None or current.get("commit") is None:
            return
        if current.get("bare"):
            logger.debug(f"Skipping bare worktree entry {current['path']}")
            return
        worktrees.append(
            GitWorktree(
                path=current["path"],
                branch=current.get("branch"),
                commit=current["commit"],
                is_main=not worktrees,
                locked=current.get("locked", False),
                prunable=current.get("prunable", False),
            )
        )

    for line in output.splitlines():
        if line.startswith("worktree "):
            flush()
            current = {"path": Path(line[len("worktree "):])}
        elif line.startswith("HEAD "):
            current["commit"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):]
            if branch_ref.startswith(HEADS_PREFIX):
                current["branch"] = branch_ref[len(HEADS_PREFIX):]
            else:
                current["branch"] = branch_ref  # Other refs are kept verbatim
        elif line == "bare":
            current["bare"] = True
        elif line == "locked" or line.startswith("locked "):
            current["locked"] = True
        elif line == "prunable" or line.startswith("prunable "):
            current["prunable"] = True
        elif line == "detached":
            current["branch"] = None

    # Last entry has no following "worktree" line
    flush()
    return worktrees


def is_linked_worktree(directory: Union[str, Path]) -> bool:
    """A linked worktree has a ``.git`` file; the main worktree has a ``.git`` directory."""
    return (Path(directory) / ".git").is_file()


def resolve_main_repo(worktree_dir: Union[str, Path]) -> Optional[Path]:
    """Get the main repository path for a worktree directory.

    A main worktree resolves to itself. A linked worktree's ``.git`` file
    reads ``gitdir: <main>/.git/worktrees/<name>``, and the main repository
    is three levels above that gitdir. Returns None when ``.git`` is missing
    or the file does not point into a ``worktrees`` directory.
    """
    worktree_dir = Path(worktree_dir)
    git_path = worktree_dir / ".git"

    if git_path.is_dir():
        return worktree_dir

    if not git_path.is_file():
        return None

    try:
        content = git_path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {git_path}: {e}")
        return None

    if not content.startswith(GITDIR_PREFIX):
        logger.debug(f"Malformed .git file at {git_path}: {content!r}")
        return None

    gitdir = Path(content[len(GITDIR_PREFIX):].strip())
    if not gitdir.is_absolute():
        gitdir = worktree_dir / gitdir

    # <main>/.git/worktrees/<name> -> <main>/.git/worktrees -> <main>/.git -> <main>
    if len(gitdir.parts) < 4 or gitdir.parent.name != "worktrees":
        logger.debug(f".git file at {git_path} does not point at a worktree admin dir: {gitdir}")
        return None
    return gitdir.parent.parent.parent


def find_repo_root(directory: Union[str, Path]) -> Optional[Path]:
    """Nearest directory at or above ``directory`` that has a ``.git`` entry."""
    directory = Path(directory).resolve()
    for candidate in (directory, *directory.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def default_worktree_path(repo_dir: Union[str, Path], branch: str) -> Path:
    """``<parent>/<repo>.worktrees/<branch>`` with ``/`` in the branch replaced by ``-``."""
    repo_dir = Path(repo_dir)
    repo_name = repo_dir.name or "repo"
    sanitized_branch = branch.replace("/", "-")
    return repo_dir.parent / f"{repo_name}{WORKTREES_DIR_SUFFIX}" / sanitized_branch


class WorktreeService:
    """Service for managing the worktrees of one repository."""

    def __init__(self, repo_dir: Union[str, Path]):
        """Initialize the worktree service.

        Args:
            repo_dir: Path to the repository (main or linked worktree)
        """
        self.repo_dir = Path(repo_dir)

    def _get_repo(self) -> git.Repo:
        """Open the repository, raising NotAGitRepositoryError if it is not one."""
        try:
            return git.Repo(self.repo_dir)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise NotAGitRepositoryError(str(self.repo_dir))

    def list_worktrees(self) -> Optional[WorktreeList]:
        """List all worktrees of the repository.

        Returns:
            WorktreeList, or None if git fails or reports no worktrees
        """
        try:
            repo = self._get_repo()
            output = repo.git.worktree("list", "--porcelain")
        except NotAGitRepositoryError as e:
            logger.debug(f"Could not list worktrees: {e}")
            return None
        except git.exc.GitCommandError as e:
            logger.debug(f"git worktree list failed in {self.repo_dir}: {e}")
            return None

        worktrees = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktrees)} worktrees in {self.repo_dir}")
        if not worktrees:
            return None

        return WorktreeList(main=worktrees[0], linked=worktrees[1:])

    def add_worktree(self, branch: str, path: Optional[Union[str, Path]] = None, create_branch: bool = False) -> Path:
        """Add a worktree for ``branch``.

        Args:
            branch: Branch to check out, or to create when ``create_branch`` is set
            path: Worktree directory, defaults to ``<repo>.worktrees/<branch>`` beside the repo
            create_branch: Create the branch (``-b``) instead of checking out an existing one

        Returns:
            Path of the new worktree

        Raises:
            GitOperationError: with git's stderr when ``git worktree add`` fails
        """
        worktree_path = Path(path) if path else default_worktree_path(self.repo_dir, branch)

        if create_branch:
            args = ["add", "-b", branch, str(worktree_path)]
        else:
            args = ["add", str(worktree_path), branch]

        repo = self._get_repo()
        try:
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            error = GitOperationError.from_command_error("worktree add", e, branch)
            logger.error(f"Failed to add worktree at {worktree_path}: {error.message}")
            raise error

        logger.info(f"Added worktree for {branch} at {worktree_path}")
        return worktree_path

    def remove_worktree(self, path: Union[str, Path], force: bool = False) -> None:
        """Remove the worktree at ``path``.

        Args:
            path: Path to the worktree directory
            force: Remove even if the worktree has uncommitted changes

        Raises:
            GitOperationError: with git's stderr when ``git worktree remove`` fails
        """
        args = ["remove"]
        if force:
            args.append("--force")
        args.append(str(path))

        repo = self._get_repo()
        try:
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            error = GitOperationError.from_command_error("worktree remove", e, str(path))
            logger.error(f"Failed to remove worktree at {path}: {error.message}")
            raise error

        logger.info(f"Removed worktree at {path}")

    def prune_worktrees(self) -> str:
        """Prune administrative entries of worktrees deleted out-of-band.

        Returns:
            git's verbose report, empty when there was nothing to prune

        Raises:
            GitOperationError: with git's stderr when ``git worktree prune`` fails
        """
        repo = self._get_repo()
        try:
            # prune -v reports on stderr
            _, stdout, stderr = repo.git.worktree("prune", "-v", with_extended_output=True)
        except git.exc.GitCommandError as e:
            error = GitOperationError.from_command_error("worktree prune", e)
            logger.error(f"Failed to prune worktrees: {error.message}")
            raise error

        report = "\n".join(part for part in (stdout.strip(), stderr.strip()) if part)
        logger.info("Pruned worktree metadata" if report else "No worktree metadata to prune")
        return report

    def is_linked_worktree(self) -> bool:
        return is_linked_worktree(self.repo_dir)

    def resolve_main_repo(self) -> Optional[Path]:
        return resolve_main_repo(self.repo_dir)
