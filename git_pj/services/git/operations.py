"""Git operations service"""

import git
import os
from pathlib import Path
from typing import Iterator, Optional, Union

from git_pj.constants import WORKTREES_DIR_SUFFIX
from git_pj.exceptions import GitOperationError
from git_pj.logging_config import get_logger

logger = get_logger(__name__)


class GitOperations:
    """Clone, remote lookup and clone discovery."""

    def __init__(self, remote_name: str = "origin"):
        self.remote_name = remote_name

    def clone(self, uri: str, directory: Union[str, Path]) -> None:
        """Clone ``uri`` into ``directory``.

        Raises:
            GitOperationError: with git's stderr when the clone fails
        """
        logger.info(f"Cloning {uri} into {directory}")
        try:
            git.Repo.clone_from(uri, str(directory))
        except git.exc.GitCommandError as e:
            error = GitOperationError.from_command_error("clone", e, uri)
            logger.error(f"Failed to clone {uri}: {error.message}")
            raise error

    def get_remote_url(self, repo_dir: Union[str, Path]) -> Optional[str]:
        """``git config --get remote.<name>.url``, or None when unset or not a repo."""
        try:
            repo = git.Repo(repo_dir)
            url = repo.git.config("--get", f"remote.{self.remote_name}.url")
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            logger.debug(f"{repo_dir} is not a git repository: {e}")
            return None
        except git.exc.GitCommandError as e:
            # config --get exits 1 when the key is missing
            logger.debug(f"No {self.remote_name} remote in {repo_dir}: {e}")
            return None
        return url.strip() or None

    def find_clones(self, root: Union[str, Path]) -> Iterator[Path]:
        """Yield main clones under ``root``.

        A directory with a ``.git`` directory is a clone and is not descended
        into. Linked worktrees (``.git`` file) and ``*.worktrees`` directories
        are skipped.
        """
        root = Path(root)
        if not root.is_dir():
            logger.debug(f"Root {root} does not exist, nothing to scan")
            return

        for dirpath, dirnames, _ in os.walk(root):
            current = Path(dirpath)
            git_path = current / ".git"
            if git_path.is_dir():
                dirnames[:] = []
                yield current
                continue
            if git_path.is_file():
                logger.debug(f"Skipping linked worktree {current}")
                dirnames[:] = []
                continue
            dirnames[:] = sorted(
                name for name in dirnames
                if name != ".git" and not name.endswith(WORKTREES_DIR_SUFFIX)
            )
