"""Hand the terminal over to an interactive shell."""
import os
import shutil
from pathlib import Path
from typing import NoReturn, Optional

from git_pj.logging_config import get_logger

logger = get_logger(__name__)

FALLBACK_SHELL = "/bin/sh"


def resolve_shell(shell: Optional[str] = None) -> str:
    """Pick the shell to launch: explicit setting, then $SHELL, then /bin/sh."""
    candidate = shell or os.environ.get("SHELL") or FALLBACK_SHELL
    if os.path.isabs(candidate):
        return candidate
    return shutil.which(candidate) or FALLBACK_SHELL


def launch_shell(directory: Path, shell: Optional[str] = None) -> NoReturn:
    """Replace the current process with a shell rooted at ``directory``.

    A child process cannot change its parent shell's working directory, so
    "jumping" into a repo means becoming a new shell there. Standard streams
    are inherited. Does not return on success; raises OSError if the
    directory or shell cannot be used.
    """
    shell_path = resolve_shell(shell)
    logger.debug(f"Launching {shell_path} in {directory}")
    os.chdir(directory)
    os.execvp(shell_path, [shell_path])
