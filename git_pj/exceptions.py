"""Custom exceptions for git-pj"""

from typing import Optional


class GitPjError(Exception):
    """Base exception for all git-pj errors."""
    pass


class GitURIParseError(GitPjError):
    """Exception raised when a remote URI is not a recognised git URI."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Invalid git repo: {uri}")


class RepoNotFoundError(GitPjError):
    """Exception raised when a repository is not in the metadata store."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Repo {query} not found")


class RepoExistsError(GitPjError):
    """Exception raised when adding a repository that is already registered."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Repo {uri} already exists")


class WorktreeNotFoundError(GitPjError):
    """Exception raised when a path is not a worktree of the repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Worktree {path} not found")


class NotAGitRepositoryError(GitPjError):
    """Exception raised when a directory cannot be resolved to a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} is not inside a git repository")


class GitOperationError(GitPjError):
    """Exception raised when the git binary exits with a non-zero status."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)

    @classmethod
    def from_command_error(cls, operation: str, error, target: Optional[str] = None) -> "GitOperationError":
        """Build from a git.exc.GitCommandError, keeping git's stderr as the message."""
        stderr = (error.stderr if getattr(error, "stderr", None) else str(error)).strip()
        # GitPython prefixes captured stderr with "stderr: '...'"
        if stderr.startswith("stderr: "):
            stderr = stderr[len("stderr: "):].strip("'").strip()
        if not stderr:
            stderr = f"exit code {getattr(error, 'status', 'unknown')}"
        return cls(operation, target, stderr)


class MainWorktreeError(GitOperationError):
    """Exception raised when asked to remove the main worktree of a repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("worktree remove", path, "the main worktree cannot be removed")


class ConfigError(GitPjError):
    """Exception raised for unreadable or invalid configuration files."""
    pass


class MetadataError(GitPjError):
    """Exception raised when the metadata file has an unsupported schema."""
    pass
