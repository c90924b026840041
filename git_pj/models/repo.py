"""Repository entity model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from git_pj.constants import GITHUB_HOSTNAME
from git_pj.models.remote import GitIdentity


def _now() -> datetime:
    return datetime.now(timezone.utc)


def repo_directory(root: Union[str, Path], identity: GitIdentity, with_host: bool = True) -> Path:
    """Directory a repository lives in under ``root``.

    ``<root>/<hostname>/<user>/<repo>``, or ``<root>/<user>/<repo>`` for the
    flat layout.
    """
    root = Path(root)
    if with_host:
        return root / identity.hostname / identity.user / identity.repo
    return root / identity.user / identity.repo


@dataclass
class RepositoryEntity:
    """A repository tracked in the metadata store."""

    identity: GitIdentity
    directory: Path
    root: Path
    created_at: datetime = field(default_factory=_now)
    last_opened_at: datetime = field(default_factory=_now)

    @classmethod
    def from_uri(cls, uri: str, root: Union[str, Path], with_host: bool = True) -> "RepositoryEntity":
        """Build an entity from a raw remote URI.

        Raises:
            GitURIParseError: if ``uri`` is not a recognised git URI
        """
        from git_pj.services.git.remote import parse_git_uri

        identity = parse_git_uri(uri)
        return cls.from_identity(identity, root, with_host)

    @classmethod
    def from_identity(cls, identity: GitIdentity, root: Union[str, Path], with_host: bool = True) -> "RepositoryEntity":
        root = Path(root)
        return cls(
            identity=identity,
            directory=repo_directory(root, identity, with_host),
            root=root,
        )

    def same_repo(self, other: "RepositoryEntity") -> bool:
        """Whether both entities denote the same repository, ignoring protocol and URI text."""
        return (
            self.identity.hostname == other.identity.hostname
            and self.identity.user == other.identity.user
            and self.identity.repo == other.identity.repo
            and self.root == other.root
        )

    def update_open_time(self) -> None:
        self.last_opened_at = _now()

    def _github_base_url(self) -> Optional[str]:
        if self.identity.hostname == GITHUB_HOSTNAME:
            return f"https://{GITHUB_HOSTNAME}/{self.identity.user}/{self.identity.repo}"
        return None

    def get_home_url(self) -> Optional[str]:
        """Browse URL of the repository, or None for unsupported providers."""
        return self._github_base_url()

    def get_issue_url(self, issue: Optional[int] = None) -> Optional[str]:
        """URL of an issue, or of the issue listing when ``issue`` is None."""
        base_url = self._github_base_url()
        if base_url is None:
            return None
        if issue is None:
            return f"{base_url}/issues"
        return f"{base_url}/issues/{issue}"

    def get_pr_url(self, pr: Optional[int] = None) -> Optional[str]:
        """URL of a pull request, or of the pull request listing when ``pr`` is None."""
        base_url = self._github_base_url()
        if base_url is None:
            return None
        if pr is None:
            return f"{base_url}/pull"
        return f"{base_url}/pull/{pr}"

    def to_dict(self) -> dict:
        return {
            "identity": self.identity.to_dict(),
            "directory": str(self.directory),
            "root": str(self.root),
            "created_at": self.created_at.isoformat(),
            "last_opened_at": self.last_opened_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RepositoryEntity":
        return cls(
            identity=GitIdentity.from_dict(data["identity"]),
            directory=Path(data["directory"]),
            root=Path(data["root"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            last_opened_at=datetime.fromisoformat(data["last_opened_at"]),
        )
