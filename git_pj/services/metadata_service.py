"""Metadata store for tracked repositories."""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from git_pj.constants import CURRENT_METADATA_VERSION, LEGACY_METADATA_VERSIONS, METADATA_FILE_NAME
from git_pj.exceptions import GitURIParseError, MetadataError
from git_pj.logging_config import get_logger
from git_pj.models.remote import GitIdentity, GitProtocol
from git_pj.models.repo import RepositoryEntity, repo_directory
from git_pj.services.git.remote import parse_git_uri
from git_pj.utils.files import atomic_write_json, locked_read_json
from git_pj.utils.fuzzy import fuzzy_rank

logger = get_logger(__name__)

# Protocol spellings found in older metadata files
LEGACY_PROTOCOLS = {
    "SSH": GitProtocol.SSH,
    "ssh": GitProtocol.SSH,
    "HTTP": GitProtocol.HTTP,
    "HTTPS": GitProtocol.HTTP,
    "http": GitProtocol.HTTP,
    "https": GitProtocol.HTTP,
}


@dataclass
class MetadataStore:
    """Ordered collection of tracked repositories."""

    version: str = CURRENT_METADATA_VERSION
    repos: List[RepositoryEntity] = field(default_factory=list)

    def has_repo(self, candidate: RepositoryEntity) -> bool:
        """Whether a repo with the same hostname, user, repo and root is tracked."""
        return any(repo.same_repo(candidate) for repo in self.repos)

    def find_repo(self, candidate: RepositoryEntity) -> Optional[RepositoryEntity]:
        for repo in self.repos:
            if repo.same_repo(candidate):
                return repo
        return None

    def add_repo(self, entity: RepositoryEntity) -> "MetadataStore":
        """Append ``entity``. Callers check has_repo first."""
        self.repos.append(entity)
        return self

    def remove_repo(self, candidate: RepositoryEntity) -> int:
        """Remove every repo matching ``candidate``; returns how many were removed."""
        before = len(self.repos)
        self.repos = [repo for repo in self.repos if not repo.same_repo(candidate)]
        removed = before - len(self.repos)
        logger.debug(f"Removed {removed} entr{'y' if removed == 1 else 'ies'} for {candidate.identity.slug}")
        return removed

    def deduplicate(self) -> int:
        """Keep the first repo per directory, preserving order; returns how many were dropped."""
        seen = set()
        unique = []
        for repo in self.repos:
            key = Path(repo.directory)
            if key in seen:
                logger.debug(f"Dropping duplicate entry for {repo.directory}")
                continue
            seen.add(key)
            unique.append(repo)
        dropped = len(self.repos) - len(unique)
        self.repos = unique
        return dropped

    def list_repos(self) -> List[RepositoryEntity]:
        return list(self.repos)

    def search(self, query: str) -> List[RepositoryEntity]:
        """Repos whose directory fuzzy-matches ``query``, best match first."""
        ranked = fuzzy_rank(query, [str(repo.directory) for repo in self.repos])
        return [self.repos[idx] for idx, _ in ranked]

    def find_by_directory(self, directory: Union[str, Path]) -> Optional[RepositoryEntity]:
        """Repo whose directory is ``directory`` or contains it."""
        target = Path(directory).resolve()
        for repo in self.repos:
            repo_dir = Path(repo.directory).resolve()
            if target == repo_dir or repo_dir in target.parents:
                return repo
        return None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "repos": [repo.to_dict() for repo in self.repos],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MetadataStore":
        return cls(
            version=data["version"],
            repos=[RepositoryEntity.from_dict(repo) for repo in data.get("repos", [])],
        )


def _parse_timestamp(value) -> datetime:
    """Parse a stored timestamp, falling back to now for missing or unreadable values."""
    if not value:
        return datetime.now(timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits; some writers store 9
    if "." in text:
        head, _, tail = text.partition(".")
        digits = len(tail) - len(tail.lstrip("0123456789"))
        fraction = tail[:digits][:6].ljust(6, "0")
        text = f"{head}.{fraction}{tail[digits:]}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unreadable timestamp {value!r}, using now")
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _upgrade_legacy_repo(entry, default_root: Path, with_host: bool) -> Optional[dict]:
    """Map one legacy repo entry onto the current entry shape."""
    if isinstance(entry, str):
        entity = RepositoryEntity.from_uri(entry, default_root, with_host)
        return entity.to_dict()

    if not isinstance(entry, dict):
        raise ValueError(f"unexpected repo entry {entry!r}")

    if "identity" in entry:
        raw_identity = entry["identity"]
    else:
        raw_identity = entry.get("git_uri", {})
    if isinstance(raw_identity, str):
        raw_identity = {"uri": raw_identity}

    if all(raw_identity.get(key) for key in ("hostname", "user", "repo", "uri")):
        protocol = LEGACY_PROTOCOLS.get(str(raw_identity.get("protocol")))
        if protocol is None:
            protocol = parse_git_uri(raw_identity["uri"]).protocol
        identity = GitIdentity(
            hostname=raw_identity["hostname"],
            user=raw_identity["user"],
            repo=raw_identity["repo"],
            protocol=protocol,
            uri=raw_identity["uri"],
        )
    else:
        identity = parse_git_uri(raw_identity.get("uri") or entry.get("uri", ""))

    root = Path(entry.get("root") or default_root)
    directory = entry.get("directory") or entry.get("dir") or repo_directory(root, identity, with_host)
    return {
        "identity": identity.to_dict(),
        "directory": str(directory),
        "root": str(root),
        "created_at": _parse_timestamp(entry.get("created_at") or entry.get("create_time")).isoformat(),
        "last_opened_at": _parse_timestamp(entry.get("last_opened_at") or entry.get("last_open_time")).isoformat(),
    }


def upgrade_metadata(data: Dict, default_root: Union[str, Path], with_host: bool = True) -> Dict:
    """Bring a metadata document up to the current schema.

    Unversioned and v1 documents are mapped entry by entry. Entries that
    cannot be mapped are dropped with a warning.

    Raises:
        MetadataError: for documents of an unknown version
    """
    if not isinstance(data, dict):
        raise MetadataError("Metadata file must hold an object")

    version = data.get("version")
    if version == CURRENT_METADATA_VERSION:
        return data
    if version not in LEGACY_METADATA_VERSIONS:
        raise MetadataError(f"Unsupported metadata version '{version}' (expected '{CURRENT_METADATA_VERSION}')")

    logger.info(f"Upgrading {version or 'unversioned'} metadata to {CURRENT_METADATA_VERSION}")
    repos = []
    for entry in data.get("repos", []):
        try:
            repos.append(_upgrade_legacy_repo(entry, Path(default_root), with_host))
        except (GitURIParseError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dropping unreadable legacy repo entry {entry!r}: {e}")
    return {"version": CURRENT_METADATA_VERSION, "repos": repos}


class MetadataService:
    """Loads and saves the metadata store as JSON."""

    def __init__(self, app_dir: Union[str, Path], default_root: Union[str, Path], with_host: bool = True):
        """Initialize the metadata service.

        Args:
            app_dir: Directory holding the metadata file
            default_root: Root assumed for legacy entries that do not record one
            with_host: Layout assumed for legacy entries that do not record a directory
        """
        self.metadata_file = Path(app_dir) / METADATA_FILE_NAME
        self.default_root = Path(default_root)
        self.with_host = with_host

    def load(self) -> MetadataStore:
        """Load the store; a missing file is created empty."""
        if not self.metadata_file.exists():
            logger.debug(f"No metadata file at {self.metadata_file}, creating an empty store")
            store = MetadataStore()
            self.save(store)
            return store

        try:
            data = locked_read_json(self.metadata_file)
        except json.JSONDecodeError as e:
            raise MetadataError(f"Invalid JSON in metadata file {self.metadata_file}: {e}")

        upgraded = upgrade_metadata(data, self.default_root, self.with_host)
        try:
            store = MetadataStore.from_dict(upgraded)
        except (KeyError, TypeError, ValueError) as e:
            raise MetadataError(f"Invalid metadata file {self.metadata_file}: {e}")

        if upgraded is not data:
            self.save(store)
        logger.debug(f"Loaded {len(store.repos)} repos from {self.metadata_file}")
        return store

    def save(self, store: MetadataStore) -> None:
        atomic_write_json(self.metadata_file, store.to_dict())
        logger.debug(f"Saved {len(store.repos)} repos to {self.metadata_file}")
