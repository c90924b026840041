"""Core functionality for git-pj"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from git_pj.config import Config, get_app_dir
from git_pj.exceptions import (
    GitOperationError,
    GitPjError,
    MainWorktreeError,
    NotAGitRepositoryError,
    RepoExistsError,
    RepoNotFoundError,
    WorktreeNotFoundError,
)
from git_pj.logging_config import get_logger
from git_pj.models.repo import RepositoryEntity
from git_pj.models.worktree import WorktreeList
from git_pj.services.git import (
    GitOperations,
    WorktreeService,
    find_repo_root,
    resolve_main_repo,
    try_parse_git_uri,
)
from git_pj.services.metadata_service import MetadataService, MetadataStore

logger = get_logger(__name__)

URL_KINDS = ("home", "issue", "pr")


@dataclass
class ScanResult:
    """Outcome of scanning the roots for existing clones."""

    added: List[RepositoryEntity] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)
    duplicates_dropped: int = 0


@dataclass
class PullResult:
    """Outcome of cloning missing repositories."""

    cloned: List[RepositoryEntity] = field(default_factory=list)
    failed: List[Tuple[RepositoryEntity, GitPjError]] = field(default_factory=list)


class Workspace:
    """Tracked repositories under the configured roots, and their worktrees."""

    def __init__(
        self,
        config: Config,
        app_dir: Optional[Union[str, Path]] = None,
        git_ops: Optional[GitOperations] = None,
    ):
        """Initialize the workspace and load the metadata store.

        Args:
            config: Loaded configuration
            app_dir: Directory holding the metadata file (defaults to the app dir)
            git_ops: Git operations service (injectable for tests)
        """
        self.config = config
        self.app_dir = Path(app_dir) if app_dir else get_app_dir()
        self.git_ops = git_ops or GitOperations()
        self.metadata_service = MetadataService(self.app_dir, config.root, config.with_host)
        self.store: MetadataStore = self.metadata_service.load()

    def save(self) -> None:
        self.metadata_service.save(self.store)

    # Repositories

    def _resolve_root(self, root: Optional[Union[str, Path]] = None) -> Path:
        """Absolute form of ``root``, or the default root when none is given."""
        if not root:
            return self.config.root
        return Path(root).expanduser().resolve()

    def _entity_for(self, uri: str, root: Optional[Union[str, Path]] = None) -> RepositoryEntity:
        return RepositoryEntity.from_uri(uri, self._resolve_root(root), self.config.with_host)

    def add(self, uri: str, root: Optional[Union[str, Path]] = None) -> RepositoryEntity:
        """Clone ``uri`` into its directory under ``root`` and start tracking it.

        Raises:
            GitURIParseError: if ``uri`` is not a git URI
            RepoExistsError: if the repo is already tracked
            GitOperationError: if the clone fails
        """
        entity = self._entity_for(uri, root)
        if self.store.has_repo(entity):
            raise RepoExistsError(uri)

        entity.directory.parent.mkdir(parents=True, exist_ok=True)
        self.git_ops.clone(entity.identity.uri, entity.directory)

        self.store.add_repo(entity)
        self.save()
        logger.info(f"Added {entity.identity.slug} at {entity.directory}")
        return entity

    def get_repo(self, uri: str, root: Optional[Union[str, Path]] = None) -> RepositoryEntity:
        """Tracked entity for ``uri``, looked up under ``root`` or every configured root.

        Raises:
            GitURIParseError: if ``uri`` is not a git URI
            RepoNotFoundError: if no root tracks it
        """
        roots = [self._resolve_root(root)] if root else self.config.roots
        for candidate_root in roots:
            found = self.store.find_repo(self._entity_for(uri, candidate_root))
            if found is not None:
                return found
        raise RepoNotFoundError(uri)

    def remove(self, entity: RepositoryEntity) -> None:
        """Delete the repo's directory and stop tracking it."""
        if entity.directory.exists():
            logger.info(f"Removing directory {entity.directory}")
            shutil.rmtree(entity.directory)
        self.store.remove_repo(entity)
        self.save()

    def list_repos(self) -> List[RepositoryEntity]:
        return self.store.list_repos()

    def search(self, query: str = "") -> List[RepositoryEntity]:
        """Tracked repos fuzzy-matching ``query``, best first."""
        return self.store.search(query)

    def mark_opened(self, entity: RepositoryEntity) -> None:
        """Record that ``entity`` was jumped into."""
        entity.update_open_time()
        self.save()

    def repo_for_directory(self, directory: Union[str, Path]) -> Optional[RepositoryEntity]:
        """Tracked repo containing ``directory``; linked worktrees map to their main repo."""
        repo_root = find_repo_root(directory)
        if repo_root is not None:
            directory = resolve_main_repo(repo_root) or repo_root
        return self.store.find_by_directory(directory)

    def get_url(self, entity: RepositoryEntity, kind: str = "home", number: Optional[int] = None) -> Optional[str]:
        """Provider URL of ``kind`` for ``entity``; None for unsupported providers."""
        if kind == "home":
            return entity.get_home_url()
        if kind == "issue":
            return entity.get_issue_url(number)
        if kind == "pr":
            return entity.get_pr_url(number)
        raise ValueError(f"kind must be one of {list(URL_KINDS)}, got '{kind}'")

    def update(self) -> ScanResult:
        """Track every clone found under the roots, then deduplicate.

        Clones whose origin is not a recognised git URI, or whose location
        does not match the directory layout, are skipped.
        """
        result = ScanResult()
        for root in self.config.roots:
            for clone_dir in self.git_ops.find_clones(root):
                uri = self.git_ops.get_remote_url(clone_dir)
                identity = try_parse_git_uri(uri) if uri else None
                if identity is None:
                    result.skipped.append((clone_dir, f"unrecognised origin {uri!r}"))
                    continue

                entity = RepositoryEntity.from_identity(identity, root, self.config.with_host)
                if entity.directory.resolve() != clone_dir.resolve():
                    result.skipped.append((clone_dir, f"expected at {entity.directory}"))
                    continue

                if self.store.has_repo(entity):
                    logger.debug(f"Already tracking {clone_dir}")
                    continue

                self.store.add_repo(entity)
                result.added.append(entity)
                logger.info(f"Discovered {identity.slug} at {clone_dir}")

        for clone_dir, reason in result.skipped:
            logger.warning(f"Skipped {clone_dir}: {reason}")

        result.duplicates_dropped = self.store.deduplicate()
        self.save()
        return result

    def pull(self) -> PullResult:
        """Clone every tracked repo whose directory is missing."""
        result = PullResult()
        for entity in self.store.list_repos():
            if entity.directory.exists():
                continue
            entity.directory.parent.mkdir(parents=True, exist_ok=True)
            try:
                self.git_ops.clone(entity.identity.uri, entity.directory)
            except GitOperationError as e:
                result.failed.append((entity, e))
                continue
            result.cloned.append(entity)
        return result

    def deduplicate(self) -> int:
        """Drop repos sharing a directory with an earlier one; returns how many were dropped."""
        dropped = self.store.deduplicate()
        if dropped:
            self.save()
        return dropped

    # Worktrees

    def worktree_service(self, directory: Optional[Union[str, Path]] = None) -> WorktreeService:
        """Worktree service for the main repository containing ``directory`` (default: cwd).

        Raises:
            NotAGitRepositoryError: if ``directory`` is not inside a repository
        """
        directory = Path(directory) if directory else Path(os.getcwd())
        repo_root = find_repo_root(directory)
        main_repo = resolve_main_repo(repo_root) if repo_root else None
        if main_repo is None:
            raise NotAGitRepositoryError(str(directory))
        return WorktreeService(main_repo)

    def list_worktrees(self, directory: Optional[Union[str, Path]] = None) -> WorktreeList:
        service = self.worktree_service(directory)
        worktrees = service.list_worktrees()
        if worktrees is None:
            raise NotAGitRepositoryError(str(service.repo_dir))
        return worktrees

    def add_worktree(
        self,
        branch: str,
        path: Optional[Union[str, Path]] = None,
        create_branch: bool = False,
        directory: Optional[Union[str, Path]] = None,
    ) -> Path:
        return self.worktree_service(directory).add_worktree(branch, path, create_branch)

    def remove_worktree(
        self,
        path: Union[str, Path],
        force: bool = False,
        directory: Optional[Union[str, Path]] = None,
    ) -> None:
        """Remove a linked worktree of the repository.

        Raises:
            WorktreeNotFoundError: if ``path`` is not one of its worktrees
            MainWorktreeError: if ``path`` is the main worktree
            GitOperationError: if git refuses, e.g. for uncommitted changes
        """
        service = self.worktree_service(directory)
        worktrees = service.list_worktrees()
        worktree = worktrees.find(Path(path)) if worktrees else None
        if worktree is None:
            raise WorktreeNotFoundError(str(path))
        if worktree.is_main:
            raise MainWorktreeError(str(path))
        service.remove_worktree(worktree.path, force)

    def prune_worktrees(self, directory: Optional[Union[str, Path]] = None) -> str:
        return self.worktree_service(directory).prune_worktrees()
