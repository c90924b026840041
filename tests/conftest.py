"""Pytest fixtures for git-pj tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_pj.config import Config, ConfigService
from git_pj.constants import APP_HOME_ENV
from git_pj.services.git import GitOperations

MISSING_SOURCE = "/nonexistent/git-pj-test-source"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def app_home(temp_dir, monkeypatch):
    """Point GIT_PJ_HOME at a throwaway directory."""
    home = temp_dir / "pj-home"
    monkeypatch.setenv(APP_HOME_ENV, str(home))
    return home


@pytest.fixture
def workspace_root(temp_dir):
    root = temp_dir / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def config(app_home, workspace_root):
    """Saved config with a single root under the temp dir."""
    cfg = Config(roots=[workspace_root])
    ConfigService(app_home).save(cfg)
    return cfg


def init_repo(path: Path, origin: str = None) -> git.Repo:
    """Initialise a repository at ``path`` with one commit on ``main``."""
    path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(path)

    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    readme = path / "README.md"
    readme.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    if origin:
        repo.create_remote('origin', origin)
    return repo


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo = init_repo(temp_dir / "test_repo", origin='git@github.com:test/test-repo.git')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo):
    """Repository with one linked worktree on branch feature/wt."""
    repo_path = Path(git_repo.working_dir)
    worktree_path = repo_path.parent / "test_repo.worktrees" / "feature-wt"
    git_repo.git.worktree("add", "-b", "feature/wt", str(worktree_path))

    yield git_repo, worktree_path


class LocalGitOperations(GitOperations):
    """GitOperations that clones from local paths instead of the network.

    URIs missing from ``sources`` clone from a path that does not exist, so
    the clone fails the way an unreachable remote would.
    """

    def __init__(self, sources=None):
        super().__init__()
        self.sources = dict(sources or {})
        self.cloned = []

    def clone(self, uri, directory):
        self.cloned.append(uri)
        super().clone(str(self.sources.get(uri, MISSING_SOURCE)), directory)


@pytest.fixture
def local_git_ops(git_repo):
    """Clones git@github.com:test/test-repo.git (and its HTTPS form) from the local test repo."""
    source = git_repo.working_dir
    return LocalGitOperations({
        "git@github.com:test/test-repo.git": source,
        "https://github.com/test/test-repo.git": source,
    })
