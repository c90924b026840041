"""Tests for RepositoryEntity"""
from datetime import datetime, timezone
from pathlib import Path

import pytest

from git_pj.exceptions import GitURIParseError
from git_pj.models.remote import GitIdentity, GitProtocol
from git_pj.models.repo import RepositoryEntity, repo_directory


ROOT = Path("/home/user/workspace")


class TestRepoDirectory:
    """Test directory derivation."""

    def test_host_layout(self):
        entity = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        assert entity.directory == ROOT / "github.com" / "u" / "r"
        assert entity.root == ROOT

    def test_flat_layout(self):
        entity = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT, with_host=False)
        assert entity.directory == ROOT / "u" / "r"

    def test_deterministic(self):
        identity = GitIdentity("github.com", "u", "r", GitProtocol.SSH, "git@github.com:u/r.git")
        assert repo_directory(ROOT, identity) == repo_directory(ROOT, identity)

    def test_root_changes_only_prefix(self):
        identity = GitIdentity("github.com", "u", "r", GitProtocol.SSH, "git@github.com:u/r.git")
        first = repo_directory(Path("/a"), identity)
        second = repo_directory(Path("/b/c"), identity)
        assert first.relative_to("/a") == second.relative_to("/b/c")

    def test_protocol_does_not_change_directory(self):
        ssh = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        https = RepositoryEntity.from_uri("https://github.com/u/r.git", ROOT)
        assert ssh.directory == https.directory

    def test_invalid_uri_raises(self):
        with pytest.raises(GitURIParseError):
            RepositoryEntity.from_uri("https://github.com/u/r", ROOT)


class TestSameRepo:
    """Test the identity policy."""

    def test_ssh_and_https_match_both_ways(self):
        ssh = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        https = RepositoryEntity.from_uri("https://github.com/u/r.git", ROOT)
        assert ssh.same_repo(https)
        assert https.same_repo(ssh)

    def test_different_root_differs(self):
        first = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        second = RepositoryEntity.from_uri("git@github.com:u/r.git", Path("/elsewhere"))
        assert not first.same_repo(second)

    def test_different_host_differs(self):
        github = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        gitlab = RepositoryEntity.from_uri("git@gitlab.com:u/r.git", ROOT)
        assert not github.same_repo(gitlab)


class TestProviderUrls:
    """Test home/issue/PR URLs."""

    def test_github_home(self):
        entity = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        assert entity.get_home_url() == "https://github.com/u/r"

    def test_github_issue(self):
        entity = RepositoryEntity.from_uri("https://github.com/u/r.git", ROOT)
        assert entity.get_issue_url() == "https://github.com/u/r/issues"
        assert entity.get_issue_url(42) == "https://github.com/u/r/issues/42"

    def test_github_pr(self):
        entity = RepositoryEntity.from_uri("https://github.com/u/r.git", ROOT)
        assert entity.get_pr_url() == "https://github.com/u/r/pull"
        assert entity.get_pr_url(7) == "https://github.com/u/r/pull/7"

    @pytest.mark.parametrize("uri", [
        "git@gitlab.com:u/r.git",
        "https://GitHub.com/u/r.git",
        "https://github.example.com/u/r.git",
    ])
    def test_unsupported_provider(self, uri):
        entity = RepositoryEntity.from_uri(uri, ROOT)
        assert entity.get_home_url() is None
        assert entity.get_issue_url(1) is None
        assert entity.get_pr_url() is None


class TestTimestamps:
    """Test open-time tracking and serialization."""

    def test_update_open_time(self):
        entity = RepositoryEntity.from_uri("git@github.com:u/r.git", ROOT)
        entity.last_opened_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
        entity.update_open_time()
        assert entity.last_opened_at.year >= 2024
        assert entity.created_at <= entity.last_opened_at

    def test_dict_round_trip_keeps_fields(self):
        entity = RepositoryEntity.from_uri("https://github.com/u/r.git", ROOT)
        restored = RepositoryEntity.from_dict(entity.to_dict())
        assert restored == entity
        assert restored.identity.protocol == GitProtocol.HTTP
