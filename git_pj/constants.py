"""Shared constants for git-pj."""

from dataclasses import dataclass
from typing import List


APP_NAME = "git-pj"
APP_HOME_ENV = "GIT_PJ_HOME"
APP_DIR_NAME = ".git-pj"
CONFIG_FILE_NAME = "config.json"
METADATA_FILE_NAME = "repos.json"
LOG_FILE_NAME = "git-pj.log"

# v1: entries of {git_uri, dir, root, create_time, last_open_time}
# v2: entries of {identity, directory, root, created_at, last_opened_at}
METADATA_VERSION_V1 = "v1"
METADATA_VERSION_V2 = "v2"
CURRENT_METADATA_VERSION = METADATA_VERSION_V2
LEGACY_METADATA_VERSIONS = (None, METADATA_VERSION_V1)

DEFAULT_WORKSPACE_NAME = "workspace"

# Directory layouts under a root
LAYOUT_HOST = "host"  # <root>/<hostname>/<user>/<repo>
LAYOUT_FLAT = "flat"  # <root>/<user>/<repo>
LAYOUTS = [LAYOUT_HOST, LAYOUT_FLAT]

WORKTREES_DIR_SUFFIX = ".worktrees"

GITHUB_HOSTNAME = "github.com"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


REPO_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("dir", "Dir"),
    ColumnDefinition("protocol", "Protocol", 8),
    ColumnDefinition("hostname", "Hostname", 14),
    ColumnDefinition("user", "User", 16),
    ColumnDefinition("repo", "Repo", 20),
    ColumnDefinition("uri", "Full URI"),
    ColumnDefinition("last_opened", "Last Opened", 12),
]

WORKTREE_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Worktree", 24),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("commit", "Commit", 10),
    ColumnDefinition("flags", "Flags", 10),
]


# Symbol constants
SYMBOL_LOCKED = "L"
SYMBOL_PRUNABLE = "P"
SYMBOL_MISSING = "✗"

# Console message prefixes
PREFIX_SUCCESS = "🚀"
PREFIX_WARNING = "⚠️ "
PREFIX_QUESTION = "❓"
