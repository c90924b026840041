"""Version information for git-pj."""

from git_pj._version import __version__

__all__ = ["__version__"]
