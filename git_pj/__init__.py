"""
git-pj - A tree-structured workspace manager for git repositories
"""

from .__version__ import __version__
from .core import Workspace
from .cli.main import main

__all__ = ["Workspace", "main", "__version__"]
