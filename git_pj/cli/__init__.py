"""Command-line interface for git-pj.

`main` is the `pj` console script; `build_parser` backs it.
"""

from .main import main
from .args import build_parser, parse_args

__all__ = ["main", "build_parser", "parse_args"]
