"""Command-line argument parsing for git-pj."""

import argparse
from git_pj.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the `pj` argument parser."""
    parser = argparse.ArgumentParser(
        prog="pj",
        description="pj provides a tree structure to manage your git projects.",
        epilog="Repos are cloned to <root>/<hostname>/<user>/<repo>. "
        "Config and metadata live in ~/.git-pj (override with GIT_PJ_HOME).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-pj {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    init = subparsers.add_parser("init", help="Select the root dir and write the config file")
    init.add_argument("--root", help="Workspace root directory")
    init.add_argument(
        "--flat",
        action="store_true",
        help="Use the <root>/<user>/<repo> layout without a hostname level",
    )
    init.add_argument("--force", action="store_true", help="Overwrite an existing config without asking")

    add = subparsers.add_parser("add", help="Clone and track a git project")
    add.add_argument("git", help="git URI, e.g. git@github.com:user/repo.git")
    add.add_argument("--root", help="Root to clone under (default: first configured root)")

    remove = subparsers.add_parser("remove", help="Delete and untrack a git project")
    remove.add_argument("git", help="git URI the project was added with (SSH or HTTPS)")
    remove.add_argument("--root", help="Root the project lives under (default: search all roots)")
    remove.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    subparsers.add_parser("list", help="List all git projects")

    find = subparsers.add_parser("find", help="Fuzzy search a git project and jump into it")
    find.add_argument("query", nargs="?", default="", help="Initial search text")
    find.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the directory instead of launching a shell in it",
    )

    subparsers.add_parser(
        "update", help="Scan the roots for existing clones and track them"
    )
    subparsers.add_parser("pull", help="Clone every tracked project missing on disk")
    subparsers.add_parser("dedup", help="Drop tracked entries that share a directory")

    open_parser = subparsers.add_parser("open", help="Open a git project page in the browser")
    open_parser.add_argument(
        "kind",
        nargs="?",
        choices=["home", "issue", "pr"],
        default="home",
        help="Page to open (default: home)",
    )
    open_parser.add_argument("-n", "--number", type=int, help="Issue or PR number")
    open_parser.add_argument(
        "-q", "--query", help="Project to open (default: the one containing the current directory)"
    )

    worktree = subparsers.add_parser("worktree", aliases=["wt"], help="Manage linked worktrees")
    worktree.add_argument(
        "--repo", help="Repository directory (default: the current directory)"
    )
    wt_sub = worktree.add_subparsers(dest="worktree_command", metavar="<action>")
    wt_sub.required = True

    wt_sub.add_parser("list", help="List worktrees of the repository")

    wt_add = wt_sub.add_parser("add", help="Add a worktree for a branch")
    wt_add.add_argument("branch", help="Branch to check out")
    wt_add.add_argument("path", nargs="?", help="Worktree directory (default: <repo>.worktrees/<branch>)")
    wt_add.add_argument("-b", "--create-branch", action="store_true", help="Create the branch")

    wt_remove = wt_sub.add_parser("remove", help="Remove a linked worktree")
    wt_remove.add_argument("path", help="Worktree directory")
    wt_remove.add_argument("--force", action="store_true", help="Remove even with uncommitted changes")

    wt_sub.add_parser("prune", help="Prune metadata of worktrees deleted by hand")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
