"""Command-line interface for git-pj"""

import sys
import webbrowser
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm, Prompt

from git_pj.cli.args import parse_args
from git_pj.config import Config, ConfigService, default_root
from git_pj.constants import LAYOUT_FLAT, LAYOUT_HOST, PREFIX_QUESTION
from git_pj.core import Workspace
from git_pj.exceptions import (
    GitOperationError,
    GitPjError,
    MainWorktreeError,
    RepoExistsError,
    RepoNotFoundError,
)
from git_pj.logging_config import get_logger, setup_logging
from git_pj.services.display_service import DisplayService
from git_pj.utils.shell import launch_shell

console = Console()
logger = get_logger(__name__)


def _confirm(message: str) -> bool:
    return Confirm.ask(f"{PREFIX_QUESTION} [yellow]{message}[/yellow]", console=console)


def _is_tty() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def cmd_init(args, display: DisplayService) -> int:
    config_service = ConfigService()
    if config_service.exists() and not args.force:
        if not _confirm(f"pj config file {config_service.config_file} already exists, do you want to continue?"):
            return 0

    root = args.root
    if not root:
        if _is_tty():
            root = Prompt.ask("Input pj root dir", default=str(default_root()), console=console)
        else:
            root = str(default_root())

    path = Path(root).expanduser().resolve()
    if not path.exists():
        display.info(f"{path} does not exist, creating...")
        path.mkdir(parents=True)

    config = Config(roots=[path], layout=LAYOUT_FLAT if args.flat else LAYOUT_HOST)
    config_service.save(config)
    display.success(f"Wrote config {config_service.config_file}")
    return 0


def cmd_add(args, workspace: Workspace, display: DisplayService) -> int:
    try:
        entity = workspace.add(args.git, root=args.root)
    except RepoExistsError as e:
        display.warn(str(e))
        return 1
    display.success(f"Added repo {entity.identity.uri} success")
    display.info(f"cd {entity.directory}")
    return 0


def cmd_remove(args, workspace: Workspace, display: DisplayService) -> int:
    try:
        entity = workspace.get_repo(args.git, root=args.root)
    except RepoNotFoundError as e:
        display.warn(str(e))
        return 1
    if not args.yes and not _confirm(f"Are you sure to remove repo {entity.identity.uri} ({entity.directory})?"):
        return 0
    workspace.remove(entity)
    display.success(f"Removed repo {entity.identity.uri} success")
    return 0


def cmd_find(args, workspace: Workspace, display: DisplayService) -> int:
    repos = workspace.list_repos()
    if not repos:
        display.warn("No repos tracked yet")
        return 1

    if _is_tty() and not args.print_only:
        from git_pj.tui import pick

        choice = pick([str(repo.directory) for repo in repos], query=args.query)
        if choice is None:
            return 0
        entity = repos[choice]
    else:
        matches = workspace.search(args.query)
        if not matches:
            display.warn(f"No repo matches '{args.query}'")
            return 1
        entity = matches[0]

    workspace.mark_opened(entity)
    if args.print_only:
        print(entity.directory)
        return 0

    display.info(f"You choose: {entity.directory}")
    launch_shell(entity.directory, workspace.config.shell)


def cmd_update(args, workspace: Workspace, display: DisplayService) -> int:
    display.info("Updating git projects...")
    result = workspace.update()
    for entity in result.added:
        display.success(f"Found {entity.identity.uri} at {entity.directory}")
    for clone_dir, reason in result.skipped:
        display.warn(f"Skipped {clone_dir}: {reason}")
    if result.duplicates_dropped:
        display.info(f"Dropped {result.duplicates_dropped} duplicate entries")
    display.success(f"Tracked {len(result.added)} new repo(s)")
    return 0


def cmd_pull(args, workspace: Workspace, display: DisplayService) -> int:
    display.info("Pulling git projects...")
    result = workspace.pull()
    for entity in result.cloned:
        display.success(f"Cloned {entity.identity.uri} into {entity.directory}")
    for entity, error in result.failed:
        display.error(f"{entity.identity.uri}: {error}")
    if not result.cloned and not result.failed:
        display.info("Every repo is already cloned")
    return 1 if result.failed else 0


def cmd_dedup(args, workspace: Workspace, display: DisplayService) -> int:
    dropped = workspace.deduplicate()
    display.success(f"Dropped {dropped} duplicate entr{'y' if dropped == 1 else 'ies'}")
    return 0


def cmd_open(args, workspace: Workspace, display: DisplayService) -> int:
    if args.query:
        matches = workspace.search(args.query)
        entity = matches[0] if matches else None
    else:
        entity = workspace.repo_for_directory(Path.cwd())
    if entity is None:
        raise RepoNotFoundError(args.query or str(Path.cwd()))

    url = workspace.get_url(entity, args.kind, args.number)
    if url is None:
        display.warn(f"Unsupported provider {entity.identity.hostname}")
        return 1
    display.info(f"Opening {url}")
    webbrowser.open(url)
    return 0


def cmd_worktree(args, workspace: Workspace, display: DisplayService) -> int:
    action = args.worktree_command
    if action == "list":
        display.display_worktree_table(workspace.list_worktrees(args.repo))
    elif action == "add":
        path = workspace.add_worktree(args.branch, args.path, args.create_branch, args.repo)
        display.success(f"Created worktree for {args.branch}")
        display.info(f"cd {path}")
    elif action == "remove":
        try:
            workspace.remove_worktree(args.path, args.force, args.repo)
        except MainWorktreeError as e:
            display.error(str(e))
            return 1
        except GitOperationError as e:
            display.error(str(e))
            if not args.force:
                display.warn("Retry with --force to remove a worktree with local changes")
            return 1
        display.success(f"Removed worktree {args.path}")
    elif action == "prune":
        report = workspace.prune_worktrees(args.repo)
        if report:
            display.info(report)
        else:
            display.info("Nothing to prune")
    return 0


COMMANDS = {
    "add": cmd_add,
    "remove": cmd_remove,
    "find": cmd_find,
    "update": cmd_update,
    "pull": cmd_pull,
    "dedup": cmd_dedup,
    "open": cmd_open,
    "worktree": cmd_worktree,
    "wt": cmd_worktree,
}


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        use_picker = parsed_args.command == "find" and not parsed_args.print_only and _is_tty()
        log_file = setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug, tui_mode=use_picker)
        if parsed_args.debug and log_file:
            console.print(f"[dim]Debug log: {log_file}[/dim]")

        display = DisplayService(console, verbose=parsed_args.verbose, debug=parsed_args.debug)

        if parsed_args.command is None:
            console.print("No command provided, see `pj --help`")
            return 1
        if parsed_args.command == "init":
            return cmd_init(parsed_args, display)

        config = ConfigService().load()
        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        workspace = Workspace(config)

        if parsed_args.command == "list":
            display.display_repo_table(workspace.list_repos())
            return 0

        return COMMANDS[parsed_args.command](parsed_args, workspace, display)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except GitPjError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
