"""Command-line interface for git-worktree-keeper"""

import subprocess
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_worktree_keeper.cli.args import flag_overrides, negation_flags, parse_args
from git_worktree_keeper.config import check_flag_conflicts, determine_sync_mode, merge
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import (
    CommandExecutionError,
    InvalidInputError,
    WorktreeKeeperError,
    WorktreeNotFoundError,
)
from git_worktree_keeper.logging_config import get_logger, setup_logging
from git_worktree_keeper.services import (
    EditorService,
    GitHubService,
    GitOperations,
    HookService,
    SyncService,
    TextualPicker,
)
from git_worktree_keeper.services.config_store import load_or_default

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def build_keeper(config) -> WorktreeKeeper:
    """Wire the orchestrator to the real git, GitHub, UI and shell adapters."""
    git_ops = GitOperations()
    return WorktreeKeeper(
        config,
        git_ops,
        branch_source=GitHubService(git_ops),
        picker=TextualPicker(),
        syncer=SyncService(),
        hooks=HookService(),
        editor=EditorService(),
        console=console,
    )


def _print_shell_hint(lines: list[str]) -> None:
    for line in lines:
        err_console.print(line, highlight=False, soft_wrap=True)
    err_console.print("")
    err_console.print("For automatic directory switching, wrap gw in a shell function that "
                      "uses --print-path.", highlight=False)


def cmd_add(keeper: WorktreeKeeper, args, flags) -> int:
    keeper.add(
        branch=args.name,
        create_branch=args.create_branch,
        pr=args.pr,
        start_point=args.start_point,
        sync_mode=determine_sync_mode(keeper.config, flags),
    )
    return 0


def cmd_ls(keeper: WorktreeKeeper, args) -> int:
    worktrees = keeper.list_worktrees()
    if not worktrees:
        print("No worktrees found")
        return 0

    if args.print_paths:
        for wt in worktrees:
            print(wt.path)
        return 0

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Commit")
    table.add_column("")
    for wt in worktrees:
        table.add_row(
            wt.name,
            wt.branch or "[dim](detached)[/dim]",
            wt.short_commit,
            "[cyan](main)[/cyan]" if wt.is_main else "",
        )
    console.print(table)
    return 0


def cmd_sw(keeper: WorktreeKeeper, args) -> int:
    if args.name:
        wt = keeper.find(args.name)
    else:
        chosen = keeper.picker.pick_worktrees(keeper.list_worktrees())
        if not chosen:
            return 0
        wt = chosen[0]

    if args.print_path:
        print(wt.path)
        return 0

    _print_shell_hint([f"To switch to {wt.path}, run:", f"  cd {wt.path}"])
    return 0


def cmd_fd(keeper: WorktreeKeeper, args) -> int:
    chosen = keeper.picker.pick_worktrees(keeper.list_worktrees())
    if not chosen:
        return 0
    wt = chosen[0]
    print(wt.path if args.print_path else wt.branch)
    return 0


def cmd_rm(keeper: WorktreeKeeper, args) -> int:
    outcomes = keeper.remove(args.names)
    return 1 if any(outcome.failed for outcome in outcomes) else 0


def cmd_close(keeper: WorktreeKeeper, args) -> int:
    current = keeper.current_worktree()
    if current.is_main:
        raise InvalidInputError("main worktree", "cannot close the main worktree")
    main_path = keeper.main_worktree().path

    if args.print_path:
        # stdout carries the directory to switch to; stderr carries what to remove
        print(main_path)
        print(current.path, file=sys.stderr)
        print("-y" if keeper.config.close.force else "", file=sys.stderr)
        return 0

    _print_shell_hint([
        "To close this worktree and switch to main, run:",
        f"  cd {main_path} && gw rm {current.path}",
    ])
    return 0


def cmd_exec(keeper: WorktreeKeeper, args) -> int:
    argv = list(args.args)
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        raise InvalidInputError("", "a command to execute is required")

    wt = None
    command = argv
    if len(argv) >= 2:
        try:
            wt = keeper.find(argv[0])
            command = argv[1:]
        except WorktreeNotFoundError:
            logger.debug(f"'{argv[0]}' is not a worktree, treating it as the command")

    if wt is None:
        chosen = keeper.picker.pick_worktrees(keeper.list_worktrees())
        if not chosen:
            return 0
        wt = chosen[0]

    try:
        result = subprocess.run(command, cwd=wt.path, check=False)
    except OSError as e:
        raise CommandExecutionError(" ".join(command), str(e)) from e
    return result.returncode


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        flags = flag_overrides(parsed_args)
        negations = negation_flags(parsed_args)
        check_flag_conflicts(flags, negations)
        config = merge(load_or_default(), flags, negations)

        if parsed_args.debug:
            err_console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                err_console.print(f"  {key}: {value}")

        keeper = build_keeper(config)
        command = parsed_args.command
        if command == "add":
            return cmd_add(keeper, parsed_args, flags)
        if command == "ls":
            return cmd_ls(keeper, parsed_args)
        if command == "sw":
            return cmd_sw(keeper, parsed_args)
        if command == "fd":
            return cmd_fd(keeper, parsed_args)
        if command == "rm":
            return cmd_rm(keeper, parsed_args)
        if command == "close":
            return cmd_close(keeper, parsed_args)
        if command == "exec":
            return cmd_exec(keeper, parsed_args)
        raise InvalidInputError(command, "unknown command")
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorktreeKeeperError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        if e.hint:
            err_console.print(f"[dim]{escape(e.hint)}[/dim]", highlight=False, soft_wrap=True)
        if parsed_args is not None and parsed_args.debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
