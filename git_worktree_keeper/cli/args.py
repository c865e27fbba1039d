"""Command-line argument parsing for git-worktree-keeper."""

import argparse

from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.config import FlagOverrides, NegationFlags


def _add_add_parser(subparsers) -> None:
    parser = subparsers.add_parser(
        "add",
        aliases=["a"],
        help="Create a worktree for a branch",
        description="Create a worktree in a sibling directory named <repo>-<branch>. "
        "Without a branch, an interactive picker is shown.",
    )
    parser.add_argument("name", nargs="?", help="Branch to check out")
    parser.add_argument("-b", "--branch", dest="create_branch", action="store_true",
                        help="Create a new branch")
    parser.add_argument("--pr", help="Pull request number or URL to check out")
    parser.add_argument("--from", dest="start_point", metavar="REF",
                        help="Start point for the new branch (with -b)")
    # Positive flags default to None so "not given" can be told apart from False
    parser.add_argument("-o", "--open", dest="open", action="store_true", default=None,
                        help="Open the worktree in the editor")
    parser.add_argument("--no-open", dest="no_open", action="store_true",
                        help="Do not open the editor")
    parser.add_argument("-e", "--editor", help="Editor command used with --open")
    parser.add_argument("-s", "--sync", dest="sync", action="store_true", default=None,
                        help="Copy changed and untracked files from the main worktree")
    parser.add_argument("--no-sync", dest="no_sync", action="store_true", help="Do not sync files")
    parser.add_argument("--sync-ignored", dest="sync_ignored", action="store_true", default=None,
                        help="Copy gitignored files from the main worktree")
    parser.add_argument("--no-sync-ignored", dest="no_sync_ignored", action="store_true",
                        help="Do not sync gitignored files")


def _add_rm_parser(subparsers) -> None:
    parser = subparsers.add_parser(
        "rm",
        aliases=["r"],
        help="Remove worktrees",
        description="Remove one or more worktrees. Without names, a multi-select picker is shown.",
    )
    parser.add_argument("names", nargs="*", help="Worktrees to remove (branch, suffix, dir name or path)")
    parser.add_argument("-f", "--force", "-y", "--yes", dest="rm_force", action="store_true",
                        default=None, help="Force removal even with uncommitted changes")
    parser.add_argument("--no-force", "--no-yes", dest="rm_no_force", action="store_true",
                        help="Do not force removal")
    parser.add_argument("-b", "--branch", dest="rm_branch", action="store_true", default=None,
                        help="Also delete the worktree's branch")
    parser.add_argument("--no-branch", dest="rm_no_branch", action="store_true",
                        help="Keep the worktree's branch")


def build_parser() -> argparse.ArgumentParser:
    """Build the ``gw`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="gw",
        description="Git worktree manager",
        epilog="Worktrees are created next to the main checkout as <repo>-<branch>.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug information for troubleshooting")
    parser.add_argument("--version", action="version", version=f"gw {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    _add_add_parser(subparsers)

    ls_parser = subparsers.add_parser("ls", aliases=["l"], help="List worktrees")
    ls_parser.add_argument("-p", "--path", dest="print_paths", action="store_true",
                           help="Print full paths only")

    sw_parser = subparsers.add_parser("sw", aliases=["s"], help="Switch to a worktree directory")
    sw_parser.add_argument("name", nargs="?", help="Worktree to switch to")
    sw_parser.add_argument("--print-path", action="store_true",
                           help="Print the path instead of instructions (used by shell wrappers)")

    fd_parser = subparsers.add_parser(
        "fd", aliases=["f"], help="Find a worktree interactively and print its branch"
    )
    fd_parser.add_argument("-p", "--path", dest="print_path", action="store_true",
                           help="Print the full path instead of the branch")

    _add_rm_parser(subparsers)

    close_parser = subparsers.add_parser(
        "close", aliases=["c"], help="Close the current worktree and return to the main one"
    )
    close_parser.add_argument("--print-path", action="store_true",
                              help="Print paths for shell wrappers instead of instructions")
    close_parser.add_argument("-y", "--yes", dest="close_force", action="store_true", default=None,
                              help="Remove the worktree without confirmation")
    close_parser.add_argument("--no-yes", dest="close_no_force", action="store_true",
                              help="Ask before removing the worktree")

    exec_parser = subparsers.add_parser(
        "exec",
        aliases=["e"],
        help="Run a command in a worktree",
        description="Run a command in a worktree. If the first argument does not name a "
        "worktree, a picker is shown and all arguments form the command.",
    )
    exec_parser.add_argument("args", nargs=argparse.REMAINDER, metavar="[name] command ...")

    return parser


# Canonical command names keyed by alias
COMMAND_ALIASES = {"a": "add", "l": "ls", "s": "sw", "f": "fd", "r": "rm", "c": "close", "e": "exec"}


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    args.command = COMMAND_ALIASES.get(args.command, args.command)
    return args


def flag_overrides(args: argparse.Namespace) -> FlagOverrides:
    """Positive flags present on ``args``; absent ones stay None."""
    return FlagOverrides(
        open=getattr(args, "open", None),
        sync=getattr(args, "sync", None),
        sync_ignored=getattr(args, "sync_ignored", None),
        close_force=getattr(args, "close_force", None),
        rm_force=getattr(args, "rm_force", None),
        rm_branch=getattr(args, "rm_branch", None),
        editor=getattr(args, "editor", None),
    )


def negation_flags(args: argparse.Namespace) -> NegationFlags:
    return NegationFlags(
        no_open=getattr(args, "no_open", False),
        no_sync=getattr(args, "no_sync", False),
        no_sync_ignored=getattr(args, "no_sync_ignored", False),
        close_no_force=getattr(args, "close_no_force", False),
        rm_no_force=getattr(args, "rm_no_force", False),
        rm_no_branch=getattr(args, "rm_no_branch", False),
    )
