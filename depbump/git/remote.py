"""Git remote operations."""

from pathlib import Path

from depbump.git.runner import run_git, CommandResult


def pull(checkout: Path) -> CommandResult:
    """Pull the current branch from its upstream."""
    return run_git(["pull"], checkout)


def push(checkout: Path) -> CommandResult:
    """Push the current branch to its configured upstream."""
    return run_git(["push"], checkout)
