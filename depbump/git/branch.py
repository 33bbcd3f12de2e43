"""Git branch operations."""

from pathlib import Path

from depbump.git.runner import run_git, CommandResult


def get_current_branch(checkout: Path) -> str | None:
    """Get the current branch name, or None if detached HEAD or not a repo."""
    result = run_git(["branch", "--show-current"], checkout)
    if result.success:
        return result.stdout.strip() or None
    return None


def checkout_branch(checkout: Path, branch: str) -> CommandResult:
    """Checkout a branch."""
    return run_git(["checkout", branch], checkout)
