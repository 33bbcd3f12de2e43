"""Git commit operations."""

from pathlib import Path

from depbump.git.runner import run_git, CommandResult


def stage_all(checkout: Path) -> CommandResult:
    """Stage all changes (new, modified, deleted)."""
    return run_git(["add", "-A"], checkout)


def has_staged_changes(checkout: Path) -> bool | None:
    """Check if the index differs from HEAD.

    Returns None if git itself failed.
    """
    result = run_git(["diff", "--cached", "--quiet"], checkout)
    # exit 0 = nothing staged, exit 1 = staged changes, anything else = error
    if result.returncode == 0:
        return False
    if result.returncode == 1:
        return True
    return None


def commit(checkout: Path, message: str, no_verify: bool = False) -> CommandResult:
    """Create a commit with the given message."""
    args = ["commit", "-m", message]
    if no_verify:
        args.append("--no-verify")
    return run_git(args, checkout)
