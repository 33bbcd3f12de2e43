"""Git author identity."""

from dataclasses import dataclass
from pathlib import Path

from depbump.git.runner import run_command, run_git, CommandResult


@dataclass(frozen=True)
class GitIdentity:
    name: str
    email: str


def get_global_identity() -> GitIdentity | None:
    """Read user.name / user.email from the global git config.

    Returns None if either value is unset.
    """
    name = run_command(["git", "config", "--global", "user.name"])
    email = run_command(["git", "config", "--global", "user.email"])
    if not (name.success and email.success):
        return None
    identity = GitIdentity(name=name.stdout.strip(), email=email.stdout.strip())
    if not identity.name or not identity.email:
        return None
    return identity


def set_local_identity(checkout: Path, identity: GitIdentity) -> CommandResult:
    """Write the identity into the checkout's local config."""
    result = run_git(["config", "user.name", identity.name], checkout)
    if not result.success:
        return result
    return run_git(["config", "user.email", identity.email], checkout)
