"""External command runner shared by git, nvm and the package managers."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass
class CommandResult:
    """Result of an external command."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Best available diagnostic text (stderr first, then stdout)."""
        return (self.stderr or self.stdout).strip()


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """
    Run an external command to completion.

    Installs can take many minutes, so no timeout is applied.

    Args:
        cmd: Command and arguments
        cwd: Working directory for the command
        env: Extra environment variables, layered over os.environ

    Returns:
        CommandResult with returncode, stdout and stderr.
        A missing executable is reported as returncode 127.
    """
    full_env = None
    if env:
        full_env = {**os.environ, **env}
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=full_env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return CommandResult(
            returncode=127,
            stdout="",
            stderr=f"Command not found: {cmd[0]}",
        )
    return CommandResult(
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


def run_git(args: list[str], cwd: Path) -> CommandResult:
    """
    Run a git command against a checkout.

    Args:
        args: Git command arguments (e.g., ["pull"])
        cwd: Checkout the command operates on (passed via -C)
    """
    return run_command(["git", "-C", str(cwd)] + args)
