"""Package manager detection and install commands."""

from pathlib import Path

from depbump.git.runner import run_command, CommandResult
from depbump.lib.constants import FALLBACK_PACKAGE_MANAGER, LOCKFILES
from depbump.lib.types import PackageSpec
from depbump.project.toolchain import Toolchain

# manager -> (add command, flag relaxing peer/engine checks)
INSTALL_COMMANDS = {
    "pnpm": (["pnpm", "add"], "--no-strict-peer-dependencies"),
    "yarn": (["yarn", "add"], "--ignore-engines"),
    "npm": (["npm", "install"], "--legacy-peer-deps"),
}

REGISTRY_ENV_VAR = "NPM_CONFIG_REGISTRY"


def detect_package_manager(project_path: Path) -> str:
    """Pick the package manager from the lockfile present.

    pnpm-lock.yaml wins over yarn.lock; with neither, npm is used.
    """
    for manager, lockfile in LOCKFILES:
        if (project_path / lockfile).exists():
            return manager
    return FALLBACK_PACKAGE_MANAGER


def install_command(manager: str, packages: list[PackageSpec]) -> list[str]:
    """Build the add/install command line for a manager."""
    if manager not in INSTALL_COMMANDS:
        raise ValueError(f"Unknown package manager: {manager}")
    base, relax_flag = INSTALL_COMMANDS[manager]
    return base + [str(p) for p in packages] + [relax_flag]


def install_packages(
    project_path: Path,
    manager: str,
    packages: list[PackageSpec],
    registry: str,
    toolchain: Toolchain,
) -> CommandResult:
    """Run the manager's install for all packages in one invocation."""
    env = {REGISTRY_ENV_VAR: registry, **toolchain.env()}
    return run_command(install_command(manager, packages), cwd=project_path, env=env)
