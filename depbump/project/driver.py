"""
Local Project Driver.

One method per update step for a single checkout. Every method either
returns normally or raises a DepbumpError describing why the step failed;
the orchestrator decides what to do with the failure.
"""

import logging
from pathlib import Path
from typing import Callable

from depbump import git
from depbump.lib.config import UpdateSettings
from depbump.lib.constants import (
    BRANCH_POLICY_PROMPT,
    BRANCH_POLICY_REJECT,
    VALID_BRANCH_POLICIES,
)
from depbump.lib.errors import (
    BranchReconciliationFailure,
    ExternalToolFailure,
    LocalProjectNotFound,
)
from depbump.lib.types import PackageSpec
from depbump.project.package_manager import detect_package_manager, install_packages
from depbump.project.toolchain import Toolchain, resolve_toolchain

logger = logging.getLogger(__name__)

# (project_name, current_branch, target_branch) -> switch?
ConfirmSwitch = Callable[[str, str, str], bool]


def commit_message(packages: list[PackageSpec]) -> str:
    return f"feat: update dependencies {', '.join(str(p) for p in packages)}"


def _require(result: git.CommandResult, tool: str, action: str) -> None:
    if not result.success:
        raise ExternalToolFailure(tool, f"{action} failed", returncode=result.returncode, output=result.output)


class LocalProjectDriver:
    """Runs version-control, toolchain and package-manager steps in a checkout."""

    def __init__(
        self,
        root: Path,
        settings: UpdateSettings,
        confirm_switch: ConfirmSwitch | None = None,
    ):
        if settings.branch_policy not in VALID_BRANCH_POLICIES:
            raise ValueError(f"Unknown branch policy: {settings.branch_policy}")
        self.root = root
        self.settings = settings
        self.confirm_switch = confirm_switch

    def resolve_path(self, project_name: str) -> Path:
        """Locate the checkout under the project root."""
        path = self.root / project_name
        if not path.is_dir():
            raise LocalProjectNotFound(project_name, str(self.root))
        return path

    def reconcile_branch(self, path: Path, branch: str) -> bool:
        """
        Make sure the checkout is on branch.

        Returns:
            True if a checkout happened, False if it was already there

        Raises:
            BranchReconciliationFailure: If the switch is declined, not
                allowed by policy, or fails
        """
        current = git.get_current_branch(path)
        if current is None:
            raise BranchReconciliationFailure(f"Cannot determine current branch of {path.name}")
        if current == branch:
            return False

        policy = self.settings.branch_policy
        if policy == BRANCH_POLICY_REJECT:
            raise BranchReconciliationFailure(f"Checked out '{current}', expected '{branch}'")
        if policy == BRANCH_POLICY_PROMPT:
            if self.confirm_switch is None or not self.confirm_switch(path.name, current, branch):
                raise BranchReconciliationFailure(f"Switch from '{current}' to '{branch}' declined")

        result = git.checkout_branch(path, branch)
        if not result.success:
            raise BranchReconciliationFailure(f"git checkout {branch} failed: {result.output}")
        logger.info(f"{path.name}: switched {current} -> {branch}")
        return True

    def sync(self, path: Path) -> None:
        _require(git.pull(path), "git", "pull")

    def switch_toolchain(self, path: Path) -> Toolchain:
        return resolve_toolchain(path, self.settings)

    def install(self, path: Path, packages: list[PackageSpec], toolchain: Toolchain) -> str:
        """Install packages with the project's package manager. Returns the manager used."""
        manager = detect_package_manager(path)
        result = install_packages(path, manager, packages, self.settings.registry, toolchain)
        _require(result, manager, "install")
        return manager

    def configure_identity(self, path: Path) -> git.GitIdentity:
        """Copy the global git identity into the checkout's local config."""
        identity = git.get_global_identity()
        if identity is None:
            raise ExternalToolFailure("git", "global user.name/user.email not configured")
        _require(git.set_local_identity(path, identity), "git", "config user identity")
        return identity

    def stage_changes(self, path: Path) -> bool:
        """Stage everything. Returns True if there is anything to commit."""
        _require(git.stage_all(path), "git", "add")
        staged = git.has_staged_changes(path)
        if staged is None:
            raise ExternalToolFailure("git", "cannot tell whether anything is staged")
        return staged

    def commit(self, path: Path, packages: list[PackageSpec]) -> None:
        # Local commit hooks are bypassed
        _require(git.commit(path, commit_message(packages), no_verify=True), "git", "commit")

    def push(self, path: Path) -> None:
        _require(git.push(path), "git", "push")
