"""
Batch update orchestrator.

Runs the update steps for each target, one target at a time, and records
the outcome per project on the status board. A failing target is recorded
and skipped; it never stops the batch.

Per-target steps:
1. Locate the checkout under the project root
2. Reconcile the checked-out branch with the target branch
3. Pull
4. Select the Node toolchain
5. Install the packages with the project's package manager
6. Configure the local git identity
7. Stage; commit and push unless there is nothing to commit
"""

import logging
from dataclasses import dataclass, field

from depbump.lib.errors import ValidationError
from depbump.lib.types import PackageSpec, UpdateTarget
from depbump.project.driver import LocalProjectDriver
from depbump.workflow.fsm import FAILED, SUCCEEDED
from depbump.workflow.status import StatusBoard
from depbump.workflow.targets import resolve_target

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT = "Nothing to commit"
UPDATE_COMPLETE = "Update complete"


@dataclass
class BatchResult:
    """Which projects ended up succeeded or failed."""
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class UpdateOrchestrator:
    """Drives a LocalProjectDriver over a list of branches."""

    def __init__(
        self,
        driver: LocalProjectDriver,
        packages: list[PackageSpec],
        board: StatusBoard | None = None,
    ):
        if not packages:
            raise ValidationError("At least one package is required")
        self.driver = driver
        self.packages = list(packages)
        self.board = board or StatusBoard()

    def run(self, branches: list[str]) -> BatchResult:
        """Update every branch in order. Returns the per-project summary."""
        for branch in branches:
            try:
                target = resolve_target(branch)
            except ValidationError as e:
                logger.warning(f"Skipping branch {branch}: {e}")
                self.board.begin(branch)
                self.board.fail(branch, str(e))
                continue

            self.board.begin(target.project_name)
            try:
                self.update_target(target)
            except Exception as e:
                logger.warning(f"{target.project_name} ({target.branch_name}) failed: {e}")
                self.board.fail(target.project_name, str(e))

        return BatchResult(
            succeeded=self.board.names_in_state(SUCCEEDED),
            failed=self.board.names_in_state(FAILED),
        )

    def update_target(self, target: UpdateTarget) -> None:
        """Run all steps for one target; raises on the first failing step."""
        name = target.project_name
        step = self._step_recorder(name)

        step("Locating project")
        path = self.driver.resolve_path(name)

        step(f"Checking branch {target.branch_name}")
        if self.driver.reconcile_branch(path, target.branch_name):
            step(f"Switched to {target.branch_name}")

        step("Pulling latest changes")
        self.driver.sync(path)

        step("Selecting Node version")
        toolchain = self.driver.switch_toolchain(path)
        source = "pinned" if toolchain.pinned else "default"
        step(f"Using Node {toolchain.version} ({source})")

        step(f"Installing {', '.join(str(p) for p in self.packages)}")
        manager = self.driver.install(path, self.packages, toolchain)
        step(f"Installed with {manager}")

        step("Configuring git identity")
        self.driver.configure_identity(path)

        step("Staging changes")
        if not self.driver.stage_changes(path):
            step(NOTHING_TO_COMMIT)
        else:
            step("Committing changes")
            self.driver.commit(path, self.packages)
            step("Pushing changes")
            self.driver.push(path)

        self.board.succeed(name, UPDATE_COMPLETE)

    def _step_recorder(self, name: str):
        def record(description: str) -> None:
            logger.debug(f"{name}: {description}")
            self.board.step(name, description)
        return record
