"""Per-project update state machine using transitions library.

States:
    pending -> in_progress -> succeeded | failed

A project that shows up again in the same batch (two branches of one
project) is reopened from its terminal state back to in_progress.

Usage:
    from depbump.workflow.fsm import ProjectFSM

    fsm = ProjectFSM("web")
    fsm.start()    # pending -> in_progress
    fsm.succeed()  # in_progress -> succeeded
"""

import logging
from transitions import Machine

logger = logging.getLogger(__name__)


PENDING = "pending"
IN_PROGRESS = "in_progress"
SUCCEEDED = "succeeded"
FAILED = "failed"

STATES = [PENDING, IN_PROGRESS, SUCCEEDED, FAILED]
TERMINAL_STATES = {SUCCEEDED, FAILED}

# Each trigger becomes a method on the FSM
TRANSITIONS = [
    {"trigger": "start", "source": PENDING, "dest": IN_PROGRESS},
    {"trigger": "succeed", "source": IN_PROGRESS, "dest": SUCCEEDED},
    {"trigger": "fail", "source": IN_PROGRESS, "dest": FAILED},
    # Failing before the project was ever started (e.g. bad target)
    {"trigger": "fail", "source": PENDING, "dest": FAILED},
    {"trigger": "reopen", "source": SUCCEEDED, "dest": IN_PROGRESS},
    {"trigger": "reopen", "source": FAILED, "dest": IN_PROGRESS},
]


class ProjectFSM:
    """State machine for one project's update status.

    Wraps the transitions library with project-specific logging.
    """

    def __init__(self, project_name: str):
        self.project_name = project_name

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=PENDING,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",
        )

    def on_state_change(self, event) -> None:
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.debug(f"[FSM] {self.project_name}: {from_state} -> {to_state} ({trigger})")

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)
