"""
Per-project status records for a batch run.

The board is the only state shared across targets. Records are created the
first time a project is touched and never removed during a run. Every write
notifies the listener (the terminal reporter) synchronously.
"""

import logging
from collections import deque
from typing import Callable, Iterator

from depbump.lib.constants import DEFAULT_HISTORY_LIMIT
from depbump.workflow.fsm import ProjectFSM

logger = logging.getLogger(__name__)


class ProjectStatus:
    """Status of one project: coarse state, current step, recent steps."""

    def __init__(self, name: str, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.name = name
        self.fsm = ProjectFSM(name)
        self.current_step = ""
        # Oldest entries fall off once the limit is reached
        self.history: deque[str] = deque(maxlen=history_limit)

    @property
    def state(self) -> str:
        return self.fsm.state

    def record_step(self, description: str) -> None:
        self.current_step = description
        self.history.append(description)


StatusListener = Callable[["StatusBoard", ProjectStatus], None]


class StatusBoard:
    """Append-only map of project name -> ProjectStatus."""

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT, listener: StatusListener | None = None):
        self.history_limit = history_limit
        self.listener = listener
        self._projects: dict[str, ProjectStatus] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._projects

    def __getitem__(self, name: str) -> ProjectStatus:
        return self._projects[name]

    def __iter__(self) -> Iterator[ProjectStatus]:
        return iter(self._projects.values())

    def __len__(self) -> int:
        return len(self._projects)

    def get_or_create(self, name: str) -> ProjectStatus:
        if name not in self._projects:
            self._projects[name] = ProjectStatus(name, self.history_limit)
        return self._projects[name]

    def begin(self, name: str) -> ProjectStatus:
        """Move a project to in_progress, reopening it if it already finished."""
        status = self.get_or_create(name)
        if status.fsm.is_terminal:
            status.fsm.reopen()
        elif status.fsm.can("start"):
            status.fsm.start()
        self._notify(status)
        return status

    def step(self, name: str, description: str) -> None:
        """Record a sub-step; the coarse state doesn't change."""
        status = self.get_or_create(name)
        status.record_step(description)
        self._notify(status)

    def succeed(self, name: str, description: str) -> None:
        status = self.get_or_create(name)
        status.record_step(description)
        status.fsm.succeed()
        self._notify(status)

    def fail(self, name: str, description: str) -> None:
        status = self.get_or_create(name)
        status.record_step(description)
        status.fsm.fail()
        self._notify(status)

    def names_in_state(self, state: str) -> list[str]:
        return [s.name for s in self._projects.values() if s.state == state]

    def _notify(self, status: ProjectStatus) -> None:
        if self.listener:
            self.listener(self, status)
