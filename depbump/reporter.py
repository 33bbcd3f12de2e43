"""
Terminal status reporter.

Renders the status board after every write. On a TTY the previous render
is erased and redrawn in place; otherwise one line per update is appended.
"""

import sys
from typing import TextIO

from depbump.workflow.fsm import FAILED, IN_PROGRESS, PENDING, SUCCEEDED
from depbump.workflow.status import ProjectStatus, StatusBoard

RESET = "\033[0m"
BOLD = "\033[1m"
STATE_COLORS = {
    PENDING: "\033[33m",      # yellow
    IN_PROGRESS: "\033[34m",  # blue
    SUCCEEDED: "\033[32m",    # green
    FAILED: "\033[31m",       # red
}
STATE_LABELS = {
    PENDING: "pending",
    IN_PROGRESS: "in progress",
    SUCCEEDED: "succeeded",
    FAILED: "failed",
}
HISTORY_COLOR = "\033[92m"


def first_line(text: str) -> str:
    """First line of a step label; tool output stays in the summary and the log."""
    return text.splitlines()[0] if text else ""


def format_state(state: str, color: bool = True) -> str:
    label = STATE_LABELS.get(state, state)
    if not color:
        return label
    return f"{STATE_COLORS.get(state, '')}{label}{RESET}"


def render_project(status: ProjectStatus, color: bool = True) -> list[str]:
    """Lines for one project: header, then completed steps."""
    name = f"{BOLD}{status.name}:{RESET}" if color else f"{status.name}:"
    header = f"{name} {format_state(status.state, color)}"
    if status.current_step:
        header += f" - {first_line(status.current_step)}"
    lines = [header]
    # Everything but the current step
    for detail in list(status.history)[:-1]:
        line = f"  ✓ {first_line(detail)}"
        lines.append(f"{HISTORY_COLOR}{line}{RESET}" if color else line)
    return lines


def render_board(board: StatusBoard, color: bool = True) -> list[str]:
    lines = ["Project status:"]
    for status in board:
        lines.append("")
        lines.extend(render_project(status, color))
    return lines


class TerminalReporter:
    """StatusBoard listener that writes to a terminal stream."""

    def __init__(self, stream: TextIO | None = None, live: bool | None = None):
        self.stream = stream or sys.stdout
        is_tty = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.live = is_tty if live is None else live
        self._drawn_lines = 0

    def __call__(self, board: StatusBoard, status: ProjectStatus) -> None:
        if self.live:
            self._redraw(board)
        else:
            line = f"[{status.name}] {format_state(status.state, color=False)}"
            if status.current_step:
                line += f" - {status.current_step}"
            self.stream.write(line + "\n")
        self.stream.flush()

    def _redraw(self, board: StatusBoard) -> None:
        if self._drawn_lines:
            # Cursor up N lines, then clear to end of screen
            self.stream.write(f"\033[{self._drawn_lines}F\033[J")
        frame = "\n".join(render_board(board))
        self.stream.write(frame + "\n")
        self._drawn_lines = frame.count("\n") + 1
