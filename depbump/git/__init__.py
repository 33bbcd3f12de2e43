"""Git operations for depbump.

Thin wrappers over the shared command runner.

Return type conventions:
- Functions returning CommandResult: Caller must check .success before using output.
  Examples: stage_all(), commit(), pull(), push()
- Functions returning parsed values: Return None on failure.
  Examples: get_current_branch(), get_global_identity(), has_staged_changes()
"""

from depbump.git.runner import (
    CommandResult,
    run_command,
    run_git,
)
from depbump.git.branch import (
    get_current_branch,
    checkout_branch,
)
from depbump.git.commit import (
    stage_all,
    has_staged_changes,
    commit,
)
from depbump.git.remote import (
    pull,
    push,
)
from depbump.git.identity import (
    GitIdentity,
    get_global_identity,
    set_local_identity,
)

__all__ = [
    # runner
    "CommandResult",
    "run_command",
    "run_git",
    # branch
    "get_current_branch",
    "checkout_branch",
    # commit
    "stage_all",
    "has_staged_changes",
    "commit",
    # remote
    "pull",
    "push",
    # identity
    "GitIdentity",
    "get_global_identity",
    "set_local_identity",
]
