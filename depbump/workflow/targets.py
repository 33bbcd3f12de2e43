"""Branch name -> update target resolution."""

from depbump.lib.constants import BRANCH_SEPARATOR
from depbump.lib.errors import ValidationError
from depbump.lib.types import UpdateTarget


def resolve_target(branch_name: str) -> UpdateTarget:
    """
    Derive the project from a branch name.

    The project name is everything before the first separator:
    "web-feature-login" -> project "web".

    Raises:
        ValidationError: If the branch has no separator or an empty prefix
    """
    project, sep, _ = branch_name.partition(BRANCH_SEPARATOR)
    if not sep or not project:
        raise ValidationError(
            f"Branch '{branch_name}' does not start with '<project>{BRANCH_SEPARATOR}'"
        )
    return UpdateTarget(project_name=project, branch_name=branch_name)
