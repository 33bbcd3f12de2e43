"""
depbump branches - List branches available for update.
"""

from depbump.api.directory import list_branches
from depbump.commands.common import build_client, ensure_credentials
from depbump.lib.config import ConfigStore
from depbump.lib.errors import ValidationError
from depbump.workflow.targets import resolve_target


def cmd_branches(args, store: ConfigStore) -> int:
    config = ensure_credentials(store, store.load())
    with build_client(store, config) as client:
        branches = list_branches(client, config.endpoints)

    if not branches:
        print(f"No '{config.endpoints.engine_type}' branches found")
        return 0

    for branch in branches:
        try:
            project = resolve_target(branch.branch_name).project_name
        except ValidationError:
            project = "?"
        print(f"{branch.branch_name}")
        print(f"  project: {project}  creator: {branch.creator}  work item: {branch.work_item_title}")
    return 0
