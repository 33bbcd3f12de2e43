"""
Remote project directory.

Lists the branches the logged-in user owns and refreshes CDN URLs.
"""

import logging
from dataclasses import dataclass

from depbump.api.client import ApiClient
from depbump.lib.config import Endpoints
from depbump.lib.errors import RemoteRequestFailure

logger = logging.getLogger(__name__)

WORK_ITEM_SEPARATOR = "@%@"


@dataclass(frozen=True)
class Branch:
    """A branch descriptor as returned by the project directory."""
    branch_name: str
    engine_type: str
    creator: str = ""
    work_item: str = ""

    @property
    def work_item_title(self) -> str:
        """Human-readable part of the work item reference."""
        return self.work_item.split(WORK_ITEM_SEPARATOR)[-1]

    @classmethod
    def from_api(cls, data: dict) -> "Branch":
        return cls(
            branch_name=data["branchName"],
            engine_type=data.get("engineType", ""),
            # The API spells it "createor"
            creator=data.get("createor", data.get("creator", "")) or "",
            work_item=data.get("workItem", "") or "",
        )

    def to_dict(self) -> dict:
        return {
            "branchName": self.branch_name,
            "engineType": self.engine_type,
            "creator": self.creator,
            "workItem": self.work_item,
        }


def list_branches(client: ApiClient, endpoints: Endpoints) -> list[Branch]:
    """
    Fetch the user's open branches, filtered to the configured engine type.

    Raises:
        RemoteRequestFailure: If the response has no branch list
    """
    params = {
        "p_pageIndex": 1,
        "projectId": 0,
        "branchState": 1,
    }
    payload = client.fetch("GET", endpoints.branches_url, params=params)
    if not isinstance(payload, dict) or not isinstance(payload.get("datalist"), list):
        raise RemoteRequestFailure(endpoints.branches_url, "response has no branch list")

    branches = []
    for item in payload["datalist"]:
        if not isinstance(item, dict) or "branchName" not in item:
            logger.debug(f"Skipping malformed branch entry: {item!r}")
            continue
        branch = Branch.from_api(item)
        if branch.engine_type == endpoints.engine_type:
            branches.append(branch)

    logger.info(f"Found {len(branches)} '{endpoints.engine_type}' branches")
    return branches


def refresh_cdn_urls(client: ApiClient, endpoints: Endpoints, urls: list[str]):
    """Ask the CDN to refresh the given URLs. Returns the API's payload."""
    return client.fetch(
        "POST",
        endpoints.cdn_url,
        data={"urls": "\n".join(urls)},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
