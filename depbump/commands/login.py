"""
depbump login - Force a fresh login and store the session.
"""

from depbump.commands.common import build_client, ensure_credentials
from depbump.lib.config import ConfigStore


def cmd_login(args, store: ConfigStore) -> int:
    config = ensure_credentials(store, store.load())
    with build_client(store, config) as client:
        client.login()
    print(f"Logged in as {config.credentials.username}, session saved")
    return 0
