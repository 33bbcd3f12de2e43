"""
depbump config - Show and change stored settings.
"""

from pathlib import Path

from depbump.commands.common import ensure_credentials
from depbump.lib.config import ConfigStore, Credentials


def cmd_config_show(args, store: ConfigStore) -> int:
    config = store.load()
    print(f"Config file:   {store.path}")
    print(f"Project root:  {config.root or '(not set)'}")
    print(f"Username:      {config.credentials.username or '(not set)'}")
    print(f"Session:       {'stored' if config.session_token else 'none'}")
    print(f"Presets:       {len(config.presets)}")
    print(f"Registry:      {config.settings.registry}")
    print(f"Default Node:  {config.settings.default_node_version}")
    print(f"Branch policy: {config.settings.branch_policy}")
    return 0


def cmd_config_root(args, store: ConfigStore) -> int:
    root = Path(args.path).expanduser().resolve()
    if not root.is_dir():
        print(f"ERROR: {root} is not a directory")
        return 1
    store.save_root(str(root))
    print(f"Project root set to {root}")
    return 0


def cmd_config_credentials(args, store: ConfigStore) -> int:
    config = store.load()
    # Clear first so ensure_credentials prompts
    config.credentials = Credentials()
    config = ensure_credentials(store, config)
    print(f"Credentials saved for {config.credentials.username}")
    return 0
