"""
Configuration store for depbump.

One YAML file holds credentials, the session cookie, the project root,
saved presets, API endpoints and update settings. The file is read at
startup and rewritten after every mutation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from depbump.lib import validate
from depbump.lib.constants import (
    BRANCH_POLICY_PROMPT,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_NODE_VERSION,
    DEFAULT_REGISTRY,
)
from depbump.lib.errors import ValidationError
from depbump.lib.types import Preset

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEPBUMP_CONFIG_FILE"
DEFAULT_CONFIG_NAME = ".deps-cli.yaml"


@dataclass
class Credentials:
    """Login credentials, entered once and persisted."""
    username: str = ""
    password: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.username) and bool(self.password)


@dataclass
class Endpoints:
    """Remote API endpoints."""
    captcha_url: str = "https://zzsso.zhuanspirit.com/external/getValidateCode"
    login_url: str = "https://zzsso.zhuanspirit.com/external/login"
    branches_url: str = "https://beetle.zhuanspirit.com/apiBeetle/project/branchingmyself"
    cdn_url: str = "https://order.zhuanspirit.com/api/apply_order/CdnUrls"
    engine_type: str = "fe"  # Only branches of this engine type are offered


@dataclass
class UpdateSettings:
    """How targets are updated."""
    registry: str = DEFAULT_REGISTRY
    default_node_version: str = DEFAULT_NODE_VERSION
    branch_policy: str = BRANCH_POLICY_PROMPT  # auto | prompt | reject
    nvm_dir: str | None = None  # Defaults to $NVM_DIR or ~/.nvm
    history_limit: int = DEFAULT_HISTORY_LIMIT


@dataclass
class AppConfig:
    """Everything persisted in the config file."""
    credentials: Credentials = field(default_factory=Credentials)
    session_token: str | None = None
    root: str = ""
    presets: dict[str, Preset] = field(default_factory=dict)
    endpoints: Endpoints = field(default_factory=Endpoints)
    settings: UpdateSettings = field(default_factory=UpdateSettings)

    def to_dict(self) -> dict:
        return {
            "auth": {
                "username": self.credentials.username,
                "password": self.credentials.password,
                "session": self.session_token,
            },
            "projects": {"root": self.root},
            "presets": {name: preset.to_dict() for name, preset in self.presets.items()},
            "api": {
                "captcha_url": self.endpoints.captcha_url,
                "login_url": self.endpoints.login_url,
                "branches_url": self.endpoints.branches_url,
                "cdn_url": self.endpoints.cdn_url,
                "engine_type": self.endpoints.engine_type,
            },
            "update": {
                "registry": self.settings.registry,
                "default_node_version": self.settings.default_node_version,
                "branch_policy": self.settings.branch_policy,
                "nvm_dir": self.settings.nvm_dir,
                "history_limit": self.settings.history_limit,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        auth = data.get("auth") or {}
        projects = data.get("projects") or {}
        api = data.get("api") or {}
        update = data.get("update") or {}
        return cls(
            credentials=Credentials(
                username=auth.get("username") or "",
                password=auth.get("password") or "",
            ),
            session_token=auth.get("session") or None,
            root=projects.get("root") or "",
            presets={
                name: Preset.from_dict(preset)
                for name, preset in (data.get("presets") or {}).items()
            },
            endpoints=Endpoints(**api),
            settings=UpdateSettings(**update),
        )


def default_config_path() -> Path:
    """Config file location: $DEPBUMP_CONFIG_FILE or ~/.deps-cli.yaml."""
    custom = os.environ.get(CONFIG_ENV_VAR)
    if custom:
        return Path(custom).expanduser()
    return Path.home() / DEFAULT_CONFIG_NAME


class ConfigStore:
    """Reads and writes the config file.

    Each mutating helper re-reads the file, applies one change and writes it
    back, so concurrent edits from another invocation are not clobbered
    wholesale.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or default_config_path()

    def load(self) -> AppConfig:
        """Load the config file, returning defaults if it doesn't exist.

        Raises:
            ValidationError: If the file is not valid YAML or fails the schema
        """
        if not self.path.exists():
            return AppConfig()

        try:
            data = yaml.safe_load(self.path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML in {self.path}: {e}", "config") from None

        if not isinstance(data, dict):
            raise ValidationError(f"{self.path} must contain a mapping", "config")

        validate.validate(data, "config")
        return AppConfig.from_dict(data)

    def save(self, config: AppConfig) -> None:
        """Validate and write the whole config."""
        data = config.to_dict()
        validate.validate_before_write(data, "config", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
        logger.debug(f"Wrote config to {self.path}")

    def save_root(self, root: str) -> AppConfig:
        config = self.load()
        config.root = root
        self.save(config)
        return config

    def save_credentials(self, username: str, password: str) -> AppConfig:
        config = self.load()
        config.credentials = Credentials(username=username, password=password)
        self.save(config)
        return config

    def save_session(self, token: str) -> AppConfig:
        config = self.load()
        config.session_token = token
        self.save(config)
        return config

    def load_presets(self) -> dict[str, Preset]:
        return self.load().presets

    def save_preset(self, name: str, preset: Preset) -> AppConfig:
        """Store a preset under name.

        Raises:
            ValidationError: If the name is empty or taken, or the preset is malformed
        """
        name = name.strip()
        if not name:
            raise ValidationError("Preset name must not be empty")
        validate.validate(preset.to_dict(), "preset")
        config = self.load()
        # Saved presets only change through delete
        if name in config.presets:
            raise ValidationError(f"Preset '{name}' already exists")
        config.presets[name] = preset
        self.save(config)
        return config

    def delete_preset(self, name: str) -> bool:
        """Delete a preset. Returns False if it didn't exist."""
        name = name.strip()
        config = self.load()
        if name not in config.presets:
            return False
        del config.presets[name]
        self.save(config)
        return True
