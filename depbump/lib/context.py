"""
Session context shared by the API client and the CLI.

Holds what would otherwise be process-wide state: the credentials, the
current session cookie, and the captcha key generated once per process.
"""

import logging
import uuid
from dataclasses import dataclass, field

from depbump.lib.config import AppConfig, ConfigStore, Credentials

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Credentials plus the live session token for one run."""
    store: ConfigStore
    credentials: Credentials
    token: str | None = None
    captcha_key: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_config(cls, store: ConfigStore, config: AppConfig) -> "SessionContext":
        return cls(
            store=store,
            credentials=config.credentials,
            token=config.session_token,
        )

    def renew(self, token: str) -> None:
        """Adopt a freshly issued session token and persist it."""
        self.token = token
        self.store.save_session(token)
        logger.info("Session renewed and saved")
