"""Helpers shared by several commands."""

from depbump.api.client import ApiClient
from depbump.api.ocr import TesseractCaptchaSolver
from depbump.lib.config import AppConfig, ConfigStore
from depbump.lib.context import SessionContext
from depbump.lib.errors import MissingCredentials
from depbump.lib.prompts import prompt_required, prompt_secret


def build_client(store: ConfigStore, config: AppConfig) -> ApiClient:
    """API client wired to the stored session and the OCR captcha solver."""
    session = SessionContext.from_config(store, config)
    return ApiClient(session, TesseractCaptchaSolver(), config.endpoints)


def ensure_credentials(store: ConfigStore, config: AppConfig) -> AppConfig:
    """Prompt for credentials if they are not stored yet.

    Raises:
        MissingCredentials: If the operator gives no answer
    """
    if config.credentials.complete:
        return config

    print("Credentials are only asked once and stored in", store.path)
    username = prompt_required("Username")
    if username is None:
        raise MissingCredentials("No username entered")
    password = prompt_secret("Password")
    if password is None:
        raise MissingCredentials("No password entered")
    return store.save_credentials(username, password)
