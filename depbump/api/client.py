"""
Authenticated API client.

Every request carries the stored session cookie. Sessions expire silently,
so any failed request is treated as a possibly expired session: the client
logs in again (captcha included) and retries the request exactly once.

Login protocol:
1. GET the captcha image, keyed by the per-process captcha key
2. Recognise the text with the CaptchaSolver
3. POST credentials + captcha text + the same key as a form
4. Take the session from the Set-Cookie response header

Each login attempt uses a fresh captcha; challenges are single-use.
"""

import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from typing import Any

import httpx

from depbump.api.captcha import CaptchaSolver
from depbump.lib.config import Endpoints
from depbump.lib.constants import LOGIN_MAX_ATTEMPTS, LOGIN_RETRY_DELAY
from depbump.lib.context import SessionContext
from depbump.lib.errors import (
    AuthenticationFailure,
    CaptchaUnsolved,
    MissingCredentials,
    MissingSessionToken,
    RemoteRequestFailure,
)
from depbump.lib.retry import Outcome, RetryPolicy

logger = logging.getLogger(__name__)

# Conditions treated as "session may have expired"
REQUEST_ERRORS = (httpx.HTTPError, ValueError, RemoteRequestFailure)


@dataclass(frozen=True)
class Envelope:
    """A decoded API response.

    Most endpoints wrap their result in a field (respData, data); some
    don't. payload is the wrapped value when present.
    """
    body: Any
    payload: Any = None

    @classmethod
    def parse(cls, body: Any, payload_key: str | None) -> "Envelope":
        payload = None
        if payload_key and isinstance(body, dict):
            payload = body.get(payload_key)
        return cls(body=body, payload=payload)

    def unwrap(self) -> Any:
        """The nested payload if present, else the raw body."""
        if self.payload is not None:
            return self.payload
        return self.body


def extract_session_cookie(response: httpx.Response) -> str | None:
    """Collapse Set-Cookie headers into a Cookie header value.

    Only the name=value pair of each cookie is kept; attributes such as Path
    and HttpOnly are dropped.
    """
    pairs = []
    for header in response.headers.get_list("set-cookie"):
        pair = header.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)
    return "; ".join(pairs) or None


class ApiClient:
    """HTTP client that keeps itself logged in.

    Usage:
        client = ApiClient(session, TesseractCaptchaSolver(), config.endpoints)
        data = client.fetch("GET", url, params={"projectId": 0})
    """

    def __init__(
        self,
        session: SessionContext,
        solver: CaptchaSolver,
        endpoints: Endpoints,
        http: httpx.Client | None = None,
        login_policy: RetryPolicy | None = None,
    ):
        self.session = session
        self.solver = solver
        self.endpoints = endpoints
        self.http = http or httpx.Client(follow_redirects=True)
        self.login_policy = login_policy or RetryPolicy(
            max_attempts=LOGIN_MAX_ATTEMPTS,
            delay=LOGIN_RETRY_DELAY,
        )
        self._renew_lock = threading.Lock()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def fetch(
        self,
        method: str,
        url: str,
        *,
        params: dict | None = None,
        data: dict | None = None,
        headers: dict | None = None,
        payload_key: str | None = "respData",
    ) -> Any:
        """
        Make an authenticated request and return the unwrapped payload.

        Raises:
            AuthenticationFailure: If re-login was needed and failed
            RemoteRequestFailure: If the request failed again after re-login
        """
        token = self.session.token
        try:
            return self._send(method, url, token, params, data, headers, payload_key).unwrap()
        except REQUEST_ERRORS as e:
            logger.info(f"{method} {url} failed ({e}), renewing session")

        token = self.renew_session(stale_token=token)
        try:
            return self._send(method, url, token, params, data, headers, payload_key).unwrap()
        except REQUEST_ERRORS as e:
            raise RemoteRequestFailure(url, str(e), original_error=e) from e

    def renew_session(self, stale_token: str | None) -> str:
        """
        Replace stale_token with a fresh session.

        Only one renewal runs at a time. A caller that finds the token already
        replaced by someone else reuses it instead of logging in again.
        """
        with self._renew_lock:
            current = self.session.token
            if current and current != stale_token:
                logger.debug("Session already renewed by another request")
                return current
            return self.login()

    def login(self) -> str:
        """
        Log in, persist the new session, and return it.

        Raises:
            MissingCredentials: If username or password is not configured
            AuthenticationFailure: If every attempt failed
        """
        if not self.session.credentials.complete:
            raise MissingCredentials()

        def on_retry(attempt: int, error: Exception) -> None:
            logger.warning(
                f"Login attempt {attempt}/{self.login_policy.max_attempts} failed: {error}; "
                "check your network/VPN, retrying"
            )

        outcome = self.login_policy.run(lambda attempt: self._attempt_login(), on_retry=on_retry)
        if not outcome.ok:
            logger.error(f"Login failed after {outcome.attempts} attempts: {outcome.error}")
            raise AuthenticationFailure(
                f"Authentication failed after {outcome.attempts} attempts: {outcome.error}",
                attempts=outcome.attempts,
                original_error=outcome.error,
            ) from outcome.error

        self.session.renew(outcome.value)
        return outcome.value

    def _attempt_login(self) -> Outcome:
        try:
            return Outcome.success(self._login_once())
        except (AuthenticationFailure, httpx.HTTPError, ValueError) as e:
            return Outcome.failure(e)

    def _login_once(self) -> str:
        captcha_text = self._solve_captcha()
        creds = self.session.credentials
        form = {
            "company": "0",
            "userName": creds.username,
            "password": creds.password,
            "graphicsCode": captcha_text,
            "key": self.session.captcha_key,
            "appType": "0",
        }
        response = self.http.post(self.endpoints.login_url, data=form)
        response.raise_for_status()
        body = response.json()
        token = extract_session_cookie(response)
        if not token:
            message = body.get("respMsg") if isinstance(body, dict) else None
            if message:
                raise MissingSessionToken(f"Login rejected: {message}")
            raise MissingSessionToken()
        logger.info(f"Logged in as {creds.username}")
        return token

    def _solve_captcha(self) -> str:
        response = self.http.get(
            self.endpoints.captcha_url,
            params={"key": self.session.captcha_key},
        )
        response.raise_for_status()
        encoded = Envelope.parse(response.json(), "data").payload
        if not encoded:
            raise CaptchaUnsolved("Captcha endpoint returned no image")
        try:
            image = base64.b64decode(encoded)
        except (binascii.Error, TypeError) as e:
            raise CaptchaUnsolved(f"Captcha image is not valid base64: {e}", original_error=e) from e

        text = (self.solver.solve(image) or "").strip()
        if not text:
            raise CaptchaUnsolved()
        return text

    def _send(
        self,
        method: str,
        url: str,
        token: str | None,
        params: dict | None,
        data: dict | None,
        headers: dict | None,
        payload_key: str | None,
    ) -> Envelope:
        merged = dict(headers or {})
        if token:
            merged["Cookie"] = token
        response = self.http.request(method, url, params=params, data=data, headers=merged)
        response.raise_for_status()
        return Envelope.parse(response.json(), payload_key)
