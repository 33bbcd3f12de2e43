"""Error hierarchy for depbump.

Every error a run can surface derives from DepbumpError so the CLI can report
it and exit non-zero without a traceback.
"""

from typing import Optional


class DepbumpError(Exception):
    """Base exception for depbump errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationMissing(DepbumpError):
    """A required setting (project root, credentials) is not configured."""


class ValidationError(DepbumpError):
    """Input or stored data failed validation."""

    def __init__(self, message: str, schema_name: str | None = None, path: str | None = None):
        self.schema_name = schema_name
        self.path = path
        prefix = f"[{schema_name}] " if schema_name else ""
        suffix = f" at {path}" if path else ""
        super().__init__(f"{prefix}{message}{suffix}")


class AuthenticationFailure(DepbumpError):
    """Login did not produce a session."""

    def __init__(self, message: str, attempts: int = 0, original_error: Optional[Exception] = None):
        super().__init__(message, original_error=original_error)
        self.attempts = attempts


class CaptchaUnsolved(AuthenticationFailure):
    """The captcha challenge could not be fetched or recognised."""

    def __init__(self, message: str = "Captcha recognition failed", original_error: Optional[Exception] = None):
        super().__init__(message, original_error=original_error)


class MissingCredentials(AuthenticationFailure, ConfigurationMissing):
    """Username or password is not configured."""

    def __init__(self, message: str = "Username or password not configured; run 'depbump config credentials'"):
        super().__init__(message)


class MissingSessionToken(AuthenticationFailure):
    """The login response carried no session cookie."""

    def __init__(self, message: str = "Login response did not include a session cookie"):
        super().__init__(message)


class RemoteRequestFailure(DepbumpError):
    """An API request failed even after re-authenticating."""

    def __init__(self, url: str, message: str, original_error: Optional[Exception] = None):
        super().__init__(f"Request to {url} failed: {message}", original_error=original_error)
        self.url = url


class LocalProjectNotFound(DepbumpError):
    """The project directory does not exist under the configured root."""

    def __init__(self, project_name: str, root: str):
        super().__init__(f"Project '{project_name}' not found under {root}")
        self.project_name = project_name
        self.root = root


class BranchReconciliationFailure(DepbumpError):
    """The checkout is on the wrong branch and could not be switched."""


class ExternalToolFailure(DepbumpError):
    """An external command (git, nvm, package manager) exited non-zero."""

    def __init__(self, tool: str, message: str, returncode: int | None = None, output: str = ""):
        full = f"{tool}: {message}"
        if output:
            full += f"\n{output}"
        super().__init__(full)
        self.tool = tool
        self.returncode = returncode
        self.output = output
