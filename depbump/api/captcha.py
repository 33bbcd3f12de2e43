"""Captcha solver interface."""

from typing import Protocol


class CaptchaSolver(Protocol):
    """Turns a captcha challenge image into its text.

    Best effort: may return an empty string or raise CaptchaUnsolved.
    """

    def solve(self, image: bytes) -> str:
        ...
