"""Tesseract-backed captcha solver."""

import io
import logging

import pytesseract
from PIL import Image, UnidentifiedImageError

from depbump.lib.errors import CaptchaUnsolved

logger = logging.getLogger(__name__)

CHAR_WHITELIST = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
THRESHOLD = 128


def binarize(image: Image.Image, threshold: int = THRESHOLD) -> Image.Image:
    """Greyscale then hard threshold, which strips most captcha noise."""
    grey = image.convert("L")
    return grey.point(lambda px: 255 if px >= threshold else 0, mode="1")


class TesseractCaptchaSolver:
    """Recognises captcha text with Tesseract OCR."""

    def __init__(self, lang: str = "eng", threshold: int = THRESHOLD):
        self.lang = lang
        self.threshold = threshold

    def solve(self, image: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image)) as img:
                processed = binarize(img, self.threshold)
        except (UnidentifiedImageError, OSError) as e:
            raise CaptchaUnsolved(f"Captcha image could not be decoded: {e}", original_error=e) from e

        config = f"--psm 7 -c tessedit_char_whitelist={CHAR_WHITELIST}"
        try:
            text = pytesseract.image_to_string(processed, lang=self.lang, config=config)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise CaptchaUnsolved(f"Tesseract failed: {e}", original_error=e) from e

        text = "".join(text.split())
        logger.debug(f"Captcha recognised as '{text}'")
        return text
