"""Image attachment OCR: download, recognize text, extract keys"""

import io
from typing import Callable, List

import pytesseract
import requests
from PIL import Image

from .config import Config
from .extractor import extract_keys
from .logs import log


def image_to_text(data: bytes) -> str:
    """Decode image bytes and OCR them with tesseract's default settings"""
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return pytesseract.image_to_string(image)


class AttachmentResolver:
    """Best-effort key extraction from an image attachment.

    Network, decode and OCR failures are routine (non-image uploads, expired
    CDN links, unreadable screenshots) and all resolve to "no keys".
    """

    def __init__(self, cfg: Config, session: requests.Session,
                 ocr: Callable[[bytes], str] = image_to_text):
        self.cfg = cfg
        self.session = session
        self.ocr = ocr

    def fetch(self, url: str) -> bytes:
        resp = self.session.get(url, timeout=self.cfg.timeout)
        resp.raise_for_status()
        return resp.content

    def resolve(self, url: str) -> List[str]:
        """Keys found in the image at url, or [] if anything along the way fails"""
        try:
            data = self.fetch(url)
            text = self.ocr(data)
        except Exception as e:
            if self.cfg.verbose:
                log(f"Skipping attachment {url}: {e}")
            return []

        return extract_keys(text, self.cfg.key_lengths, self.cfg.strict, self.cfg.ignore_urls)
