"""
QR code encoding for sharing WristDoc reports offline.

The report text is encoded as UTF-8 bytes into the smallest QR version
that holds it at error-correction level M, drawn at a fixed module size
so phone cameras can read it. Reports that don't fit come back as a
PayloadTooLargeError result; callers show a placeholder instead.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from qrcode.util import MODE_8BIT_BYTE, QRData

from wristdoc.errors import EncodeError, PayloadTooLargeError

logger = logging.getLogger(__name__)

ERROR_CORRECTION = qrcode.constants.ERROR_CORRECT_M
BOX_SIZE = 10  # pixels per module
BORDER = 4  # quiet zone, in modules

# Version 40, level M, byte mode
MAX_PAYLOAD_BYTES = 2331


@dataclass
class EncodeResult:
    """Rendered QR image, or the reason it couldn't be made."""
    success: bool
    image: Optional[Image.Image] = None
    error: Optional[EncodeError] = None
    version: Optional[int] = None

    @classmethod
    def ok(cls, image: Image.Image, version: int) -> "EncodeResult":
        return cls(success=True, image=image, version=version)

    @classmethod
    def fail(cls, error: EncodeError) -> "EncodeResult":
        return cls(success=False, error=error)


def encode(text: str) -> EncodeResult:
    """
    Encode text as a QR code image.

    Args:
        text: Report text

    Returns:
        EncodeResult with a PIL image, or a PayloadTooLargeError
    """
    payload = text.encode("utf-8")
    if len(payload) > MAX_PAYLOAD_BYTES:
        logger.warning(f"Report too large for QR code: {len(payload)} bytes")
        return EncodeResult.fail(PayloadTooLargeError(len(payload), MAX_PAYLOAD_BYTES))

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION,
        box_size=BOX_SIZE,
        border=BORDER,
    )
    qr.add_data(QRData(payload, mode=MODE_8BIT_BYTE))
    try:
        qr.make(fit=True)
    except DataOverflowError:
        logger.warning(f"Report too large for QR code: {len(payload)} bytes")
        return EncodeResult.fail(PayloadTooLargeError(len(payload), MAX_PAYLOAD_BYTES))

    image = qr.make_image(image_factory=PilImage).get_image()
    logger.debug(f"Encoded {len(payload)} bytes as QR version {qr.version}")
    return EncodeResult.ok(image, qr.version)


def encode_to_png(text: str, path: Union[str, Path]) -> EncodeResult:
    """Encode text and save the image as a PNG at `path` when it fits."""
    result = encode(text)
    if result.success:
        result.image.save(Path(path), format="PNG")
        logger.info(f"Saved QR code to {path}")
    return result
