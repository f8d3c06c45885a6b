from __future__ import annotations

from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError


def payload_text(data: bytes) -> str:
    """Decode a QR payload; codes are issued as UTF-8 text."""
    try:
        return data.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise ValidationError("The QR code does not contain an attendance code")


def decode_qr_image(stream: BinaryIO) -> str:
    """Return the text of the first QR code found in an uploaded image."""
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("The uploaded file is not an image")

    # pyzbar loads the native zbar library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")
    return payload_text(decoded[0].data)
