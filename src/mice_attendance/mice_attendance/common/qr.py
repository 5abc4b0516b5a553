from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image

from ..core.constants import QR_BORDER, QR_BOX_SIZE
from ..core.exceptions import ValidationError


def make_qr_png(data: str) -> bytes:
    """Render ``data`` as a black-on-white QR code PNG."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> str:
    """Decode the first QR code found in an uploaded camera frame."""

    try:
        img = Image.open(stream).convert("RGB")
    except (OSError, ValueError):
        raise ValidationError("Uploaded file is not a readable image") from None

    # pyzbar loads the native zbar library on import.
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code detected in the image")

    return decoded[0].data.decode("utf-8").strip()
