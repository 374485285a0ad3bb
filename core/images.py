# core/images.py
import base64
import binascii
from typing import Tuple
from util.enums import ErrorMessage
from util.errors import BadRequest

_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\xff\xd8\xff", "image/jpeg"),
)


def sniff_mime(data: bytes) -> str:
    for magic, mime in _SIGNATURES:
        if data.startswith(magic):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def decode_image(image_base64: str) -> Tuple[str, str]:
    """
    Accepts bare base64 or a data URL. Returns (clean base64, mime type).
    """
    raw = (image_base64 or "").strip()
    if raw.startswith("data:") and "," in raw:
        raw = raw.split(",", 1)[1]
    # MIME-style encoders wrap lines every 76 chars
    raw = "".join(raw.split())
    try:
        data = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequest(ErrorMessage.INVALID_IMAGE.value.message)
    if not data:
        raise BadRequest(ErrorMessage.INVALID_IMAGE.value.message)
    return raw, sniff_mime(data)
