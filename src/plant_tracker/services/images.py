"""Image encoding for outbound provider calls."""

import base64
import binascii

from plant_tracker.domain.identification import EncodedImage


def encode_image(image_bytes: bytes) -> EncodedImage:
    """Encode raw image bytes once for reuse by every provider call."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return EncodedImage(base64=encoded, mime_type=_detect_mime_type(image_bytes))


def from_base64(image_base64: str) -> EncodedImage:
    """Wrap client-supplied base64 text, accepting an optional data URL prefix.

    Whitespace is dropped. Raises ValueError when the text is not valid base64.
    """
    payload = image_base64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", maxsplit=1)[1]
    payload = "".join(payload.split())
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Image data is not valid base64") from exc
    return EncodedImage(base64=payload, mime_type=_detect_mime_type(image_bytes))


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
