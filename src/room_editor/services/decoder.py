"""Decoding of provider image payloads into raw bytes."""

import base64
import binascii
from dataclasses import dataclass

from room_editor.domain.errors import DecodeError

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class DecodedImage:
    """Image bytes with the content type they should be stored under."""

    data: bytes
    content_type: str

    @property
    def extension(self) -> str:
        """File extension matching the content type.

        Types without a known mapping use their subtype, so ``image/gif``
        becomes ``gif``.
        """
        if self.content_type in _EXTENSIONS:
            return _EXTENSIONS[self.content_type]
        subtype = self.content_type.partition("/")[2].split("+", 1)[0].lower()
        return subtype if subtype.isalnum() else "jpg"


def decode_result(payload: str) -> bytes:
    """Decode a data URL or bare base64 string into bytes.

    Only the part after the first comma is decoded when a declaration such as
    ``data:image/jpeg;base64,`` precedes the content. The bytes are not checked
    to be a valid image.
    """
    encoded = payload.split(",", 1)[1] if "," in payload else payload
    try:
        return base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Provider returned an undecodable image payload") from exc


def decode_image(payload: str, default_content_type: str = "image/jpeg") -> DecodedImage:
    """Decode a payload and pick a content type for storage."""
    data = decode_result(payload)
    content_type = _declared_mime_type(payload) or _detect_mime_type(
        data, default_content_type
    )
    return DecodedImage(data=data, content_type=content_type)


def _declared_mime_type(payload: str) -> str | None:
    """Return the MIME type from a ``data:<type>;base64,`` prefix, if any."""
    if "," not in payload:
        return None
    declaration = payload.split(",", 1)[0]
    if not declaration.startswith("data:"):
        return None
    mime_type = declaration[len("data:") :].split(";", 1)[0].strip()
    return mime_type or None


def _detect_mime_type(data: bytes, default: str) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return default
