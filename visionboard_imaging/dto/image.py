# visionboard_imaging/dto/image.py
from __future__ import annotations

import base64
import binascii
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from visionboard_imaging.data.constants import DEFAULT_IMAGE_MIME

_DATA_URI_MIME = re.compile(r"^data:(?P<mime>[^;,]*)")


class ImagePayload(BaseModel):
    """An image as raw bytes plus its MIME type."""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = DEFAULT_IMAGE_MIME

    @classmethod
    def from_string(cls, value: str) -> ImagePayload:
        """
        Parses either a data URI (``data:image/png;base64,...``) or a bare base64
        string. Bare base64 is assumed to be JPEG.
        """
        value = value.strip()
        if "base64," in value:
            header, _, encoded = value.partition("base64,")
            match = _DATA_URI_MIME.match(header)
            mime_type = (match.group("mime") if match else "") or DEFAULT_IMAGE_MIME
            return cls(data=_decode_base64(encoded), mime_type=mime_type)
        return cls(data=_decode_base64(value), mime_type=DEFAULT_IMAGE_MIME)

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str = DEFAULT_IMAGE_MIME) -> ImagePayload:
        return cls(data=_decode_base64(encoded), mime_type=mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    def to_part(self) -> dict[str, Any]:
        """Inline-data part in the shape the Gen AI SDK accepts."""
        return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


def _decode_base64(encoded: str) -> bytes:
    cleaned = "".join(encoded.split())
    if not cleaned:
        raise ValueError("Image data is empty.")
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Image data is not valid base64.") from e
