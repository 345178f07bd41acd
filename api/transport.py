# Path: api/transport.py
# Purpose: Decode request payloads into raw image bytes.
# Layer: api.
# Details: Bitmaps arrive as data URIs (base64); SVG markup arrives as text.

from __future__ import annotations

import base64
import binascii
import re

from core.errors import DecodeError

_DATA_URI_PREFIX = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,")


def decode_data_uri(payload: str) -> bytes:
    """Strip an optional ``data:image/...;base64,`` prefix and base64-decode the rest."""

    encoded = _DATA_URI_PREFIX.sub("", payload.strip(), count=1)
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 image payload: {exc}") from exc


def encode_markup(payload: str) -> bytes:
    """Return SVG markup as UTF-8 bytes."""

    return payload.encode("utf-8")
