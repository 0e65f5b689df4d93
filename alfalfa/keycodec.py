"""Base64 text form of 128-bit session keys."""

from __future__ import annotations

import base64
import binascii

RAW_LEN = 16
B64_LEN = 24


class KeyCodecError(ValueError):
    """Raised when a key cannot be encoded or decoded."""


def base64_encode(raw: bytes) -> str:
    """Encode a 16-byte key as 24 characters of padded base64."""
    raw = bytes(raw)
    if len(raw) != RAW_LEN:
        raise KeyCodecError(f"raw key must be {RAW_LEN} bytes, got {len(raw)}")
    encoded = base64.b64encode(raw).decode("ascii")
    if len(encoded) != B64_LEN:
        raise KeyCodecError(f"unexpected base64 length {len(encoded)}")
    return encoded


def base64_decode(b64: str | bytes) -> bytes:
    """Decode 24 characters of base64 into exactly 16 bytes."""
    if isinstance(b64, str):
        try:
            data = b64.encode("ascii")
        except UnicodeEncodeError as exc:
            raise KeyCodecError("base64 key must be ASCII") from exc
    else:
        data = bytes(b64)
    if len(data) != B64_LEN:
        raise KeyCodecError(f"base64 key must be {B64_LEN} characters, got {len(data)}")
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KeyCodecError("key is not well-formed base64") from exc
    if len(raw) != RAW_LEN:
        raise KeyCodecError(f"key must represent {RAW_LEN} octets, got {len(raw)}")
    return raw