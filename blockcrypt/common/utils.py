"""
Common Utility Helpers.

- Base64 encoding/decoding (standard alphabet, with padding).
- Secure random bytes for IVs and padding filler.
- Text-to-bytes coercion for the public entry points.
"""

import os
import base64
import binascii
from typing import Union

from blockcrypt.common.errors import InvalidEncoding

def b64e(b: bytes) -> str:
    """Encodes bytes into a Base64 string (UTF-8)."""
    return base64.b64encode(b).decode('utf-8')

def b64d(s: Union[str, bytes]) -> bytes:
    """
    Decodes a Base64 string into bytes.

    Characters outside the standard alphabet are rejected rather than
    silently discarded.
    """
    try:
        return base64.b64decode(s, validate=True)
    except (TypeError, binascii.Error) as e:
        raise InvalidEncoding(f"Invalid Base64 string: {e}")

def random_bytes(length: int) -> bytes:
    """Generates `length` bytes from the OS CSPRNG."""
    if length < 0:
        raise ValueError("Length must be non-negative.")
    return os.urandom(length)

def to_bytes(data: Union[str, bytes, bytearray]) -> bytes:
    """Returns `data` as bytes, encoding text as UTF-8."""
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)
