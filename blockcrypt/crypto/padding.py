"""
Block Padding Schemes.

- apply_padding: extends plaintext to a multiple of the block size.
- remove_padding: strips padding after decryption (best effort, never raises).
- Supported: ANSI X.923, PKCS#7, ISO 10126, ISO/IEC 7816-4, Zero, Space.
- Padding only takes part in the CBC and ECB modes; every other mode
  passes text through untouched.
"""

from typing import Optional

from blockcrypt.common.config import PaddingType
from blockcrypt.common.errors import InvalidPaddingSize, PaddingSizeOverflow
from blockcrypt.common.utils import random_bytes

PADDED_MODES = frozenset({"cbc", "ecb"})

# Largest padding length that still fits in one length byte
MAX_PADDING_SIZE = 255

ISO_7816_MARKER = 0x80
ZERO_BYTE = 0x00
SPACE_BYTE = 0x20


def padding_applies(mode: Optional[str]) -> bool:
    """True if `mode` is a block mode that needs padded input."""
    return mode is not None and mode.lower() in PADDED_MODES


def padding_size(text: bytes, block_size: int) -> int:
    """Number of bytes needed to reach the next block boundary (1..block_size)."""
    if block_size <= 0:
        raise InvalidPaddingSize(f"Block size must be positive, got {block_size}.")
    return block_size - (len(text) % block_size)


def apply_padding(
    text: bytes,
    block_size: int,
    padding_type: PaddingType,
    mode: Optional[str] = None
) -> bytes:
    """
    Pads `text` up to a multiple of `block_size`.

    Args:
        text: The plaintext bytes.
        block_size: Cipher block size in bytes.
        padding_type: The scheme to apply.
        mode: Optional block mode; non-CBC/ECB modes return `text` unchanged.

    Returns:
        The padded bytes.

    Raises:
        PaddingSizeOverflow: The padding length would not fit in one byte.
        InvalidPaddingSize: The padding length exceeds the block size.
    """
    padding_type = PaddingType.parse(padding_type)
    if mode is not None and not padding_applies(mode):
        return text
    if padding_type == PaddingType.NONE:
        return text

    # 1. Work out how much padding is needed
    size = padding_size(text, block_size)
    if size > MAX_PADDING_SIZE:
        raise PaddingSizeOverflow(
            f"Padding size {size} cannot be encoded in a single byte."
        )
    if size > block_size:
        raise InvalidPaddingSize(
            f"Padding size {size} exceeds block size {block_size}."
        )

    # 2. Build the padding bytes for the scheme
    pad = _build_padding(size, padding_type)

    # 3. Append exactly `size` bytes
    return text + pad[:size]


def _build_padding(size: int, padding_type: PaddingType) -> bytes:
    if padding_type == PaddingType.ANSI_X923:
        return bytes(size - 1) + bytes([size])
    if padding_type == PaddingType.PKCS7:
        return bytes([size]) * size
    if padding_type == PaddingType.ISO10126:
        return random_bytes(size - 1) + bytes([size])
    if padding_type == PaddingType.ISO_IEC_7816_4:
        return bytes([ISO_7816_MARKER]) + bytes(size - 1)
    if padding_type == PaddingType.ZERO:
        return bytes(size)
    if padding_type == PaddingType.SPACE:
        return bytes([SPACE_BYTE]) * size
    return b""


def remove_padding(
    text: bytes,
    block_size: int,
    padding_type: PaddingType,
    mode: Optional[str] = None
) -> bytes:
    """
    Strips padding added by `apply_padding`.

    Removal is best effort: if the trailing bytes do not verify as
    padding of the given type, `text` is returned unchanged. This
    function never raises for malformed input.

    Args:
        text: Decrypted bytes.
        block_size: Cipher block size in bytes.
        padding_type: The scheme that was applied.
        mode: Optional block mode; non-CBC/ECB modes return `text` unchanged.

    Returns:
        The unpadded bytes (or `text` itself).
    """
    padding_type = PaddingType.parse(padding_type)
    if mode is not None and not padding_applies(mode):
        return text
    if padding_type == PaddingType.NONE:
        return text
    if block_size <= 0 or not text or len(text) % block_size != 0:
        return text

    if padding_type == PaddingType.ANSI_X923:
        size = text[-1]
        if _size_in_range(size, block_size) and not any(text[-size:-1]):
            return text[:-size]
        return text

    if padding_type == PaddingType.PKCS7:
        size = text[-1]
        if _size_in_range(size, block_size) and text[-size:] == bytes([size]) * size:
            return text[:-size]
        return text

    if padding_type == PaddingType.ISO10126:
        # Filler bytes are random, only the length byte can be checked
        size = text[-1]
        if _size_in_range(size, block_size):
            return text[:-size]
        return text

    if padding_type == PaddingType.ISO_IEC_7816_4:
        stop = len(text) - min(block_size, len(text))
        i = len(text) - 1
        while i > stop and text[i] == ZERO_BYTE:
            i -= 1
        if text[i] == ISO_7816_MARKER:
            return text[:i]
        return text

    if padding_type == PaddingType.ZERO:
        return _strip_trailing(text, ZERO_BYTE, block_size)

    if padding_type == PaddingType.SPACE:
        return _strip_trailing(text, SPACE_BYTE, block_size)

    return text


def _size_in_range(size: int, block_size: int) -> bool:
    return 0 < size <= block_size


def _strip_trailing(text: bytes, fill: int, block_size: int) -> bytes:
    """Removes up to `block_size` trailing `fill` bytes."""
    stop = len(text) - min(block_size, len(text))
    end = len(text)
    while end > stop and text[end - 1] == fill:
        end -= 1
    return text[:end]
