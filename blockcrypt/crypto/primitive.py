"""
Block Cipher Primitive.

- CipherPrimitive: the contract the pipeline needs from a cipher library
  (sizing metadata, IV generation, raw encrypt/decrypt, enumeration).
- CryptographyPrimitive: implementation on top of `cryptography`,
  using mcrypt-style cipher and mode names.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, NamedTuple, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit_algorithms
from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from blockcrypt.common.errors import (
    CipherFailure,
    UnsupportedCipher,
    UnsupportedMode,
)
from blockcrypt.common.utils import random_bytes


class CipherPrimitive(ABC):
    """Interface to an underlying block cipher library."""

    @abstractmethod
    def iv_size(self, cipher: str, mode: str) -> int:
        """IV length in bytes for the (cipher, mode) pair."""

    @abstractmethod
    def block_size(self, cipher: str, mode: str) -> int:
        """Cipher block length in bytes for the (cipher, mode) pair."""

    def random_iv(self, size: int) -> bytes:
        """Cryptographically random IV of exactly `size` bytes."""
        return random_bytes(size)

    @abstractmethod
    def encrypt(self, cipher: str, key: bytes, data: bytes, mode: str, iv: bytes) -> bytes:
        """Raw encryption, no padding beyond what the library itself requires."""

    @abstractmethod
    def decrypt(self, cipher: str, key: bytes, data: bytes, mode: str, iv: bytes) -> bytes:
        """Raw decryption, no unpadding."""

    @abstractmethod
    def list_ciphers(self) -> List[str]:
        """Names of every supported cipher."""

    @abstractmethod
    def list_modes(self) -> List[str]:
        """Names of every supported mode."""


# --- Cipher and Mode Tables ---

def _triple_des(key: bytes):
    """Three-key TripleDES; one- and two-key forms are widened to 24 bytes."""
    if len(key) == 8:
        key = key * 3
    elif len(key) == 16:
        key = key + key[:8]
    return decrepit_algorithms.TripleDES(key)


class CipherSpec(NamedTuple):
    factory: Callable[[bytes], object]
    block_size: int             # bytes
    key_sizes: Tuple[int, ...]  # legal key lengths in bytes, ascending
    modes: frozenset


_ALL_MODES = ("cbc", "ecb", "cfb", "ncfb", "nofb", "ctr")
_BLOCK_MODES = frozenset({"cbc", "ecb"})

# "cfb" is the 8-bit feedback variant; "ncfb"/"nofb" feed back a full block
_MODE_FACTORIES = {
    "cbc": modes.CBC,
    "cfb": decrepit_modes.CFB8,
    "ncfb": decrepit_modes.CFB,
    "nofb": decrepit_modes.OFB,
    "ctr": modes.CTR,
}

CIPHERS = {
    "rijndael-128": CipherSpec(
        algorithms.AES, 16, (16, 24, 32), frozenset(_ALL_MODES)
    ),
    "camellia": CipherSpec(
        decrepit_algorithms.Camellia, 16, (16, 24, 32),
        frozenset({"cbc", "ecb", "ncfb", "nofb"})
    ),
    "sm4": CipherSpec(
        algorithms.SM4, 16, (16,),
        frozenset({"cbc", "ecb", "ncfb", "nofb", "ctr"})
    ),
    "tripledes": CipherSpec(
        _triple_des, 8, (8, 16, 24),
        frozenset({"cbc", "ecb", "cfb", "ncfb", "nofb"})
    ),
    "blowfish": CipherSpec(
        decrepit_algorithms.Blowfish, 8, tuple(range(4, 57)),
        frozenset({"cbc", "ecb", "ncfb", "nofb"})
    ),
    "cast-128": CipherSpec(
        decrepit_algorithms.CAST5, 8, tuple(range(5, 17)),
        frozenset({"cbc", "ecb", "ncfb", "nofb"})
    ),
}


class CryptographyPrimitive(CipherPrimitive):
    """
    CipherPrimitive backed by `cryptography`'s hazmat cipher API.

    Follows mcrypt's conventions so blobs stay interchangeable:
    - The IV size equals the block size for every mode, ECB included
      (an ECB IV is generated and transmitted but never used).
    - Short keys are zero-filled up to the next legal key length.
    - Block modes zero-fill input that is not block aligned.
    """

    def iv_size(self, cipher: str, mode: str) -> int:
        return self._lookup(cipher, mode).block_size

    def block_size(self, cipher: str, mode: str) -> int:
        return self._lookup(cipher, mode).block_size

    def encrypt(self, cipher: str, key: bytes, data: bytes, mode: str, iv: bytes) -> bytes:
        spec = self._lookup(cipher, mode)
        mode = mode.lower()
        key = _fit_key(spec, key)

        # 1. Block modes only take whole blocks
        if mode in _BLOCK_MODES and len(data) % spec.block_size:
            data = data + bytes(spec.block_size - len(data) % spec.block_size)

        # 2. Build the cipher and run it
        try:
            encryptor = self._build(spec, key, mode, iv).encryptor()
            return encryptor.update(data) + encryptor.finalize()
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CipherFailure(f"Encryption failed ({cipher}/{mode}): {e}") from e

    def decrypt(self, cipher: str, key: bytes, data: bytes, mode: str, iv: bytes) -> bytes:
        spec = self._lookup(cipher, mode)
        mode = mode.lower()
        key = _fit_key(spec, key)
        try:
            decryptor = self._build(spec, key, mode, iv).decryptor()
            return decryptor.update(data) + decryptor.finalize()
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CipherFailure(f"Decryption failed ({cipher}/{mode}): {e}") from e

    def list_ciphers(self) -> List[str]:
        return list(CIPHERS)

    def list_modes(self) -> List[str]:
        return list(_ALL_MODES)

    # --- Helpers ---

    def _lookup(self, cipher: str, mode: str) -> CipherSpec:
        spec = CIPHERS.get(cipher.lower())
        if spec is None:
            raise UnsupportedCipher(f"Unknown cipher: '{cipher}'")
        if mode.lower() not in _ALL_MODES:
            raise UnsupportedMode(f"Unknown mode: '{mode}'")
        if mode.lower() not in spec.modes:
            raise UnsupportedMode(f"Mode '{mode}' is not available for cipher '{cipher}'")
        return spec

    def _build(self, spec: CipherSpec, key: bytes, mode: str, iv: bytes) -> Cipher:
        algorithm = spec.factory(key)
        if mode == "ecb":
            return Cipher(algorithm, modes.ECB())
        return Cipher(algorithm, _MODE_FACTORIES[mode](iv))


def _fit_key(spec: CipherSpec, key: bytes) -> bytes:
    """Zero-fills `key` up to the smallest legal key length that holds it."""
    for size in spec.key_sizes:
        if len(key) <= size:
            return key + bytes(size - len(key))
    raise CipherFailure(
        f"Key of {len(key)} bytes exceeds the maximum of {spec.key_sizes[-1]} bytes."
    )
