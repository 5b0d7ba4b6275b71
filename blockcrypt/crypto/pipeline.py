"""
Encryption Facade (encrypt/decrypt orchestration).

- Validates the key against the cipher/mode sizing.
- Generates the IV and prefixes it to the ciphertext.
- Pads before encryption and unpads after decryption (CBC/ECB only).
- Base64 wrappers around the raw blob.

Blob layout: IV (iv_size bytes) || ciphertext. No header, no tag.
"""

from typing import List, Optional, Union

from blockcrypt.common import utils
from blockcrypt.common.config import BlockParams, CipherConfig, PaddingType
from blockcrypt.common.errors import (
    EmptyKey,
    KeyTooLarge,
    MissingCryptoCapability,
    TextTooShortForKey,
)
from blockcrypt.crypto.padding import apply_padding, padding_applies, remove_padding
from blockcrypt.crypto.primitive import CipherPrimitive, CryptographyPrimitive

BytesLike = Union[bytes, bytearray, str]


class CryptPipeline:
    """
    Symmetric encryption facade over a CipherPrimitive.

    Configuration is held as one immutable CipherConfig. Setters replace
    it wholesale, and every encrypt/decrypt call reads it exactly once,
    so a call never observes a half-applied change.
    """

    def __init__(
        self,
        config: Optional[CipherConfig] = None,
        primitive: Optional[CipherPrimitive] = None,
        *,
        default_primitive: bool = True
    ):
        """
        Args:
            config: Initial configuration (defaults: rijndael-128, cbc, no padding).
            primitive: The cipher library to use.
            default_primitive: When `primitive` is None, fall back to
                CryptographyPrimitive. Pass False to require an explicit one.

        Raises:
            MissingCryptoCapability: No primitive was supplied or defaulted.
        """
        if primitive is None and default_primitive:
            primitive = CryptographyPrimitive()
        if primitive is None:
            raise MissingCryptoCapability("No cipher primitive available.")
        self._primitive = primitive
        self._config = config if config is not None else CipherConfig()

    # --- Configuration ---

    @property
    def config(self) -> CipherConfig:
        return self._config

    @config.setter
    def config(self, value: CipherConfig):
        if not isinstance(value, CipherConfig):
            raise TypeError(f"Expected a CipherConfig, got {type(value).__name__}.")
        self._config = value

    @property
    def primitive(self) -> CipherPrimitive:
        return self._primitive

    def set_key(self, key: BytesLike):
        self._replace(key=utils.to_bytes(key))

    def get_key(self) -> bytes:
        return self._config.key

    def set_cipher(self, name: str):
        self._replace(cipher=name)

    def get_cipher(self) -> str:
        return self._config.cipher

    def set_mode(self, name: str):
        self._replace(mode=name)

    def get_mode(self) -> str:
        return self._config.mode

    def set_padding(self, padding: Union[PaddingType, int, str]):
        self._replace(padding=padding)

    def get_padding(self) -> PaddingType:
        return self._config.padding

    def _replace(self, **changes):
        # model_copy does not validate
        self._config = CipherConfig(**{**self._config.model_dump(), **changes})

    def get_available_ciphers(self) -> List[str]:
        return self._require_primitive().list_ciphers()

    def get_available_modes(self) -> List[str]:
        return self._require_primitive().list_modes()

    def block_params(self, config: Optional[CipherConfig] = None) -> BlockParams:
        """IV and block sizes for the configured (or given) cipher/mode."""
        config = config or self._config
        primitive = self._require_primitive()
        return BlockParams(
            iv_size=primitive.iv_size(config.cipher, config.mode),
            block_size=primitive.block_size(config.cipher, config.mode),
        )

    # --- Encrypt / Decrypt ---

    def encrypt(self, text: BytesLike, key: Optional[BytesLike] = None) -> bytes:
        """
        Encrypts `text` and returns IV || ciphertext.

        Args:
            text: Plaintext bytes (str is encoded as UTF-8).
            key: Optional key overriding the configured one.

        Raises:
            MissingCryptoCapability, EmptyKey, KeyTooLarge,
            PaddingSizeOverflow, InvalidPaddingSize, and primitive errors.
        """
        config = self._config
        primitive = self._require_primitive()
        key = self._resolve_key(config, key)
        text = utils.to_bytes(text)

        # 1. Key length is bounded by the IV size
        iv_size = primitive.iv_size(config.cipher, config.mode)
        self._check_key_size(key, iv_size)

        # 2. Fresh IV per call
        iv = primitive.random_iv(iv_size)
        block_size = primitive.block_size(config.cipher, config.mode)

        # 3. Pad for block modes
        if config.padding != PaddingType.NONE and padding_applies(config.mode):
            padded = apply_padding(text, block_size, config.padding)
        else:
            padded = text

        # 4. Encrypt and prefix the IV
        ciphertext = primitive.encrypt(config.cipher, key, padded, config.mode, iv)
        return iv + ciphertext

    def decrypt(self, text: BytesLike, key: Optional[BytesLike] = None) -> bytes:
        """
        Decrypts an IV-prefixed blob produced by `encrypt`.

        Padding that does not verify is left in place rather than
        reported; see remove_padding.

        Raises:
            MissingCryptoCapability, EmptyKey, KeyTooLarge,
            TextTooShortForKey, and primitive errors.
        """
        config = self._config
        primitive = self._require_primitive()
        key = self._resolve_key(config, key)
        text = utils.to_bytes(text)

        iv_size = primitive.iv_size(config.cipher, config.mode)
        self._check_key_size(key, iv_size)

        if len(text) < len(key):
            raise TextTooShortForKey(
                f"Encrypted text ({len(text)} bytes) is shorter than the key ({len(key)} bytes)."
            )

        # 1. Split IV and body
        iv, body = text[:iv_size], text[iv_size:]

        # 2. Decrypt
        decrypted = primitive.decrypt(config.cipher, key, body, config.mode, iv)

        # 3. Unpad for block modes
        block_size = primitive.block_size(config.cipher, config.mode)
        if padding_applies(config.mode):
            return remove_padding(decrypted, block_size, config.padding, config.mode)
        return decrypted

    def encrypt_base64(self, text: BytesLike, key: Optional[BytesLike] = None) -> str:
        return utils.b64e(self.encrypt(text, key))

    def decrypt_base64(self, text: Union[str, bytes], key: Optional[BytesLike] = None) -> bytes:
        return self.decrypt(utils.b64d(text), key)

    # --- Helpers ---

    def _require_primitive(self) -> CipherPrimitive:
        if self._primitive is None:
            raise MissingCryptoCapability("No cipher primitive available.")
        return self._primitive

    @staticmethod
    def _resolve_key(config: CipherConfig, key: Optional[BytesLike]) -> bytes:
        resolved = utils.to_bytes(key) if key is not None else config.key
        if not resolved:
            raise EmptyKey("Encryption key must not be empty.")
        return resolved

    @staticmethod
    def _check_key_size(key: bytes, iv_size: int):
        if len(key) > iv_size:
            raise KeyTooLarge(
                f"Key is {len(key)} bytes, the maximum for this cipher/mode is {iv_size}."
            )
