"""
Pydantic models for the facade's configuration.

- PaddingType: the closed set of padding schemes.
- CipherConfig: immutable (cipher, mode, padding, key) snapshot.
- BlockParams: per (cipher, mode) sizing reported by the primitive.
- Environment loading via python-dotenv.
"""

import os
from enum import IntEnum
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from blockcrypt.common.utils import b64d

# --- Environment Variable Names ---

ENV_CIPHER = "BLOCKCRYPT_CIPHER"
ENV_MODE = "BLOCKCRYPT_MODE"
ENV_PADDING = "BLOCKCRYPT_PADDING"
ENV_KEY = "BLOCKCRYPT_KEY"  # Base64 encoded

DEFAULT_CIPHER = "rijndael-128"
DEFAULT_MODE = "cbc"


class PaddingType(IntEnum):
    NONE = 0
    ANSI_X923 = 1
    PKCS7 = 2
    ISO10126 = 3
    ISO_IEC_7816_4 = 4
    ZERO = 5
    SPACE = 6

    @classmethod
    def parse(cls, value: Union["PaddingType", int, str]) -> "PaddingType":
        """
        Resolves a padding type from its number or its name.

        Names are matched case-insensitively with separators ignored,
        so "pkcs7", "ANSI-X923" and "iso/iec 7816-4" all resolve.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                value = int(text)
            else:
                wanted = _squash(text)
                for member in cls:
                    if _squash(member.name) == wanted:
                        return member
                raise ValueError(f"Unknown padding type: '{value}'")
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown padding type: {value!r}")


def _squash(name: str) -> str:
    return "".join(c for c in name.upper() if c.isalnum())


class BlockParams(BaseModel):
    """Sizing metadata for one (cipher, mode) pair. Recomputed per call."""
    model_config = ConfigDict(frozen=True)

    iv_size: int
    block_size: int


class CipherConfig(BaseModel):
    """
    Everything an encrypt/decrypt call reads from the facade.

    The model is frozen: the facade swaps in a new instance on every
    setter, and each call works from the single snapshot it read first.
    """
    model_config = ConfigDict(frozen=True)

    cipher: str = DEFAULT_CIPHER
    mode: str = DEFAULT_MODE
    padding: PaddingType = PaddingType.NONE
    key: bytes = b""

    @field_validator("cipher", "mode", mode="before")
    @classmethod
    def _normalise_name(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("padding", mode="before")
    @classmethod
    def _parse_padding(cls, v):
        return PaddingType.parse(v)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "CipherConfig":
        """
        Builds a config from BLOCKCRYPT_* environment variables.

        A .env file is loaded first (without overriding variables that
        are already set). Without an explicit path it is searched for
        from the current working directory upward. Unset variables keep
        the model defaults.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

        values = {}
        cipher = os.getenv(ENV_CIPHER)
        if cipher:
            values["cipher"] = cipher
        mode = os.getenv(ENV_MODE)
        if mode:
            values["mode"] = mode
        padding = os.getenv(ENV_PADDING)
        if padding:
            values["padding"] = padding
        key = os.getenv(ENV_KEY)
        if key:
            values["key"] = b64d(key)
        return cls(**values)
