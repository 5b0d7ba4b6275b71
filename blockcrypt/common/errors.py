"""
Error taxonomy for the encryption facade.

- Every error is a ValueError subclass, so callers that already
  catch ValueError around crypto calls keep working.
- Each error is fatal to the current operation; nothing is retried.
"""


class CryptError(ValueError):
    """Base class for every error raised by blockcrypt."""


# --- Pipeline / Key Validation ---

class MissingCryptoCapability(CryptError):
    """No cipher primitive is wired into the pipeline."""


class EmptyKey(CryptError):
    """The resolved key has zero length."""


class KeyTooLarge(CryptError):
    """The key is longer than the IV size of the cipher/mode pair."""


class TextTooShortForKey(CryptError):
    """The encrypted blob is shorter than the key (decrypt only)."""


# --- Padding ---

class PaddingSizeOverflow(CryptError):
    """The padding length cannot be encoded in a single byte."""


class InvalidPaddingSize(CryptError):
    """The padding length exceeds the block size."""


# --- Primitive / Codec ---

class UnsupportedCipher(CryptError):
    """The cipher name is not known to the primitive."""


class UnsupportedMode(CryptError):
    """The mode is unknown, or not available for the chosen cipher."""


class CipherFailure(CryptError):
    """The underlying cipher library rejected the operation."""


class InvalidEncoding(CryptError):
    """Input to a base64 entry point is not valid base64."""
