"""
Cipher Exceptions — Error taxonomy for configuration, encryption and decryption.

Security Note:
    Exception messages must never carry plaintext, key material, IVs or the
    configured secret. Only operation names, key names and error kinds.
"""
from typing import Optional


class CipherError(Exception):
    """Base class for every error raised by config_cipher."""

    operation: str = "cipher"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def with_field(self, field: str) -> "CipherError":
        """Return a copy of this error bound to the mapping key that failed."""
        return type(self)(f"{self.message} (key={field!r})", field=field)


class ConfigurationError(CipherError):
    """Missing or invalid secret at construction time. Fatal."""

    operation = "configure"


class EncryptionError(CipherError):
    """Underlying cipher, serialization or RNG failure while encrypting."""

    operation = "encrypt"


class DecryptionError(CipherError):
    """Envelope could not be decrypted.

    ``kind`` distinguishes the failure: ``invalid_encoding``, ``truncated``
    or ``cipher_failure``.
    """

    operation = "decrypt"
    kind: str = "decryption"


class InvalidEncodingError(DecryptionError):
    """Envelope is not valid base64."""

    kind = "invalid_encoding"


class TruncatedError(DecryptionError):
    """Decoded payload is shorter than the IV."""

    kind = "truncated"


class CipherFailureError(DecryptionError):
    """Bad padding, wrong key, corrupted or foreign ciphertext."""

    kind = "cipher_failure"
