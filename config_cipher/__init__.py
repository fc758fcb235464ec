"""Config Cipher — Symmetric encryption helper for configuration secrets.

Security Note (Threat Model):
    Ciphertexts are AES-256-CBC without an authentication tag, so they are
    malleable. An attacker able to modify stored envelopes can alter the
    decrypted plaintext without detection beyond the padding check.
    This is an accepted limitation kept for wire-format compatibility with
    previously stored values.
"""

from .version import __version__
from .cipher import SymmetricCipher
from .config import CipherConfig, load_secret, generate_secret
from .exceptions import (
    CipherError,
    ConfigurationError,
    EncryptionError,
    DecryptionError,
    InvalidEncodingError,
    TruncatedError,
    CipherFailureError,
)

__all__ = [
    "__version__",
    "SymmetricCipher",
    "CipherConfig",
    "load_secret",
    "generate_secret",
    "CipherError",
    "ConfigurationError",
    "EncryptionError",
    "DecryptionError",
    "InvalidEncodingError",
    "TruncatedError",
    "CipherFailureError",
]
