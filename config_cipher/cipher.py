"""
SymmetricCipher — Encryption helper for sensitive configuration values.

Provides the public API of config_cipher:
- ``encrypt(value)`` / ``decrypt(envelope, structured)`` — AES-256-CBC envelopes
- ``hash(data)`` / ``verify_hash(data, expected)`` — SHA-256 with timing-safe check
- ``generate_token()`` / ``generate_key()`` — random API keys and secrets
- ``encrypt_array(data)`` / ``decrypt_array(data)`` — per-value helpers for mappings

Security Note:
    The instance holds only the derived key. Never log values passed to or
    returned from these methods. Only log key names and counts.
"""
import logging
from typing import Any, Optional, Union
from collections.abc import Mapping

from .crypto import (
    CIPHER_NAME,
    HASH_ALGO,
    IV_SIZE,
    KEY_LENGTH,
    derive_key,
    encrypt_envelope,
    decrypt_envelope,
    serialize_value,
    deserialize_value,
    hash_value,
    verify_hash as _verify_hash,
    generate_token as _generate_token,
    generate_key as _generate_key,
)
from .config import ENV_VAR, CipherConfig
from .exceptions import CipherError, ConfigurationError

logger = logging.getLogger("config_cipher")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, bytes)) and not value)


class SymmetricCipher:
    """AES-256-CBC cipher keyed by the SHA-256 digest of a configured secret.

    The derived key is computed once at construction and never changes, so a
    single instance can be shared between threads.
    """

    def __init__(self, secret: Optional[Union[str, bytes]]):
        if not isinstance(secret, (str, bytes)) or not secret.strip():
            raise ConfigurationError(
                f"Encryption key ({ENV_VAR}) is not configured."
            )
        self._key: bytes = derive_key(secret)
        logger.debug("Cipher initialized: %s", CIPHER_NAME)

    def __repr__(self) -> str:
        return f"<SymmetricCipher [{CIPHER_NAME}]>"

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: CipherConfig) -> "SymmetricCipher":
        """Build a cipher from a validated CipherConfig."""
        return cls(config.secret.get_secret_value())

    @classmethod
    def from_env(cls, name: str = ENV_VAR) -> "SymmetricCipher":
        """Build a cipher from the secret stored in environment variable ``name``.

        Raises:
            ConfigurationError: If the variable is unset or blank.
        """
        return cls.from_config(CipherConfig.from_env(name))

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def encrypt(self, data: Any) -> str:
        """Encrypt a value.

        Strings are encrypted as UTF-8 text, bytes as-is, and any other
        value (dict, list, ...) is serialized to JSON first. Scalars use
        their JSON text too: None becomes "null", True becomes "true" and
        1.0 stays "1.0". Convert them to str beforehand for other forms.

        Args:
            data: Value to encrypt.

        Returns:
            Base64 envelope ``base64(IV || ciphertext)``.

        Raises:
            EncryptionError: If serialization or the cipher fails.
        """
        plaintext = serialize_value(data)
        return encrypt_envelope(plaintext, self._key)

    def decrypt(self, encrypted: Union[str, bytes], structured: bool = False) -> Any:
        """Decrypt an envelope produced by ``encrypt``.

        Args:
            encrypted: Base64 envelope.
            structured: Return the parsed JSON value when the plaintext is JSON.
                Non-JSON plaintext is returned as a string.

        Returns:
            Decrypted string, or parsed value when ``structured`` is set.

        Raises:
            DecryptionError: One of InvalidEncodingError, TruncatedError or
                CipherFailureError.
        """
        return deserialize_value(
            decrypt_envelope(encrypted, self._key), structured=structured,
        )

    def decrypt_bytes(self, encrypted: Union[str, bytes]) -> bytes:
        """Decrypt an envelope and return the raw plaintext bytes."""
        return decrypt_envelope(encrypted, self._key)

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    def hash(self, data: Union[str, bytes]) -> str:
        """Lowercase hex SHA-256 digest of data."""
        return hash_value(data)

    def verify_hash(self, data: Union[str, bytes], expected_hash: Any) -> bool:
        """Securely compare data against a hash using timing-safe comparison.

        Returns False on any mismatch, including a length mismatch.
        """
        return _verify_hash(data, expected_hash)

    # ------------------------------------------------------------------
    # Random values
    # ------------------------------------------------------------------

    @staticmethod
    def generate_token(length: int = 32) -> str:
        """Base64 encoded token of ``length`` random bytes."""
        return _generate_token(length)

    @staticmethod
    def generate_key(length: int = 32) -> str:
        """Hexadecimal key of ``length`` random bytes, usable as a new secret."""
        return _generate_key(length)

    @staticmethod
    def get_cipher_info() -> dict:
        """Return metadata about the cipher in use."""
        return {
            "cipher": CIPHER_NAME,
            "key_length": KEY_LENGTH * 8,
            "iv_length": IV_SIZE,
            "hash_algo": HASH_ALGO,
        }

    # ------------------------------------------------------------------
    # Mapping helpers
    # ------------------------------------------------------------------

    def encrypt_array(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Encrypt every value of a mapping, keeping its keys and order.

        None and empty values pass through unencrypted.

        Raises:
            EncryptionError: On the first value that fails, with ``field``
                set to its key.
        """
        encrypted: dict[str, Any] = {}
        for key, value in data.items():
            if _is_empty(value):
                encrypted[key] = value
                continue
            try:
                encrypted[key] = self.encrypt(value)
            except CipherError as err:
                logger.error(
                    "Failed to encrypt value for key=%s: %s", key, type(err).__name__,
                )
                raise err.with_field(key) from err
        logger.debug("Encrypted %d value(s)", len(encrypted))
        return encrypted

    def decrypt_array(
        self,
        data: Mapping[str, Any],
        structured: bool = False,
    ) -> dict[str, Any]:
        """Decrypt every value of a mapping, keeping its keys and order.

        None and empty values pass through untouched.

        Raises:
            DecryptionError: On the first value that fails, with ``field``
                set to its key.
        """
        decrypted: dict[str, Any] = {}
        for key, value in data.items():
            if _is_empty(value):
                decrypted[key] = value
                continue
            try:
                decrypted[key] = self.decrypt(value, structured=structured)
            except CipherError as err:
                logger.error(
                    "Failed to decrypt value for key=%s: %s",
                    key, type(err).__name__,
                )
                raise err.with_field(key) from err
        logger.debug("Decrypted %d value(s)", len(decrypted))
        return decrypted
