"""
Cipher Crypto Core — Key derivation, envelope encryption/decryption, hashing.

Envelope format (stable wire format):
    base64( IV 16B || AES-256-CBC( PKCS7(plaintext) ) )

Key derivation:
    key = SHA-256(secret)  → 32 bytes, used directly as the AES-256 key.

Security Note:
    Never log plaintext, ciphertext, IV or key values.
    There is no authentication tag: envelopes are malleable, the padding
    check is the only tamper signal.
"""
import os
import base64
import secrets
import logging
from typing import Any, Union

import orjson
from cryptography.hazmat.primitives import hashes, padding, constant_time
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .exceptions import (
    EncryptionError,
    InvalidEncodingError,
    TruncatedError,
    CipherFailureError,
)

logger = logging.getLogger("config_cipher")

CIPHER_NAME = "AES-256-CBC"
HASH_ALGO = "sha256"
KEY_LENGTH = 32  # AES-256
IV_SIZE = 16
BLOCK_SIZE = 128  # bits, for PKCS7

BytesLike = Union[bytes, bytearray, memoryview]


def _to_bytes(data: Union[str, BytesLike]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(
        f"expected str or bytes-like data, got {type(data).__name__}"
    )


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(secret: Union[str, bytes]) -> bytes:
    """Derive the 32-byte AES-256 key as the SHA-256 digest of the secret.

    Args:
        secret: Raw configured secret.

    Returns:
        32-byte derived key.
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(_to_bytes(secret))
    return digest.finalize()


# ---------------------------------------------------------------------------
# Envelope encryption
# ---------------------------------------------------------------------------

def encrypt_envelope(plaintext: bytes, key: bytes) -> str:
    """Encrypt plaintext under key with a fresh random IV.

    Args:
        plaintext: Data to encrypt.
        key: 32-byte derived key.

    Returns:
        Base64 envelope string ``base64(IV || ciphertext)``.

    Raises:
        EncryptionError: If the RNG or the cipher backend fails.
    """
    try:
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(BLOCK_SIZE).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        ct = encryptor.update(padded) + encryptor.finalize()
    except (ValueError, TypeError, OSError) as err:
        raise EncryptionError(
            f"Encryption error: {type(err).__name__}: {err}"
        ) from err
    return base64.b64encode(iv + ct).decode("ascii")


def decrypt_envelope(envelope: Union[str, bytes], key: bytes) -> bytes:
    """Decrypt a base64 envelope produced by ``encrypt_envelope``.

    Args:
        envelope: Base64 string of ``IV || ciphertext``.
        key: 32-byte derived key.

    Returns:
        Decrypted plaintext bytes.

    Raises:
        InvalidEncodingError: If the envelope is not strict base64.
        TruncatedError: If the decoded payload is shorter than the IV.
        CipherFailureError: On bad padding, bad block length or backend failure.
    """
    try:
        payload = base64.b64decode(envelope, validate=True)
    except (ValueError, TypeError):
        raise InvalidEncodingError(
            "Decryption error: invalid base64 encoding in encrypted data."
        ) from None
    if len(payload) < IV_SIZE:
        raise TruncatedError(
            f"Decryption error: payload too short: {len(payload)} bytes "
            f"(minimum {IV_SIZE})"
        )
    iv = payload[:IV_SIZE]
    ct = payload[IV_SIZE:]
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ct) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except (ValueError, TypeError) as err:
        raise CipherFailureError(
            f"Decryption error: cipher failure ({type(err).__name__})"
        ) from err


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

def serialize_value(value: Any) -> bytes:
    """Serialize a Python value to bytes for encryption.

    str is UTF-8 encoded and bytes pass through untouched. Anything else
    (dict, list, tuple, numbers, bool, None) becomes canonical JSON with
    sorted keys.

    Args:
        value: Python value to serialize.

    Returns:
        Plaintext bytes.

    Raises:
        EncryptionError: If the value cannot be encoded.
    """
    try:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        return orjson.dumps(value, option=orjson.OPT_SORT_KEYS)
    except (TypeError, ValueError) as err:
        # orjson.JSONEncodeError is a TypeError
        raise EncryptionError(
            f"Encryption error: cannot serialize {type(value).__name__}: "
            f"{type(err).__name__}"
        ) from err


def deserialize_value(data: bytes, structured: bool = False) -> Any:
    """Turn decrypted bytes back into a str, or a parsed value.

    Args:
        data: Decrypted plaintext bytes.
        structured: Try parsing as JSON first. Content that is not JSON
            falls back to the plain string without raising.

    Returns:
        Parsed JSON value, or the UTF-8 decoded string.

    Raises:
        CipherFailureError: If the plaintext is not valid UTF-8.
    """
    if structured:
        try:
            return orjson.loads(data)
        except orjson.JSONDecodeError:
            pass
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise CipherFailureError(
            "Decryption error: decrypted data is not valid UTF-8 text"
        ) from None


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------

def hash_value(data: Union[str, bytes]) -> str:
    """Return the lowercase hex SHA-256 digest of data.

    Raises:
        TypeError: If data is neither str nor bytes-like.
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(_to_bytes(data))
    return digest.finalize().hex()


def verify_hash(data: Union[str, bytes], expected_hash: Any) -> bool:
    """Timing-safe check that ``hash_value(data)`` equals expected_hash.

    Never raises: unusable input is reported as a mismatch.
    """
    try:
        computed = hash_value(data).encode("ascii")
        if isinstance(expected_hash, str):
            expected = expected_hash.encode("utf-8")
        elif isinstance(expected_hash, (bytes, bytearray)):
            expected = bytes(expected_hash)
        else:
            return False
    except (TypeError, ValueError):
        return False
    return constant_time.bytes_eq(computed, expected)


# ---------------------------------------------------------------------------
# Random tokens and keys
# ---------------------------------------------------------------------------

def _random_bytes(length: int) -> bytes:
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise ValueError(f"length must be a positive integer, got {length!r}")
    return secrets.token_bytes(length)


def generate_token(length: int = 32) -> str:
    """Generate a base64 token of ``length`` random bytes.

    Useful for API keys, bearer tokens and other opaque random values.
    """
    return base64.b64encode(_random_bytes(length)).decode("ascii")


def generate_key(length: int = 32) -> str:
    """Generate a lowercase hex key of ``length`` random bytes."""
    return _random_bytes(length).hex()
