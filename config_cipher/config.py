"""
Cipher Configuration — Secret loading and validated settings.

Reads the encryption secret from an environment variable:
    APP_ENCRYPTION_KEY = <any non-empty string>

The secret is hashed with SHA-256 to obtain the AES-256 key, so its length
and alphabet are free. ``generate_secret()`` produces a suitable value.

Security Note:
    Never log the secret. Only log the environment variable name.
"""
import os
import logging

from pydantic import BaseModel, Field, SecretStr, field_validator

from .crypto import generate_key
from .exceptions import ConfigurationError

logger = logging.getLogger("config_cipher")

ENV_VAR = "APP_ENCRYPTION_KEY"


def load_secret(name: str = ENV_VAR) -> str:
    """Load the encryption secret from an environment variable.

    Args:
        name: Environment variable holding the secret.

    Returns:
        The raw secret string.

    Raises:
        ConfigurationError: If the variable is not set or is blank.
    """
    value = os.environ.get(name)
    if value is None or not value.strip():
        raise ConfigurationError(
            f"Encryption key ({name}) is not configured."
        )
    logger.debug("Loaded encryption secret from %s", name)
    return value


def generate_secret(length: int = 32) -> str:
    """Generate a random hex secret for operators to put in APP_ENCRYPTION_KEY.

    Args:
        length: Number of random bytes (the result has twice as many hex chars).

    Returns:
        Lowercase hexadecimal secret string.
    """
    return generate_key(length)


class CipherConfig(BaseModel):
    """Validated cipher configuration."""

    secret: SecretStr
    env_var: str = Field(default=ENV_VAR, min_length=1)

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: SecretStr) -> SecretStr:
        """Reject empty or whitespace-only secrets."""
        if not v.get_secret_value().strip():
            raise ValueError("secret cannot be empty")
        return v

    @classmethod
    def from_env(cls, name: str = ENV_VAR) -> "CipherConfig":
        """Create CipherConfig by loading the secret from environment.

        Args:
            name: Environment variable holding the secret.

        Returns:
            Populated CipherConfig instance.

        Raises:
            ConfigurationError: If the variable is unset or blank.
        """
        return cls(secret=load_secret(name), env_var=name)
