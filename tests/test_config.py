"""
Tests for cipher configuration loading.
"""
import pytest

from config_cipher.config import (
    ENV_VAR,
    CipherConfig,
    load_secret,
    generate_secret,
)
from config_cipher.exceptions import ConfigurationError


class TestLoadSecret:
    """Tests for load_secret."""

    def test_reads_default_variable(self, monkeypatch):
        """Test the secret is read from APP_ENCRYPTION_KEY."""
        monkeypatch.setenv(ENV_VAR, "s3cret")
        assert load_secret() == "s3cret"

    def test_reads_custom_variable(self, monkeypatch):
        """Test a custom variable name is honoured."""
        monkeypatch.setenv("MY_APP_KEY", "custom")
        assert load_secret("MY_APP_KEY") == "custom"

    def test_missing_variable(self, monkeypatch):
        """Test an unset variable raises ConfigurationError naming it."""
        monkeypatch.delenv(ENV_VAR, raising=False)
        with pytest.raises(ConfigurationError) as exc:
            load_secret()
        assert ENV_VAR in str(exc.value)

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_variable(self, monkeypatch, value):
        """Test empty or blank values raise ConfigurationError."""
        monkeypatch.setenv(ENV_VAR, value)
        with pytest.raises(ConfigurationError):
            load_secret()


class TestCipherConfig:
    """Tests for CipherConfig."""

    def test_from_env(self, monkeypatch):
        """Test from_env populates the secret and variable name."""
        monkeypatch.setenv(ENV_VAR, "from-env")
        config = CipherConfig.from_env()
        assert config.secret.get_secret_value() == "from-env"
        assert config.env_var == ENV_VAR

    def test_secret_masked_in_repr(self):
        """Test the secret does not appear in repr or str."""
        config = CipherConfig(secret="hidden-value")
        assert "hidden-value" not in repr(config)
        assert "hidden-value" not in str(config)

    def test_blank_secret_rejected(self):
        """Test the model rejects blank secrets."""
        with pytest.raises(ValueError):
            CipherConfig(secret="   ")

    def test_from_env_missing(self, monkeypatch):
        """Test from_env raises ConfigurationError when unset."""
        monkeypatch.delenv(ENV_VAR, raising=False)
        with pytest.raises(ConfigurationError):
            CipherConfig.from_env()

    @pytest.mark.parametrize("value", ["", "   "])
    def test_from_env_blank(self, monkeypatch, value):
        """Test from_env raises ConfigurationError for blank values."""
        monkeypatch.setenv(ENV_VAR, value)
        with pytest.raises(ConfigurationError) as exc:
            CipherConfig.from_env()
        assert ENV_VAR in str(exc.value)


class TestGenerateSecret:
    """Tests for generate_secret."""

    def test_default_length(self):
        """Test default secret is 64 hex chars."""
        secret = generate_secret()
        assert len(secret) == 64
        bytes.fromhex(secret)

    def test_unique(self):
        """Test secrets differ between calls."""
        assert generate_secret() != generate_secret()
