"""Unit tests for runtime settings."""

import pytest

from contract_deployer.config import Settings
from contract_deployer.constants import DEFAULT_MIRROR_BASE_URL, DEFAULT_SOLC_VERSION


class TestSettingsFromEnv:
    """Test the Settings.from_env classmethod."""

    def test_defaults_with_empty_environment(self):
        """Test that an empty environment yields defaults."""
        settings = Settings.from_env({})

        assert settings.private_key == ""
        assert settings.rpc_api_key == ""
        assert settings.mirror_base_url == DEFAULT_MIRROR_BASE_URL
        assert settings.solc_version == DEFAULT_SOLC_VERSION
        assert settings.evm_version == "shanghai"
        assert settings.fetch_timeout == 30.0
        assert settings.compile_timeout == 120.0

    def test_reads_secrets_and_overrides(self):
        """Test that secrets and prefixed variables are read."""
        settings = Settings.from_env(
            {
                "PRIVATE_KEY": "abc",
                "INFURA_API_KEY": "key",
                "CONTRACT_DEPLOYER_MIRROR_URL": "https://mirror.example.com",
                "CONTRACT_DEPLOYER_SOLC_VERSION": "0.8.21",
                "CONTRACT_DEPLOYER_RPC_TIMEOUT": "12.5",
                "CONTRACT_DEPLOYER_COMPILE_TIMEOUT": "45",
                "CONTRACT_DEPLOYER_MAX_IMPORT_FETCHES": "10",
            }
        )

        assert settings.private_key == "abc"
        assert settings.rpc_api_key == "key"
        assert settings.mirror_base_url == "https://mirror.example.com"
        assert settings.solc_version == "0.8.21"
        assert settings.rpc_timeout == 12.5
        assert settings.compile_timeout == 45.0
        assert settings.max_import_fetches == 10

    def test_reads_os_environ_by_default(self, monkeypatch):
        """Test that os.environ is used when no mapping is given."""
        monkeypatch.setenv("INFURA_API_KEY", "from-env")
        assert Settings.from_env().rpc_api_key == "from-env"

    def test_blank_numbers_use_defaults(self):
        """Test that blank numeric variables are ignored."""
        assert Settings.from_env({"CONTRACT_DEPLOYER_FETCH_TIMEOUT": " "}).fetch_timeout == 30.0

    def test_invalid_number_raises(self):
        """Test that malformed numeric variables are rejected."""
        with pytest.raises(ValueError, match="CONTRACT_DEPLOYER_MAX_IMPORT_DEPTH"):
            Settings.from_env({"CONTRACT_DEPLOYER_MAX_IMPORT_DEPTH": "deep"})


class TestSettingsRepr:
    """Test that secrets do not leak through repr."""

    def test_secrets_masked(self):
        """Test that key material is not shown."""
        text = repr(Settings(private_key="deadbeef", rpc_api_key="infura-secret"))
        assert "deadbeef" not in text
        assert "infura-secret" not in text
        assert "***" in text
