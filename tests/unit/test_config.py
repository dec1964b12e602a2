"""Unit tests for configuration management."""

import pytest

from chefai.utils.config import DEFAULT_GEMINI_API_URL, Config

CONFIG_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_API_URL",
    "TEMPERATURE",
    "MAX_OUTPUT_TOKENS",
    "REQUEST_TIMEOUT_SECONDS",
    "MAX_RETRIES",
    "MAX_PREP_MINUTES",
    "MAX_RECIPES",
    "MIN_COMPATIBILITY",
    "SUGGESTION_STRATEGY",
)

VALID_KEY = "AIzaSyTestKey0123456789abcdefghij"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in CONFIG_VARS:
        monkeypatch.delenv(var, raising=False)


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self):
        """Test that Config uses default values when env vars not set."""
        config = Config()

        assert config.GEMINI_API_KEY == ""
        assert config.GEMINI_API_URL == DEFAULT_GEMINI_API_URL
        assert config.TEMPERATURE == 0.7
        assert config.MAX_OUTPUT_TOKENS == 2000
        assert config.REQUEST_TIMEOUT_SECONDS == 15
        assert config.MAX_RETRIES == 1
        assert config.MAX_PREP_MINUTES == 30
        assert config.MAX_RECIPES == 3
        assert config.MIN_COMPATIBILITY is None
        assert config.SUGGESTION_STRATEGY == "fast"

    def test_config_loads_from_environment(self, monkeypatch):
        """Test that Config loads values from environment variables."""
        monkeypatch.setenv("GEMINI_API_KEY", VALID_KEY)
        monkeypatch.setenv("GEMINI_API_URL", "http://localhost:8080/generate")
        monkeypatch.setenv("TEMPERATURE", "0.2")
        monkeypatch.setenv("MAX_OUTPUT_TOKENS", "4096")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("MAX_RETRIES", "3")
        monkeypatch.setenv("MAX_PREP_MINUTES", "20")
        monkeypatch.setenv("MAX_RECIPES", "5")
        monkeypatch.setenv("MIN_COMPATIBILITY", "75")
        monkeypatch.setenv("SUGGESTION_STRATEGY", "BALANCED")

        config = Config()

        assert config.GEMINI_API_KEY == VALID_KEY
        assert config.GEMINI_API_URL == "http://localhost:8080/generate"
        assert config.TEMPERATURE == 0.2
        assert config.MAX_OUTPUT_TOKENS == 4096
        assert config.REQUEST_TIMEOUT_SECONDS == 5
        assert config.MAX_RETRIES == 3
        assert config.MAX_PREP_MINUTES == 20
        assert config.MAX_RECIPES == 5
        assert config.MIN_COMPATIBILITY == 75
        assert config.SUGGESTION_STRATEGY == "balanced"

    def test_config_converts_numeric_types(self, monkeypatch):
        """Test that Config properly converts numeric environment variables."""
        monkeypatch.setenv("TEMPERATURE", "1")
        monkeypatch.setenv("MAX_RECIPES", "2")
        monkeypatch.setenv("MIN_COMPATIBILITY", "40")

        config = Config()

        assert isinstance(config.TEMPERATURE, float)
        assert isinstance(config.MAX_RECIPES, int)
        assert isinstance(config.MIN_COMPATIBILITY, int)

    def test_api_key_is_stripped(self, monkeypatch):
        """Test that surrounding whitespace in the key is removed."""
        monkeypatch.setenv("GEMINI_API_KEY", f"  {VALID_KEY}\n")

        assert Config().GEMINI_API_KEY == VALID_KEY


class TestIsConfigured:
    """Test detection of a usable Gemini key."""

    def test_missing_key_is_not_configured(self):
        """Test that an absent key means no text source."""
        assert Config().is_configured is False

    def test_valid_key_is_configured(self, monkeypatch):
        """Test that a long, non-placeholder key is accepted."""
        monkeypatch.setenv("GEMINI_API_KEY", VALID_KEY)
        assert Config().is_configured is True

    @pytest.mark.parametrize(
        "key",
        [
            "SUA_CHAVE_AQUI_0000000000000",
            "YOUR_API_KEY_GOES_HERE_000000",
            "short-key",
        ],
    )
    def test_placeholder_or_short_key_is_not_configured(self, monkeypatch, key):
        """Test that sample placeholders and keys under 20 chars are rejected."""
        monkeypatch.setenv("GEMINI_API_KEY", key)
        assert Config().is_configured is False

    def test_missing_key_still_validates(self):
        """Test that validate() accepts a missing key (fallback-only mode)."""
        Config().validate()  # Should not raise


class TestConfigValidation:
    """Test Config validation logic."""

    def test_validate_succeeds_with_defaults(self):
        """Test that the default configuration is valid."""
        Config().validate()  # Should not raise

    @pytest.mark.parametrize(
        "var, value",
        [
            ("GEMINI_API_URL", "ftp://example.com"),
            ("TEMPERATURE", "2.5"),
            ("TEMPERATURE", "-0.1"),
            ("MAX_OUTPUT_TOKENS", "100"),
            ("REQUEST_TIMEOUT_SECONDS", "0"),
            ("MAX_RETRIES", "0"),
            ("MAX_PREP_MINUTES", "-1"),
            ("MAX_RECIPES", "0"),
            ("MIN_COMPATIBILITY", "101"),
            ("SUGGESTION_STRATEGY", "random"),
        ],
    )
    def test_validate_rejects_out_of_range_values(self, monkeypatch, var, value):
        """Test that validate() raises ValueError naming the offending variable."""
        monkeypatch.setenv(var, value)

        config = Config()
        with pytest.raises(ValueError, match=var):
            config.validate()

    def test_validate_accepts_boundaries(self, monkeypatch):
        """Test that boundary values are accepted."""
        monkeypatch.setenv("TEMPERATURE", "2.0")
        monkeypatch.setenv("MAX_OUTPUT_TOKENS", "256")
        monkeypatch.setenv("MAX_PREP_MINUTES", "0")
        monkeypatch.setenv("MIN_COMPATIBILITY", "0")

        Config().validate()  # Should not raise


class TestConfigEnvironmentOverride:
    """Test that environment variables override other sources."""

    def test_system_env_overrides_defaults(self, monkeypatch):
        """Test that system env vars take precedence over defaults."""
        monkeypatch.setenv("MAX_PREP_MINUTES", "45")

        config = Config()
        assert config.MAX_PREP_MINUTES == 45  # Not default 30

    def test_empty_min_compatibility_means_strategy_default(self, monkeypatch):
        """Test that an empty MIN_COMPATIBILITY is treated as unset."""
        monkeypatch.setenv("MIN_COMPATIBILITY", "")

        assert Config().MIN_COMPATIBILITY is None
