"""Tests for settings resolution and the settings file."""

import os
import stat

import pytest

from jina_cli.config import (
    ENV_VARS,
    KEYS,
    ConfigStore,
    default_config_path,
    mask_sensitive,
    normalize_key,
)
from jina_cli.errors import ConfigError
from jina_cli.models.config import DEFAULT_READ_API_URL, DEFAULT_SEARCH_API_URL


@pytest.fixture
def config_path(tmp_path):
    """Settings file location inside a temp directory."""
    return tmp_path / ".jina-reader" / "config.yaml"


@pytest.fixture
def store(config_path):
    """Store with an empty environment."""
    return ConfigStore(path=config_path, environ={})


class TestDefaults:
    """Test built-in defaults."""

    def test_defaults_without_file(self, store):
        """Test that a missing file yields the defaults."""
        settings = store.load()

        assert settings.api_base_url == DEFAULT_READ_API_URL
        assert settings.search_api_url == DEFAULT_SEARCH_API_URL
        assert settings.default_response_format == "markdown"
        assert settings.default_output_format == "json"
        assert settings.timeout == 30
        assert settings.with_generated_alt is False
        assert settings.api_key == ""

    def test_default_path(self, monkeypatch, tmp_path):
        """Test the per-user settings path."""
        monkeypatch.setenv("HOME", str(tmp_path))

        assert default_config_path() == tmp_path / ".jina-reader" / "config.yaml"


class TestFileLoading:
    """Test reading the key=value settings file."""

    def test_values_from_file(self, store, config_path):
        """Test that file values override defaults."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text(
            "# comment\n"
            "\n"
            "api_base_url = https://custom.example.com/\n"
            "timeout=60\n"
            "with_generated_alt=true\n"
            "default_output_format=markdown\n"
        )

        settings = store.load()

        assert settings.api_base_url == "https://custom.example.com/"
        assert settings.timeout == 60
        assert settings.with_generated_alt is True
        assert settings.default_output_format == "markdown"

    def test_unknown_and_malformed_lines_ignored(self, store, config_path):
        """Test that junk lines do not break loading."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("nonsense line\nunknown_key=1\ntimeout=45\n")

        assert store.load().timeout == 45

    def test_invalid_value_in_file_ignored(self, store, config_path):
        """Test that an invalid timeout keeps the default."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("timeout=abc\n")

        assert store.load().timeout == 30

    def test_value_containing_equals(self, store, config_path):
        """Test that only the first '=' separates key and value."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("proxy_url=http://proxy:8080/?a=b\n")

        assert store.load().proxy_url == "http://proxy:8080/?a=b"

    def test_undecodable_file_is_config_error(self, store, config_path):
        """Test that a file with invalid UTF-8 raises ConfigError on load and set."""
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(b"proxy_url=\xff\n")

        with pytest.raises(ConfigError, match="Failed to read config file"):
            store.load()
        with pytest.raises(ConfigError, match="Failed to read config file"):
            store.set("timeout", "60")

        assert config_path.read_bytes() == b"proxy_url=\xff\n"


class TestEnvironment:
    """Test JINA_* environment overrides."""

    def test_env_overrides_file(self, config_path):
        """Test that environment values beat the file."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("timeout=60\napi_key=file-key\n")
        store = ConfigStore(path=config_path, environ={"JINA_TIMEOUT": "90", "JINA_API_KEY": "env-key"})

        settings = store.load()

        assert settings.timeout == 90
        assert settings.api_key == "env-key"

    def test_empty_env_ignored(self, config_path):
        """Test that empty variables do not clear file values."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("api_base_url=https://from-file/\n")
        store = ConfigStore(path=config_path, environ={"JINA_API_BASE_URL": ""})

        assert store.load().api_base_url == "https://from-file/"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("TRUE", True), ("1", True), ("yes", False)])
    def test_bool_env(self, config_path, raw, expected):
        """Test boolean parsing for with_generated_alt."""
        store = ConfigStore(path=config_path, environ={"JINA_WITH_GENERATED_ALT": raw})

        assert store.load().with_generated_alt is expected

    def test_every_key_has_env_var(self):
        """Test the environment mapping covers all keys."""
        assert set(ENV_VARS) == set(KEYS)
        assert all(name.startswith("JINA_") for name in ENV_VARS.values())


class TestMasking:
    """Test secret masking."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("abcd1234efgh", "abcd***efgh"),
            ("123456789", "1234***6789"),
            ("12345678", "***"),
            ("short", "***"),
            ("", "***"),
        ],
    )
    def test_mask_sensitive(self, value, expected):
        """Test first/last four characters around the mask."""
        assert mask_sensitive(value) == expected


class TestSetAndGet:
    """Test persisting and reading back values."""

    @pytest.mark.parametrize(
        "key,value",
        [
            ("api_base_url", "https://custom.example.com/"),
            ("search_api_url", "https://search.example.com/"),
            ("default_response_format", "html"),
            ("default_output_format", "markdown"),
            ("timeout", "60"),
            ("with_generated_alt", "true"),
            ("proxy_url", "http://proxy:8080"),
            ("cache_tolerance", "3600"),
        ],
    )
    def test_round_trip(self, store, key, value):
        """Test that a set value is returned by get."""
        store.set(key, value)

        assert store.get(key) == value

    def test_api_key_masked_on_get(self, store, config_path):
        """Test that the key is stored in full but displayed masked."""
        store.set("api_key", "abcd1234efgh")

        assert store.get("api_key") == "abcd***efgh"
        assert "api_key=abcd1234efgh" in config_path.read_text()

    def test_unset_api_key_is_empty(self, store):
        """Test that an unset secret is not masked."""
        assert store.get("api_key") == ""

    def test_hyphenated_keys(self, store):
        """Test that hyphens are accepted in key names."""
        store.set("with-generated-alt", "true")

        assert store.get("with_generated_alt") == "true"
        assert store.get("with-generated-alt") == "true"

    def test_unknown_key(self, store, config_path):
        """Test that unknown keys are rejected on set and get."""
        with pytest.raises(ConfigError, match="Unknown config key"):
            store.set("bogus", "1")
        with pytest.raises(ConfigError, match="Unknown config key"):
            store.get("bogus")

        assert not config_path.exists()

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_invalid_timeout_leaves_file_unchanged(self, store, config_path, value):
        """Test that a rejected value does not touch the file."""
        store.set("timeout", "60")
        before = config_path.read_text()

        with pytest.raises(ConfigError, match="Invalid value for timeout"):
            store.set("timeout", value)

        assert config_path.read_text() == before
        assert store.get("timeout") == "60"

    def test_set_keeps_other_values(self, store):
        """Test that setting one key preserves the rest."""
        store.set("timeout", "60")
        store.set("proxy_url", "http://proxy:8080")

        assert store.get("timeout") == "60"
        assert store.get("proxy_url") == "http://proxy:8080"

    def test_env_values_not_persisted(self, config_path):
        """Test that environment overrides never leak into the file."""
        store = ConfigStore(path=config_path, environ={"JINA_API_KEY": "env-secret-value"})

        store.set("timeout", "60")

        text = config_path.read_text()
        assert "env-secret-value" not in text
        assert "api_key=" not in text

    def test_only_non_defaults_written(self, store, config_path):
        """Test that the file lists changed keys under a comment header."""
        store.set("timeout", "60")

        lines = [
            line
            for line in config_path.read_text().splitlines()
            if line.strip() and not line.startswith("#")
        ]
        assert lines == ["timeout=60"]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
    def test_file_owner_only(self, store, config_path):
        """Test that the settings file is readable by its owner only."""
        store.set("api_key", "abcd1234efgh")

        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600


class TestList:
    """Test listing resolved settings."""

    def test_lists_every_key_in_order(self, store):
        """Test that list covers every key in display order."""
        assert list(store.list()) == list(KEYS)

    def test_list_masks_secret(self, config_path):
        """Test that list shows the masked key from the environment."""
        store = ConfigStore(path=config_path, environ={"JINA_API_KEY": "abcd1234efgh"})

        values = store.list()

        assert values["api_key"] == "abcd***efgh"
        assert values["timeout"] == "30"
        assert values["with_generated_alt"] == "false"


class TestNormalizeKey:
    """Test key normalization."""

    def test_normalize(self):
        """Test hyphen and whitespace handling."""
        assert normalize_key(" api-base-url ") == "api_base_url"
