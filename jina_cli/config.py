"""Settings file and environment handling.

The settings file lives at ``~/.jina-reader/config.yaml`` and holds one
``key=value`` pair per line; ``#`` lines and blank lines are comments.
Resolution order (last wins): defaults, file, ``JINA_*`` environment
variables, command-line flags. Flags are applied by the CLI.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .errors import ConfigError
from .models.config import Settings

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".jina-reader"
CONFIG_FILE_NAME = "config.yaml"

KEYS = (
    "api_base_url",
    "search_api_url",
    "default_response_format",
    "default_output_format",
    "timeout",
    "with_generated_alt",
    "proxy_url",
    "cache_tolerance",
    "api_key",
)

SENSITIVE_KEYS = frozenset({"api_key"})

ENV_VARS = {
    "api_base_url": "JINA_API_BASE_URL",
    "search_api_url": "JINA_SEARCH_API_URL",
    "default_response_format": "JINA_RESPONSE_FORMAT",
    "default_output_format": "JINA_OUTPUT_FORMAT",
    "timeout": "JINA_TIMEOUT",
    "with_generated_alt": "JINA_WITH_GENERATED_ALT",
    "proxy_url": "JINA_PROXY_URL",
    "cache_tolerance": "JINA_CACHE_TOLERANCE",
    "api_key": "JINA_API_KEY",
}

FILE_HEADER = """\
# jina-cli configuration
# Environment variables (JINA_*) override values in this file.
#
# Keys:
#   api_base_url             - Read API base URL (default: https://r.jina.ai/)
#   search_api_url           - Search API base URL (default: https://s.jina.ai/)
#   default_response_format  - Response format (default: markdown)
#     one of: markdown, html, text, screenshot
#   default_output_format    - Output format (default: json)
#     one of: json, markdown
#   timeout                  - Request timeout in seconds (default: 30)
#   with_generated_alt       - Caption images (default: false)
#   proxy_url                - Proxy server URL
#   cache_tolerance          - Accepted cache age in seconds
#   api_key                  - API key
#

"""


def default_config_path() -> Path:
    """Get the per-user settings file path."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def mask_sensitive(value: str) -> str:
    """
    Mask a secret for display.

    Examples:
        >>> mask_sensitive("abcd1234efgh")
        'abcd***efgh'
        >>> mask_sensitive("12345678")
        '***'
    """
    if len(value) <= 8:
        return "***"
    return value[:4] + "***" + value[-4:]


def normalize_key(key: str) -> str:
    """Accept ``with-generated-alt`` as well as ``with_generated_alt``."""
    return key.strip().replace("-", "_")


def _parse_bool(value: str) -> bool:
    return value.lower() == "true" or value == "1"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigStore:
    """
    Reads and writes the settings file and resolves ``Settings``.

    Example:
        store = ConfigStore()
        settings = store.load()
        store.set("timeout", "60")
        store.get("api_key")  # masked
    """

    def __init__(self, path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the store.

        Args:
            path: Settings file path (default: ~/.jina-reader/config.yaml)
            environ: Environment mapping (default: os.environ)
        """
        self.path = Path(path) if path else default_config_path()
        self.environ = environ if environ is not None else os.environ

    def _apply(self, settings: Settings, key: str, raw: str, source: str, strict: bool) -> Settings:
        """Return ``settings`` with ``key`` set from its raw string form.

        With ``strict`` an invalid value raises ConfigError; otherwise it is
        logged and ignored.
        """
        value: Any = _parse_bool(raw) if key == "with_generated_alt" else raw
        data = settings.model_dump()
        data[key] = value
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            if strict:
                raise ConfigError(f"Invalid value for {key}: {raw}") from e
            logger.warning(f"Ignoring invalid {key} from {source}: {raw!r}")
            return settings

    def _read_file(self) -> dict[str, str]:
        values: dict[str, str] = {}
        if not self.path.exists():
            return values

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read config file {self.path}: {e}") from e

        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            key = key.strip()
            if key not in KEYS:
                logger.debug(f"Ignoring unknown config key: {key}")
                continue
            values[key] = value.strip()
        return values

    def load_file(self) -> Settings:
        """Resolve defaults overlaid with the settings file only."""
        settings = Settings()
        for key, raw in self._read_file().items():
            settings = self._apply(settings, key, raw, str(self.path), strict=False)
        return settings

    def load(self) -> Settings:
        """Resolve defaults, then the settings file, then environment variables."""
        settings = self.load_file()
        for key, env_var in ENV_VARS.items():
            raw = self.environ.get(env_var, "")
            if raw:
                settings = self._apply(settings, key, raw, env_var, strict=False)
        return settings

    def save(self, settings: Settings) -> None:
        """
        Write settings to the file, listing only non-default values.

        Raises:
            ConfigError: If the file cannot be written
        """
        defaults = Settings()
        lines = [FILE_HEADER]
        for key in KEYS:
            value = getattr(settings, key)
            if value != getattr(defaults, key):
                lines.append(f"{key}={_format_value(value)}\n")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("".join(lines), encoding="utf-8")
            self.path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {self.path}: {e}") from e
        logger.debug(f"Saved config to {self.path}")

    def _check_key(self, key: str) -> str:
        normalized = normalize_key(key)
        if normalized not in KEYS:
            raise ConfigError(f"Unknown config key: {key}")
        return normalized

    def set(self, key: str, value: str) -> None:  # noqa: A003
        """
        Validate and persist one value.

        Environment overrides are not written back to the file.

        Raises:
            ConfigError: On an unknown key or invalid value (file untouched)
        """
        normalized = self._check_key(key)
        settings = self._apply(self.load_file(), normalized, value, "command line", strict=True)
        self.save(settings)

    def get(self, key: str) -> str:
        """
        Return the resolved value of one key as a string.

        ``api_key`` is masked; an unset value is returned as ``""``.

        Raises:
            ConfigError: On an unknown key
        """
        normalized = self._check_key(key)
        return self.list()[normalized]

    def list(self) -> dict[str, str]:  # noqa: A003
        """Return every resolved key in display order, secrets masked."""
        settings = self.load()
        result = {}
        for key in KEYS:
            value = _format_value(getattr(settings, key))
            if key in SENSITIVE_KEYS and value:
                value = mask_sensitive(value)
            result[key] = value
        return result
