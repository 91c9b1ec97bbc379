"""
Global Configuration and Defaults.

Centralizes the defaults used to reach the logical-history API and to
load its responses. Values can be overridden by `.locha/config.yaml`
and then by environment variables:

    LOCHA_API_URL        base URL of the logical-history API
    LOCHA_TIMEOUT        request timeout in seconds
    LOCHA_STRICT_LINKS   "0"/"false" to report dangling links instead of failing
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# --- API ---
DEFAULT_API_BASE_URL = "https://osm-logical-history-dev.teritorio.xyz"
API_ENDPOINT = "/api/0.1/overpass_logical_history"
DEFAULT_TIMEOUT_SECONDS = 30.0

# The API refuses date ranges longer than about one month
MAX_DATE_RANGE_DAYS = 31

DEFAULT_CONFIG_PATH = Path(".locha/config.yaml")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class LoChaConfig:
    """
    Runtime settings.

    Attributes:
        api_base_url: Base URL of the logical-history API.
        timeout: HTTP timeout in seconds.
        strict_links: Reject payloads with dangling link references.
        max_date_range_days: Longest allowed query period.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    strict_links: bool = True
    max_date_range_days: int = MAX_DATE_RANGE_DAYS

    @property
    def api_url(self) -> str:
        return self.api_base_url.rstrip("/") + API_ENDPOINT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoChaConfig":
        """
        Build a config from the YAML layout:

            api:
              base_url: https://...
              timeout: 10
            links:
              strict: false
            query:
              max_date_range_days: 31
        """
        api = data.get("api") or {}
        links = data.get("links") or {}
        query = data.get("query") or {}

        config = cls()
        try:
            if "base_url" in api:
                config.api_base_url = str(api["base_url"])
            if "timeout" in api:
                config.timeout = float(api["timeout"])
            if "strict" in links:
                config.strict_links = _to_bool(links["strict"])
            if "max_date_range_days" in query:
                config.max_date_range_days = int(query["max_date_range_days"])
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        if config.timeout <= 0:
            raise ConfigError("api.timeout must be positive")
        if config.max_date_range_days <= 0:
            raise ConfigError("query.max_date_range_days must be positive")
        return config

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "LoChaConfig":
        """
        Load settings from a YAML file (if it exists) and the environment.

        Raises:
            ConfigError: On unreadable YAML or invalid values.
        """
        config_path = path or DEFAULT_CONFIG_PATH
        environ = os.environ if environ is None else environ

        data: Dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a mapping")
            logger.debug("Loaded configuration from %s", config_path)

        config = cls.from_dict(data)

        if environ.get("LOCHA_API_URL"):
            config.api_base_url = environ["LOCHA_API_URL"]
        if environ.get("LOCHA_TIMEOUT"):
            try:
                config.timeout = float(environ["LOCHA_TIMEOUT"])
            except ValueError as e:
                raise ConfigError(f"LOCHA_TIMEOUT: {e}") from e
        if environ.get("LOCHA_STRICT_LINKS"):
            config.strict_links = _to_bool(environ["LOCHA_STRICT_LINKS"])

        return config


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")
