"""Engine configuration and declarative validator definitions, loaded from YAML."""

import hashlib
import logging
import os
import urllib.parse
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml
from jsonschema import Draft7Validator

from .errors import ConfigurationError
from .schemas import CONFIG_SCHEMA, DEFINITION_SCHEMA

logger = logging.getLogger(__name__)


def check_schema(document: Any, schema: Dict[str, Any], what: str) -> None:
    """
    Validate document against a JSON schema.

    Raises:
        ConfigurationError: Naming the first failing location
    """
    errors = sorted(Draft7Validator(schema).iter_errors(document), key=lambda e: list(e.path))
    if errors:
        error = errors[0]
        error_path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        raise ConfigurationError(f"Invalid {what} at {error_path}: {error.message}")


class ConfigLoader:
    """
    Loads the engine config and validator definitions.

    The bundled engine-config.yaml holds the defaults. An override file, given
    explicitly or through the RECORD_VALIDATE_CONFIG environment variable, is
    merged over it key by key. The result is checked against CONFIG_SCHEMA.
    """

    ENV_VAR = "RECORD_VALIDATE_CONFIG"
    CACHE_DIR = Path.home() / ".cache" / "record-validate"

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Optional YAML file overriding the bundled defaults
        """
        config_file = files('record_validate').joinpath('engine-config.yaml')
        with config_file.open('r') as f:
            self.config: Dict[str, Any] = yaml.safe_load(f) or {}

        self.config_path = config_path or os.environ.get(self.ENV_VAR)
        if self.config_path:
            override = self._load_yaml(self.config_path) or {}
            if not isinstance(override, dict):
                raise ConfigurationError(f"Config file {self.config_path} must hold a mapping")
            self.config.update(override)

        check_schema(self.config, CONFIG_SCHEMA, "engine config")

    def _load_yaml(self, path: str) -> Any:
        """Load YAML file from disk."""
        with open(path) as f:
            return yaml.safe_load(f)

    def get_empty_scene_policy(self) -> str:
        return self.config.get("empty_scene", "none")

    def get_allow_rule_overwrite(self) -> bool:
        return self.config.get("allow_rule_overwrite", True)

    def get_system_error_prefix(self) -> Optional[str]:
        return self.config.get("system_error_prefix")

    def get_check_var_prefix(self) -> str:
        return self.config.get("check_var_prefix", "validate: ")

    def get_rule_modules(self) -> List[str]:
        return list(self.config.get("rule_modules") or [])

    def get_cache_dir(self) -> Path:
        cache_dir = self.config.get("cache_dir")
        return Path(cache_dir).expanduser() if cache_dir else self.CACHE_DIR

    def get_request_timeout(self) -> float:
        return self.config.get("request_timeout_seconds", 10)

    def load_definition(self, uri: str, refresh: bool = False) -> Dict[str, Any]:
        """
        Load a validator definition (rules, titles, messages, scenes) from URI.

        Supports:
        - Relative or absolute paths - definitions/user.yaml
        - file:// - Local filesystem
        - https:// / http:// - Remote, cached under the cache dir

        Args:
            uri: Definition URI or path
            refresh: Re-fetch remote definitions even when cached

        Returns:
            Parsed definition dict

        Raises:
            ConfigurationError: If the definition does not match DEFINITION_SCHEMA
        """
        uri = os.fspath(uri)
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme or len(parsed.scheme) == 1:
            # Plain path (a single letter scheme is a Windows drive)
            definition = self._load_yaml(uri)
        elif parsed.scheme == 'file':
            definition = self._load_yaml(urllib.parse.unquote(parsed.path))
        elif parsed.scheme in ('http', 'https'):
            definition = yaml.safe_load(self._fetch_cached(uri, refresh))
        else:
            raise ValueError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

        check_schema(definition, DEFINITION_SCHEMA, f"validator definition {uri}")
        return definition

    def _fetch_cached(self, uri: str, refresh: bool) -> str:
        cache_dir = self.get_cache_dir()
        cache_key = hashlib.sha256(uri.encode()).hexdigest()
        cache_path = cache_dir / f"definition_{cache_key}.yaml"

        if cache_path.exists() and not refresh:
            return cache_path.read_text()

        content = self._fetch_uri(uri)
        cache_dir.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(content)
        return content

    def _fetch_uri(self, uri: str) -> str:
        """Fetch content from HTTP/HTTPS URI."""
        logger.info("Fetching validator definition", extra={'uri': uri})
        try:
            response = requests.get(uri, timeout=self.get_request_timeout())
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"Failed to fetch definition from {uri}: {e}") from e
        return response.text


_config: Optional[ConfigLoader] = None


def get_config() -> ConfigLoader:
    """Get or initialize the process ConfigLoader."""
    global _config
    if _config is None:
        _config = ConfigLoader()
    return _config


def reset_config():
    """Reset the process config (for testing)."""
    global _config
    _config = None
