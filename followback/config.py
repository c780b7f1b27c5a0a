"""Configuration management for followback."""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import ValidationError

from .error_handling import ConfigurationError
from .models import Config


class ConfigManager:
    """Manages configuration loading and validation."""

    DEFAULT_CONFIG = {
        "platform": {
            "domain": "instagram.com",
            "user_link_class": "user-link",
            "username_attribute": "data-username",
            "canonical_keys": {
                "followers": "relationships_followers",
                "following": "relationships_following",
            },
        },
        "processing": {
            "max_input_bytes": 10 * 1024 * 1024,
            "parallel_extraction": False,
            "warn_on_mismatch": True,
        },
        "export": {
            "filename_prefix": "instagram-analysis",
            "output_dir": ".",
            "indent": 2,
        },
        "logging": {
            "format": "text",
            "level": "INFO",
            "log_file": None,
        },
    }

    TRUTHY = ("true", "1", "yes")

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config manager.

        Args:
            config_path: Path to a JSON config file. If None, uses defaults + env vars
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """Load configuration from file and environment."""
        if self._config:
            return self._config

        config_dict = self._deep_merge(self.DEFAULT_CONFIG, {})

        if self.config_path:
            if not self.config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {self.config_path}",
                    config_key="config_path",
                )
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Config file is not valid JSON: {e}",
                    config_key="config_path",
                ) from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    "Config file must contain a JSON object",
                    config_key="config_path",
                )
            config_dict = self._deep_merge(config_dict, file_config)

        config_dict = self._apply_env_overrides(config_dict)

        try:
            self._config = Config(**config_dict)
        except ValidationError as e:
            first = e.errors()[0]
            raise ConfigurationError(
                f"Invalid configuration: {e}",
                config_key=".".join(str(part) for part in first.get("loc", ())),
            ) from e
        return self._config

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries without mutating either."""
        result = {
            key: self._deep_merge(value, {}) if isinstance(value, dict) else value
            for key, value in base.items()
        }

        for key, value in update.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides."""
        domain = os.getenv("FOLLOWBACK_PLATFORM_DOMAIN")
        if domain:
            config.setdefault("platform", {})["domain"] = domain

        export_dir = os.getenv("FOLLOWBACK_EXPORT_DIR")
        if export_dir:
            config.setdefault("export", {})["output_dir"] = export_dir

        log_level = os.getenv("FOLLOWBACK_LOG_LEVEL")
        if log_level:
            config.setdefault("logging", {})["level"] = log_level

        log_format = os.getenv("FOLLOWBACK_LOG_FORMAT")
        if log_format:
            config.setdefault("logging", {})["format"] = log_format.lower()

        parallel = os.getenv("FOLLOWBACK_PARALLEL")
        if parallel:
            config.setdefault("processing", {})["parallel_extraction"] = (
                parallel.lower() in self.TRUTHY
            )

        max_bytes = os.getenv("FOLLOWBACK_MAX_INPUT_BYTES")
        if max_bytes:
            try:
                config.setdefault("processing", {})["max_input_bytes"] = int(max_bytes)
            except ValueError:
                raise ConfigurationError(
                    f"FOLLOWBACK_MAX_INPUT_BYTES must be an integer, got {max_bytes!r}",
                    config_key="processing.max_input_bytes",
                )

        return config

    def save_template(self, path: str):
        """Save a configuration template file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.DEFAULT_CONFIG, f, indent=2)

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            self._config = self.load()
        return self._config
