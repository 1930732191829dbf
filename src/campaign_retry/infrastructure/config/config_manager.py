"""Configuration manager for loading and validating .campaign-retry.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from campaign_retry.domain.config import (
    ApiConfig,
    AppConfig,
    AuthConfig,
    RequestDefaultsConfig,
    RetryConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".campaign-retry.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .campaign-retry.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .campaign-retry.yml file (searched from current directory upwards)
    3. Environment variables (CAMPAIGN_RETRY_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "api": {
            "base_url": None,
            "timeout": 10.0,
        },
        "auth": {
            "token_env": "CAMPAIGN_RETRY_TOKEN",
            "session_file": None,
        },
        "request": {
            "max_attempts": 3,
            "delay_ms": 1000,
        },
        "retry": {
            "max_attempts": 1,
            "initial_delay": 1.0,
            "backoff_multiplier": 2.0,
            "jitter": 0.1,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .campaign-retry.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If the file is unreadable or validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .campaign-retry.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and environment, then validate

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If the file cannot be read or parsed
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        if os.getenv("CAMPAIGN_RETRY_API_BASE"):
            config["api"]["base_url"] = os.getenv("CAMPAIGN_RETRY_API_BASE")

        if os.getenv("CAMPAIGN_RETRY_TIMEOUT"):
            # Pydantic reports a non-numeric value
            config["api"]["timeout"] = os.getenv("CAMPAIGN_RETRY_TIMEOUT")

        if os.getenv("CAMPAIGN_RETRY_TOKEN_ENV"):
            config["auth"]["token_env"] = os.getenv("CAMPAIGN_RETRY_TOKEN_ENV")

        if os.getenv("CAMPAIGN_RETRY_SESSION_FILE"):
            config["auth"]["session_file"] = os.getenv("CAMPAIGN_RETRY_SESSION_FILE")

        return config

    def get_api_config(self) -> ApiConfig:
        """Get API configuration"""
        return self.config.api

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration"""
        return self.config.auth

    def get_request_defaults(self) -> RequestDefaultsConfig:
        """Get default retry request parameters"""
        return self.config.request

    def get_retry_config(self) -> RetryConfig:
        """Get caller-side re-invocation configuration"""
        return self.config.retry
