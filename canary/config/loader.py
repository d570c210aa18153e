"""Configuration loader with YAML parsing and environment variable substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import CanaryConfig
from .settings import Settings


class ConfigLoader:
    """Load and validate canary configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> CanaryConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Environment settings (BUCKET_NAME, AWS_REGION, CANARY_PROBE_TIMEOUT_MS)
        override the values read from the file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CanaryConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If YAML parsing or validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        raw_config = ConfigLoader._substitute_env_vars(raw_config)
        return ConfigLoader._build(ConfigLoader._apply_env_overrides(raw_config))

    @staticmethod
    def from_env() -> CanaryConfig:
        """Build configuration from defaults and environment settings only."""
        return ConfigLoader._build(ConfigLoader._apply_env_overrides({}))

    @staticmethod
    def _build(raw_config: Dict[str, Any]) -> CanaryConfig:
        try:
            return CanaryConfig(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _apply_env_overrides(raw_config: Dict[str, Any]) -> Dict[str, Any]:
        config = dict(raw_config)
        storage = dict(config.get('storage') or {})
        metrics = dict(config.get('metrics') or {})
        probe = dict(config.get('probe') or {})

        bucket = Settings.bucket_name()
        if bucket:
            storage['bucket'] = bucket

        region = Settings.get("AWS_REGION")
        if region:
            storage['region'] = region
            metrics['region'] = region

        try:
            timeout_ms = Settings.probe_timeout_ms()
        except ValueError as e:
            raise ConfigurationError(f"CANARY_PROBE_TIMEOUT_MS must be an integer: {e}") from e
        if timeout_ms is not None:
            probe['timeout_ms'] = timeout_ms

        config['storage'] = storage
        config['metrics'] = metrics
        config['probe'] = probe
        return config

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
