"""
Config system - Layered typed configuration for the message model.

Supports JSON/YAML files, .env files and PLUME_* environment variables,
merged with precedence and instantiated into a typed MessageConfig.
"""

import json
import logging
import os
import types
from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, get_args, get_origin

from dotenv import dotenv_values

from .faults import ConfigInvalidFault

logger = logging.getLogger("plume.config")

VALID_PROTOCOL_VERSIONS = frozenset({"1.0", "1.1", "2.0"})


@dataclass(frozen=True)
class MessageConfig:
    """Settings consulted when messages, streams and uploads are built."""

    protocol_version: str = "1.1"
    spool_max_size: int = 2 * 1024 * 1024  # 2 MiB in memory before spilling to disk
    upload_chunk_size: int = 1024 * 1024

    def __post_init__(self):
        if self.protocol_version not in VALID_PROTOCOL_VERSIONS:
            raise ConfigInvalidFault(
                "protocol_version",
                f"must be one of {', '.join(sorted(VALID_PROTOCOL_VERSIONS))}",
            )
        if self.spool_max_size < 0:
            raise ConfigInvalidFault("spool_max_size", "must not be negative")
        if self.upload_chunk_size <= 0:
            raise ConfigInvalidFault("upload_chunk_size", "must be positive")


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > Environment variables > .env file > config files > defaults
    """

    def __init__(self, env_prefix: str = "PLUME_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "PLUME_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Args:
            paths: JSON or YAML config files (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        logger.debug(f"Loaded message config keys: {sorted(loader.config_data)}")
        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)

            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)

    def _load_json_file(self, path: Path):
        with open(path) as f:
            data = json.load(f)
            self._merge_dict(self.config_data, data)

    def _load_yaml_file(self, path: Path):
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert PLUME_SECTION__KEY to nested dict."""
        key = key[len(self.env_prefix):]

        # Split by double underscore for nested keys
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        # Protocol versions look like floats but must stay strings
        if value in VALID_PROTOCOL_VERSIONS:
            return value

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        parts = path.split(".")
        current = self.config_data

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def message_config(self) -> MessageConfig:
        """Instantiate and validate MessageConfig from the merged data."""
        return self._instantiate_dataclass(MessageConfig, self.config_data)

    def _instantiate_dataclass(self, config_class: Type, data: dict):
        kwargs = {}

        for field_info in fields(config_class):
            field_name = field_info.name
            field_type = field_info.type

            if field_name in data:
                value = data[field_name]

                if not self._check_type(value, field_type):
                    raise ConfigInvalidFault(
                        field_name,
                        f"expected {field_type}, got {type(value).__name__}",
                    )

                kwargs[field_name] = value
            elif field_info.default is not MISSING:
                kwargs[field_name] = field_info.default

        return config_class(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        if isinstance(expected_type, str):
            expected_type = {"str": str, "int": int, "float": float, "bool": bool}.get(expected_type, object)

        origin = get_origin(expected_type)
        if origin is types.UnionType or str(origin) == "typing.Union":
            if value is None:
                return True
            args = get_args(expected_type)
            if args:
                return self._check_type(value, args[0])

        if origin:
            return isinstance(value, origin)

        # bool is an int subclass
        if expected_type is int and isinstance(value, bool):
            return False

        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return self.config_data.copy()


_active_config: Optional[MessageConfig] = None


def get_config() -> MessageConfig:
    """
    Get or create the process-wide message config.

    Returns:
        Active MessageConfig instance
    """
    global _active_config
    if _active_config is None:
        _active_config = MessageConfig()
    return _active_config


def set_config(config: Optional[MessageConfig]) -> None:
    """Install ``config`` as the active config; ``None`` restores defaults."""
    global _active_config
    _active_config = config
