"""YAML configuration for the glassfrog client and CLI."""

from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

CONFIG_DIRNAME = ".glassfrog"
KNOWN_KEYS = ("api_key", "base_url", "caching", "cache_dir")


class Config:
    """Settings stored in a YAML file.

    Local settings live in .glassfrog/config.yaml under the current directory
    and fall back to the global ~/.glassfrog/config.yaml when a key is missing.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            use_global: Read and write the global file only
            config_dir: Directory holding config.yaml (overrides the default location)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif use_global:
            self.config_dir = Path.home() / CONFIG_DIRNAME
        else:
            self.config_dir = Path.cwd() / CONFIG_DIRNAME
        self.is_global = use_global
        self.config_file = self.config_dir / "config.yaml"

        self._config: dict[str, Any] = self._read(self.config_file)
        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_file = Path.home() / CONFIG_DIRNAME / "config.yaml"
            if global_file != self.config_file:
                try:
                    self._global_config = self._read(global_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _read(config_file: Path) -> dict[str, Any]:
        if not config_file.exists():
            return {}
        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", config_file=str(config_file), error=str(e))
            raise ValueError(f"Failed to load config from {config_file}: {e}") from e
        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        logger.debug("Config loaded", config_file=str(config_file), keys=list(config))
        return config

    def _save(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e
        logger.debug("Config saved", config_file=str(self.config_file))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, checking the local file before the global one."""
        if key in self._config:
            return self._config[key]
        if not self.is_global and key in self._global_config:
            return self._global_config[key]
        return default

    def set(self, key: str, value: Any) -> None:
        if key not in KNOWN_KEYS:
            logger.warning("Setting unrecognized config key", key=key, known_keys=list(KNOWN_KEYS))
        self._config[key] = value
        self._save()

    def unset(self, key: str) -> None:
        if key in self._config:
            del self._config[key]
            self._save()

    def list(self) -> dict[str, Any]:
        """All settings; local values override global ones."""
        if self.is_global:
            return self._config.copy()
        merged = self._global_config.copy()
        merged.update(self._config)
        return merged


def get_config(use_global: bool = False) -> Config:
    return Config(use_global=use_global)
