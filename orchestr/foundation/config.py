"""
Config system - dot-notation repository and layered loader.

Sources are merged with precedence (later overrides earlier):
1. ``.env`` file (loaded into the process environment)
2. Config files in the config directory (``app.yaml`` → ``app.*`` keys)
3. Prefixed environment variables (``ORCHESTR_APP__NAME`` → ``app.name``)
4. Manual overrides
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..faults import Fault, FaultDomain
from .provider import ServiceProvider

logger = logging.getLogger("orchestr.foundation.config")

_MISSING = object()


class ConfigError(Fault):
    """Raised when a configuration source cannot be read."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration source '{source}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"source": source, "reason": reason},
        )


class Config:
    """
    Configuration repository with dot-notation access.

    Example:
        config = Config({"database": {"default": "sqlite"}})
        config.get("database.default")          # "sqlite"
        config.set("database.connections.sqlite.path", ":memory:")
    """

    def __init__(self, items: Optional[Dict[str, Any]] = None):
        self._items: Dict[str, Any] = items if items is not None else {}

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        current: Any = self._items
        for segment in key.split("."):
            if isinstance(current, Mapping) and segment in current:
                current = current[segment]
            else:
                return default
        return current

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        """Set one value, or several from a mapping of dotted keys."""
        if isinstance(key, Mapping):
            for name, item in key.items():
                self.set(name, item)
            return

        *parents, last = key.split(".")
        current = self._items
        for segment in parents:
            if not isinstance(current.get(segment), dict):
                current[segment] = {}
            current = current[segment]
        current[last] = value

    def push(self, key: str, value: Any) -> None:
        """Append a value to a list option."""
        items = list(self.get(key, []))
        items.append(value)
        self.set(key, items)

    def prepend(self, key: str, value: Any) -> None:
        items = list(self.get(key, []))
        items.insert(0, value)
        self.set(key, items)

    def all(self) -> Dict[str, Any]:
        return self._items

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)


class ConfigLoader:
    """Loads and merges configuration sources into a Config."""

    def __init__(self, env_prefix: Optional[str] = None):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        config_dir: Optional[str | Path] = None,
        env_file: Optional[str | Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        env_prefix: Optional[str] = None,
    ) -> Config:
        """
        Load configuration.

        Args:
            config_dir: Directory of ``*.yaml``/``*.yml``/``*.json`` files
            env_file: Path to a ``.env`` file
            overrides: Manual overrides (highest precedence)
            env_prefix: Read ``<prefix>SECTION__KEY`` environment variables

        Returns:
            Config repository
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(Path(env_file))

        if config_dir:
            loader._load_directory(Path(config_dir))

        if env_prefix:
            loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return Config(loader.config_data)

    def _load_env_file(self, path: Path) -> None:
        if not path.is_file():
            return
        load_dotenv(path, override=False)
        logger.debug("Loaded environment from %s", path)

    def _load_directory(self, directory: Path) -> None:
        if not directory.is_dir():
            return

        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                data = self._read_yaml(path)
            elif path.suffix == ".json":
                data = self._read_json(path)
            else:
                continue

            if data is None:
                continue
            if not isinstance(data, dict):
                raise ConfigError(str(path), "top level must be a mapping")

            self._merge_dict(self.config_data, {path.stem: data})
            logger.debug("Loaded config file %s", path)

    def _read_yaml(self, path: Path) -> Any:
        try:
            with open(path) as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(str(path), str(e)) from e

    def _read_json(self, path: Path) -> Any:
        try:
            with open(path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(str(path), str(e)) from e

    def _load_from_env(self) -> None:
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str) -> None:
        """Convert ORCHESTR_CACHE__DEFAULT to config_data["cache"]["default"]."""
        parts = key[len(self.env_prefix):].lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

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

    def _merge_dict(self, target: dict, source: Mapping[str, Any]) -> None:
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, Mapping):
                self._merge_dict(target[key], value)
            else:
                target[key] = value


class ConfigServiceProvider(ServiceProvider):
    """
    Binds the shared ``config`` repository.

    With explicit items the repository holds exactly those; otherwise it is
    loaded from the application's config directory and environment file.
    """

    def __init__(self, app, items: Optional[Dict[str, Any]] = None):
        super().__init__(app)
        self.items = items

    def register(self) -> None:
        self.app.singleton("config", lambda app: self._build())
        self.app.alias("config", Config)

    def _build(self) -> Config:
        if self.items is not None:
            return Config(self.items)
        return ConfigLoader.load(
            config_dir=self.app.config_path(),
            env_file=self.app.base_path(self.app.environment_file()),
        )

    def provides(self):
        return ["config", Config]
