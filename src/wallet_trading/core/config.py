"""Configuration loading for wallet trading.

Settings live in ``config/settings.yaml`` with an optional, uncommitted
``settings.local.yaml`` overlay merged on top.  String values may refer
to environment variables as ``${NAME}`` or ``${NAME:default}``, anywhere
in the string; a ``.env`` file is loaded before references are expanded.
"""

import os
import re
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

_SETTINGS_FILE = "settings.yaml"
_LOCAL_SETTINGS_FILE = "settings.local.yaml"
_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<default>[^}]*))?\}")


class ConfigError(Exception):
    """Raise when configuration loading or validation fails."""


def _read_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML file that must hold a mapping; a missing file is empty."""
    if not path.exists():
        return {}
    with path.open() as f:
        data: Any = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return cast("dict[str, Any]", data)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in, recursing into nested mappings."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge(cast("dict[str, Any]", current), cast("dict[str, Any]", value))
        else:
            merged[key] = value
    return merged


def _resolve_reference(match: re.Match[str]) -> str:
    """Return the environment value (or default) for one ``${...}`` reference."""
    name = match["name"]
    value = os.getenv(name, match["default"])
    if value is None:
        msg = f"Required environment variable ${{{name}}} is not set and has no default"
        raise ConfigError(msg)
    return value


def _expand(value: Any) -> Any:
    """Expand environment references in every string of a parsed YAML tree."""
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in cast("dict[str, Any]", value).items()}
    if isinstance(value, list):
        return [_expand(item) for item in cast("list[Any]", value)]
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_resolve_reference, value)
    return value


class ConfigLoader:
    """Load the settings files once and serve named sections from them.

    Args:
        config_dir: Directory holding the settings files. Defaults to
            the packaged ``wallet_trading/config`` directory.

    """

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            config_dir: Directory holding the settings files.

        Raises:
            ConfigError: If a file is not a mapping or a referenced
                environment variable is unset and has no default.

        """
        load_dotenv()
        self.config_dir = Path(config_dir or Path(__file__).parent.parent / "config")
        base = _read_mapping(self.config_dir / _SETTINGS_FILE)
        local = _read_mapping(self.config_dir / _LOCAL_SETTINGS_FILE)
        self._config: dict[str, Any] = _expand(_merge(base, local))

    def section(self, name: str) -> dict[str, Any]:
        """Return a copy of one top-level section.

        Args:
            name: Section key, e.g. ``"polymarket"``.

        Returns:
            The section's mapping, or an empty dict when it is absent.

        Raises:
            ConfigError: If the section is present but not a mapping.

        """
        value: Any = self._config.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            msg = f"{name} config must be a dict, got {type(value).__name__}"
            raise ConfigError(msg)
        return dict(cast("dict[str, Any]", value))

    def get_polymarket_config(self) -> dict[str, Any]:
        """Return the Polymarket connection section."""
        return self.section("polymarket")


_config: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Return the global ``ConfigLoader``, creating it on first use.

    Returns:
        The shared ``ConfigLoader`` instance.

    """
    global _config  # noqa: PLW0603
    if _config is None:
        _config = ConfigLoader()
    return _config


def reset_config() -> None:
    """Drop the cached ``ConfigLoader`` so the next ``get_config`` reloads from disk."""
    global _config  # noqa: PLW0603
    _config = None
