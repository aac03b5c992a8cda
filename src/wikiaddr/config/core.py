"""Load, validate and cache the wikiaddr.json config."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from wikiaddr.home import load_json, resolve_config_path
from wikiaddr.models import AddressConfig

logger = logging.getLogger(__name__)

_CONFIG: AddressConfig | None = None
_CONFIG_PATH: Path | None = None


class ConfigError(Exception):
    """The config file exists but does not describe a valid config."""

    pass


def reset() -> None:
    """Reset cached config (primarily for tests)."""

    global _CONFIG, _CONFIG_PATH
    _CONFIG = None
    _CONFIG_PATH = None


def config_path() -> Path | None:
    """Return the path of the active config, if set."""

    if _CONFIG_PATH is not None:
        return _CONFIG_PATH
    if _CONFIG is not None and _CONFIG.config_path is not None:
        return _CONFIG.config_path
    return None


def _store(config_obj: AddressConfig, path: Path) -> AddressConfig:
    config_obj.config_path = path
    global _CONFIG, _CONFIG_PATH
    _CONFIG = config_obj
    _CONFIG_PATH = path
    return config_obj


def use(path: Path | str | None = None) -> AddressConfig:
    """Load config from ``path`` (or fallback locations) and cache it.

    A path that does not exist yields the default configuration.
    """

    target: Optional[Path]
    if path is None:
        target = None
    elif isinstance(path, Path):
        target = path
    else:
        target = Path(path)

    resolved = resolve_config_path(target)
    data = load_json(resolved)
    if not data:
        logger.debug("No config at %s; using defaults", resolved)
    try:
        config_obj = AddressConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {resolved}: {exc}") from exc
    return _store(config_obj, resolved)


def ensure(path: Path | str | None = None) -> AddressConfig:
    """Ensure a config is loaded, optionally overriding the path."""

    if path is not None:
        return use(path)
    if _CONFIG is None:
        return use(None)
    return _CONFIG


def require() -> AddressConfig:
    """Return the cached config, loading it if necessary."""

    return ensure(None)


__all__ = [
    "ConfigError",
    "config_path",
    "ensure",
    "require",
    "reset",
    "use",
]
