"""Cached wikiaddr.json config shared by the CLI commands."""

from wikiaddr.models import AddressConfig

from .core import ConfigError, config_path, ensure, require, reset, use

__all__ = [
    "AddressConfig",
    "ConfigError",
    "config_path",
    "ensure",
    "require",
    "reset",
    "use",
]
