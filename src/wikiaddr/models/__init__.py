"""Pydantic models for wikiaddr.json configuration."""

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_FORM_PATTERN,
    DEFAULT_RECORD_ALIASES,
    AddressConfig,
    SeparatorConfig,
)

__all__ = [
    "AddressConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_FORM_PATTERN",
    "DEFAULT_RECORD_ALIASES",
    "SeparatorConfig",
]
