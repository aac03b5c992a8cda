"""Configuration models for address parsing and rendering."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Lowercase nicknames understood in part specifiers, e.g. "fields[3]".
DEFAULT_RECORD_ALIASES: Dict[str, str] = {
    "attachments": "FILEATTACHMENT",
    "fields": "FIELD",
    "form": "FORM",
    "info": "TOPICINFO",
    "moved": "TOPICMOVED",
    "parent": "TOPICPARENT",
    "preferences": "PREFERENCE",
}

# Form topics are named like "MyForm" by convention.
DEFAULT_FORM_PATTERN = r"^[A-Z]\w*Form$"

Separator = Literal["/", "."]

_RESERVED_ALIASES = {"text", "meta", "file"}


class SeparatorConfig(BaseModel):
    """Characters joining web segments, and joining the web to the topic."""

    model_config = ConfigDict(frozen=True)

    webseparator: Separator = "/"
    topicseparator: Separator = "."

    @property
    def chars(self) -> str:
        """All characters that split a prefix into segments."""

        return "".join(sorted({self.webseparator, self.topicseparator}))


class AddressConfig(BaseModel):
    """Root wikiaddr.json configuration."""

    webseparator: Separator = "/"
    topicseparator: Separator = "."
    record_aliases: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_RECORD_ALIASES)
    )
    form_pattern: str = DEFAULT_FORM_PATTERN
    store_root: Path | None = None
    config_path: Path | None = Field(default=None, exclude=True)

    @field_validator("record_aliases")
    @classmethod
    def aliases_well_formed(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Alias names are lowercase identifiers, targets uppercase ones."""

        for alias, record_type in v.items():
            if not re.match(r"^[a-z_][a-z0-9_]*\Z", alias):
                raise ValueError(f"Alias must be a lowercase identifier: {alias!r}")
            if alias in _RESERVED_ALIASES:
                raise ValueError(f"Alias name is reserved: {alias!r}")
            if not re.match(r"^[A-Z_][A-Z0-9_]*\Z", record_type):
                raise ValueError(
                    f"Record type must be an uppercase identifier: {record_type!r}"
                )
        return v

    @field_validator("form_pattern")
    @classmethod
    def pattern_compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"Invalid form_pattern {v!r}: {exc}") from exc
        return v

    @property
    def separators(self) -> SeparatorConfig:
        return SeparatorConfig(
            webseparator=self.webseparator, topicseparator=self.topicseparator
        )


DEFAULT_CONFIG = AddressConfig()


__all__ = [
    "AddressConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_FORM_PATTERN",
    "DEFAULT_RECORD_ALIASES",
    "SeparatorConfig",
]
