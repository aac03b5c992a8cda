"""Locate and read wikiaddr.json without touching the pydantic models."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_ENV = "WIKIADDR_CONFIG"

# Checked in the working directory, in this order.
LOCAL_CONFIG_NAMES = (".wikiaddr.json", "wikiaddr.json")


def resolve_config_path(cli_path: Optional[Path] = None) -> Path:
    """Pick the config file for this run.

    ``--config`` wins, then ``$WIKIADDR_CONFIG``, then a config in the
    working directory, then ``~/.wikiaddr.json``. The returned path need
    not exist; a missing file means the built-in separators and aliases.
    """
    if cli_path:
        return cli_path

    env = os.getenv(CONFIG_ENV)
    if env:
        return Path(env).expanduser()

    for name in LOCAL_CONFIG_NAMES:
        local = Path.cwd() / name
        if local.exists():
            return local

    return Path.home() / ".wikiaddr.json"


def load_json(path: Path) -> Dict[str, Any]:
    """Raw config mapping from ``path``; {} when the file is absent."""
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


__all__ = ["CONFIG_ENV", "LOCAL_CONFIG_NAMES", "load_json", "resolve_config_path"]
