"""Storage backends for existence checks and fixture building."""

from .filesystem import FileStore, StoreError

__all__ = ["FileStore", "StoreError"]
