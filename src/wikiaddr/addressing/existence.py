"""Existence checks - ask a storage backend whether an address resolves."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Protocol, Sequence

from .errors import AddressValidationError, ExistenceCheckFailed
from .types import Part

if TYPE_CHECKING:
    from .address import Address

logger = logging.getLogger(__name__)

EXIST_KINDS = ("web", "topic", "file", "meta")


class Storage(Protocol):
    """Lookup capabilities an existence check needs from a store."""

    def web_exists(self, webs: Sequence[str]) -> bool: ...

    def topic_exists(self, webs: Sequence[str], topic: str) -> bool: ...

    def attachment_exists(
        self, webs: Sequence[str], topic: str, filename: str
    ) -> bool: ...

    def revision_exists(self, webs: Sequence[str], topic: str, rev: int) -> bool: ...


class ExistenceValidator:
    """Check the narrowest resource an address names.

    - web: the web path (web addresses only)
    - topic: the topic, and its revision when one is given
    - file: the attachment
    - meta: the topic holding the metadata (members and keys are not
      looked up)

    A kind that does not match the address's type reports False without
    a lookup. Lookups are not retried; a raising backend surfaces as
    ExistenceCheckFailed.

    Example usage:
        validator = ExistenceValidator(FileStore(root))
        validator.check(Address("'Web.Topic'/a.pdf"), ["file", "topic"])
        # {"file": True, "topic": False}
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def check(self, address: "Address", exist_as: Iterable[str]) -> Dict[str, bool]:
        """Return a boolean per requested kind.

        Raises:
            AddressValidationError: On an unknown kind
            ExistenceCheckFailed: If a storage lookup raised
        """
        kinds = list(exist_as)
        unknown = [kind for kind in kinds if kind not in EXIST_KINDS]
        if unknown:
            raise AddressValidationError(
                f"Unknown existence kinds {unknown}; expected some of {EXIST_KINDS}"
            )
        return {kind: self._exists_as(address, kind) for kind in kinds}

    def require(
        self, address: "Address", exist_as: Iterable[str]
    ) -> Dict[str, bool]:
        """Like ``check``, but raise when any requested kind is absent."""
        results = self.check(address, exist_as)
        missing = [kind for kind, found in results.items() if not found]
        if missing:
            raise ExistenceCheckFailed(
                f"{address!r} does not exist as: {', '.join(missing)}",
                address=repr(address),
                missing=missing,
                results=results,
            )
        return results

    def _exists_as(self, address: "Address", kind: str) -> bool:
        address_type = address.type()
        if kind == "web":
            if address_type != "web":
                return False
            return self._lookup(kind, address, self.storage.web_exists, address.webs)
        if kind == "topic":
            if address_type not in ("topic", "text"):
                return False
            return self._topic_exists(kind, address)
        if kind == "file":
            if address_type != "file":
                return False
            return self._lookup(
                kind,
                address,
                self.storage.attachment_exists,
                address.webs,
                address.topic,
                address.subpart,
            )
        if address.part is not Part.META:
            return False
        return self._topic_exists(kind, address)

    def _topic_exists(self, kind: str, address: "Address") -> bool:
        found = self._lookup(
            kind, address, self.storage.topic_exists, address.webs, address.topic
        )
        if not found or address.rev is None:
            return found
        return self._lookup(
            kind,
            address,
            self.storage.revision_exists,
            address.webs,
            address.topic,
            address.rev,
        )

    def _lookup(
        self, kind: str, address: "Address", fn: Callable[..., Any], *args: Any
    ) -> bool:
        try:
            found = bool(fn(*args))
        except Exception as exc:
            raise ExistenceCheckFailed(
                f"Lookup for {kind} of {address!r} failed: {exc}",
                address=repr(address),
                kind=kind,
            ) from exc
        logger.debug("%s(%s) -> %s", getattr(fn, "__name__", fn), args, found)
        return found


__all__ = ["EXIST_KINDS", "ExistenceValidator", "Storage"]
