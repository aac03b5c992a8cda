"""Structural equivalence of addresses."""

from typing import TYPE_CHECKING, Optional

from .types import ByAttributes, MetaPath, Positional, Selector, Subpart

if TYPE_CHECKING:
    from .address import Address


def _same_selector(a: Optional[Selector], b: Optional[Selector]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, Positional):
        return isinstance(b, Positional) and a.index == b.index
    if isinstance(a, ByAttributes):
        return isinstance(b, ByAttributes) and a.as_dict() == b.as_dict()
    raise TypeError(f"Unknown selector: {a!r}")


def _same_subpart(a: Subpart, b: Subpart) -> bool:
    if isinstance(a, MetaPath) or isinstance(b, MetaPath):
        return (
            isinstance(a, MetaPath)
            and isinstance(b, MetaPath)
            and a.record_type == b.record_type
            and _same_selector(a.selector, b.selector)
            and a.key == b.key
        )
    return a == b


def equiv(a: "Address", b: "Address") -> bool:
    """True when both addresses denote the same canonical resource.

    Compares web segments, topic, revision, part and subpart structurally.
    The spelling each address was parsed from, and its separators, play
    no part. A positional selector never matches an attribute selector.
    """
    if a is b:
        return True
    if a.type() != b.type():
        return False
    return (
        a.webs == b.webs
        and a.topic == b.topic
        and a.rev == b.rev
        and a.part == b.part
        and _same_subpart(a.subpart, b.subpart)
    )


__all__ = ["equiv"]
