"""Canonical rendering of addresses.

Rendering always produces the canonical spelling (never an alias):

    Web/SubWeb/                          web (trailing separator)
    Web/SubWeb.Topic@2                   topic, revision
    'Web/SubWeb.Topic'/report.pdf        attachment
    'Web/SubWeb.Topic'/FILE:Attachment   attachment whose bare name reads as an alias
    'Web/SubWeb.Topic'/META:FIELD[name='Colour'].value

A prefix followed by a part is quoted: it always holds a topic
separator, and "/" is also the part delimiter. A bare prefix is quoted
only when it would otherwise read as a META part ('Web/META').
"""

from typing import TYPE_CHECKING, Optional

from ..models.config import SeparatorConfig
from .aliases import AliasResolver
from .errors import AddressValidationError
from .tokenizer import reads_as_part
from .types import MetaPath, Part, Subpart

if TYPE_CHECKING:
    from .address import Address


def render_prefix(address: "Address", separators: SeparatorConfig) -> str:
    webs = address.webs
    if not webs:
        raise AddressValidationError("Address has no web and cannot be rendered")

    prefix = separators.webseparator.join(webs)
    if address.topic is None:
        return prefix + separators.webseparator
    prefix += separators.topicseparator + address.topic
    if address.rev is not None:
        prefix += f"@{address.rev}"
    return prefix


def render_part(
    part: Optional[Part], subpart: Subpart, resolver: AliasResolver
) -> Optional[str]:
    if part is None:
        return None
    if part is Part.TEXT:
        return Part.TEXT.value
    if part is Part.FILE:
        return resolver.render_file(subpart)
    if isinstance(subpart, MetaPath):
        return str(subpart)
    return str(MetaPath())


def stringify(
    address: "Address",
    separators: SeparatorConfig,
    resolver: Optional[AliasResolver] = None,
) -> str:
    """Render ``address`` under ``separators``.

    Args:
        address: Address to render
        separators: Web and topic separator characters
        resolver: Resolver used to keep attachment names unambiguous

    Raises:
        AddressValidationError: If the address has no web
    """
    prefix = render_prefix(address, separators)
    part_text = render_part(address.part, address.subpart, resolver or AliasResolver())
    if part_text is None:
        return f"'{prefix}'" if reads_as_part(prefix) else prefix
    return f"'{prefix}'/{part_text}"


__all__ = ["render_part", "render_prefix", "stringify"]
