"""Address types for the wiki addressing system."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from .errors import AddressValidationError

AddressType = Literal[
    "web",
    "topic",
    "text",
    "file",
    "meta",
    "metatype",
    "metamember",
    "metakey",
]

ADDRESS_TYPES: Tuple[str, ...] = (
    "web",
    "topic",
    "text",
    "file",
    "meta",
    "metatype",
    "metamember",
    "metakey",
)

# Web and topic names: word characters only, so never a separator,
# quote, "@" or bracket.
SEGMENT_RE = re.compile(r"^\w+\Z")

# Record types, field keys and selector attribute names.
IDENTIFIER_RE = re.compile(r"^[A-Za-z_]\w*\Z")


class Part(str, Enum):
    """Sub-resource of a topic selected by an address."""

    FILE = "FILE"
    META = "META"
    TEXT = "text"

    @classmethod
    def coerce(cls, value: Union[str, "Part", None]) -> Optional["Part"]:
        """Accept a Part, its value in any letter case, or None."""
        if value is None or isinstance(value, Part):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        raise AddressValidationError(
            f"Unknown part {value!r}; expected one of FILE, META, text"
        )


@dataclass(frozen=True)
class Positional:
    """Select the Nth (1-based) member of a record collection."""

    index: int

    def __post_init__(self) -> None:
        if (
            isinstance(self.index, bool)
            or not isinstance(self.index, int)
            or self.index < 1
        ):
            raise AddressValidationError(
                f"Positional selector must be a positive integer: {self.index!r}"
            )

    def __str__(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True)
class ByAttributes:
    """Select the member whose attributes match all given values.

    Attributes are kept sorted by name so that two selectors built from
    the same mapping compare equal regardless of insertion order.
    """

    attributes: Tuple[Tuple[str, str], ...]

    def __post_init__(self) -> None:
        if not self.attributes:
            raise AddressValidationError("Attribute selector cannot be empty")
        names = [name for name, _ in self.attributes]
        if len(names) != len(set(names)):
            raise AddressValidationError(
                f"Duplicate attribute in selector: {names}"
            )
        for name, value in self.attributes:
            if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
                raise AddressValidationError(
                    f"Invalid selector attribute name: {name!r}"
                )
            if not isinstance(value, str):
                raise AddressValidationError(
                    f"Selector value for {name!r} must be a string: {value!r}"
                )
            if "'" in value and '"' in value:
                raise AddressValidationError(
                    f"Selector value cannot contain both quote kinds: {value!r}"
                )
        object.__setattr__(self, "attributes", tuple(sorted(self.attributes)))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "ByAttributes":
        return cls(tuple(mapping.items()))

    def as_dict(self) -> Dict[str, str]:
        return dict(self.attributes)

    def with_attribute(self, name: str, value: str) -> "ByAttributes":
        """Return a copy with ``name`` set to ``value``."""
        merged = self.as_dict()
        merged[name] = value
        return ByAttributes.from_mapping(merged)

    def __str__(self) -> str:
        rendered = []
        for name, value in self.attributes:
            quote = '"' if "'" in value else "'"
            rendered.append(f"{name}={quote}{value}{quote}")
        return "[" + ", ".join(rendered) + "]"


Selector = Union[Positional, ByAttributes]


def coerce_selector(value: Any) -> Optional[Selector]:
    """Build a Selector from an int, a mapping, a Selector or None."""
    if value is None or isinstance(value, (Positional, ByAttributes)):
        return value
    if isinstance(value, bool):
        raise AddressValidationError(f"Invalid selector: {value!r}")
    if isinstance(value, int):
        return Positional(value)
    if isinstance(value, Mapping):
        return ByAttributes.from_mapping(value)
    raise AddressValidationError(
        f"Selector must be a positive integer or a mapping: {value!r}"
    )


@dataclass(frozen=True)
class MetaPath:
    """Subpart of a META address: ``[record_type, selector?, key?]``.

    Examples:
        META                            → MetaPath()
        META:FIELD                      → MetaPath("FIELD")
        META:FIELD[name='Colour']       → MetaPath("FIELD", ByAttributes(...))
        META:FIELD[3].value             → MetaPath("FIELD", Positional(3), "value")
        META:TOPICINFO.version          → MetaPath("TOPICINFO", None, "version")
    """

    record_type: Optional[str] = None
    selector: Optional[Selector] = None
    key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.record_type is None:
            if self.selector is not None or self.key is not None:
                raise AddressValidationError(
                    "META selector or key requires a record type"
                )
            return
        if not isinstance(self.record_type, str) or not IDENTIFIER_RE.match(
            self.record_type
        ):
            raise AddressValidationError(
                f"Invalid record type name: {self.record_type!r}"
            )
        if self.key is not None and (
            not isinstance(self.key, str) or not IDENTIFIER_RE.match(self.key)
        ):
            raise AddressValidationError(f"Invalid field key: {self.key!r}")

    @property
    def shape(self) -> int:
        """Number of populated list positions (0-3)."""
        if self.record_type is None:
            return 0
        if self.key is not None:
            return 3
        if self.selector is not None:
            return 2
        return 1

    def as_list(self) -> List[Any]:
        """List form, as accepted by ``Address(subpart=...)``."""
        selector: Any = None
        if isinstance(self.selector, Positional):
            selector = self.selector.index
        elif isinstance(self.selector, ByAttributes):
            selector = self.selector.as_dict()
        return [self.record_type, selector, self.key][: self.shape]

    def __str__(self) -> str:
        if self.record_type is None:
            return "META"
        text = f"META:{self.record_type}"
        if self.selector is not None:
            text += str(self.selector)
        if self.key is not None:
            text += f".{self.key}"
        return text

    @classmethod
    def from_value(cls, value: Any) -> "MetaPath":
        """Build a MetaPath from its list form (or pass one through)."""
        if isinstance(value, MetaPath):
            return value
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value)
        if not isinstance(value, (list, tuple)):
            raise AddressValidationError(
                f"META subpart must be a list of up to 3 elements: {value!r}"
            )
        if len(value) > 3:
            raise AddressValidationError(
                f"META subpart has {len(value)} elements; at most 3 allowed"
            )
        items = list(value) + [None] * (3 - len(value))
        record_type, selector, key = items
        if len(value) == 2 and selector is None:
            raise AddressValidationError(
                "Two-element META subpart needs a member selector"
            )
        if record_type is None and len(value) > 0:
            raise AddressValidationError("META subpart needs a record type")
        return cls(record_type, coerce_selector(selector), key)


Subpart = Union[None, str, MetaPath]


@dataclass
class Tokens:
    """Raw lexical pieces of an address string.

    ``segments`` are the separator-split names of the prefix, without any
    decision about which of them is the topic; ``web_only`` is set when
    the prefix ended with a separator.
    """

    raw: str
    segments: List[str] = field(default_factory=list)
    web_only: bool = False
    rev: Optional[int] = None
    part: Optional[str] = None
    quoted: bool = False
    part_offset: int = 0


__all__ = [
    "ADDRESS_TYPES",
    "AddressType",
    "ByAttributes",
    "IDENTIFIER_RE",
    "MetaPath",
    "Part",
    "Positional",
    "SEGMENT_RE",
    "Selector",
    "Subpart",
    "Tokens",
    "coerce_selector",
]
