"""The canonical address model."""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models.config import DEFAULT_CONFIG, AddressConfig, SeparatorConfig
from .aliases import AliasResolver, is_valid_filename
from .equivalence import equiv
from .errors import AddressValidationError, ExistenceCheckFailed
from .existence import ExistenceValidator, Storage
from .stringify import stringify
from .tokenizer import tokenize
from .types import (
    ADDRESS_TYPES,
    SEGMENT_RE,
    AddressType,
    MetaPath,
    Part,
    Subpart,
    Tokens,
)

logger = logging.getLogger(__name__)

_META_TYPES = {0: "meta", 1: "metatype", 2: "metamember", 3: "metakey"}

# Construction option names as used in address option mappings.
_OPTION_NAMES = {
    "string": "string",
    "webs": "webs",
    "web": "web",
    "topic": "topic",
    "rev": "rev",
    "part": "part",
    "subpart": "subpart",
    "webseparator": "webseparator",
    "topicseparator": "topicseparator",
    "isA": "is_a",
    "is_a": "is_a",
    "existAs": "exist_as",
    "exist_as": "exist_as",
    "storage": "storage",
    "config": "config",
}


@dataclass(frozen=True)
class _Fields:
    webs: Tuple[str, ...] = ()
    topic: Optional[str] = None
    rev: Optional[int] = None
    part: Optional[Part] = None
    subpart: Subpart = None


def _coerce_rev(rev: Any) -> Optional[int]:
    if rev is None:
        return None
    if isinstance(rev, bool):
        raise AddressValidationError(f"Revision must be a positive integer: {rev!r}")
    if isinstance(rev, str) and rev.isascii() and rev.isdigit():
        rev = int(rev)
    if not isinstance(rev, int) or rev < 1:
        raise AddressValidationError(f"Revision must be a positive integer: {rev!r}")
    return rev


def _validate(fields: _Fields) -> _Fields:
    """Check the address invariants, returning normalized fields.

    Raises:
        AddressValidationError: If any invariant is violated
    """
    if not fields.webs:
        raise AddressValidationError("An address needs at least one web")
    for segment in fields.webs:
        if not isinstance(segment, str) or not SEGMENT_RE.match(segment):
            raise AddressValidationError(f"Invalid web name: {segment!r}")

    topic = fields.topic
    if topic is not None and (
        not isinstance(topic, str) or not SEGMENT_RE.match(topic)
    ):
        raise AddressValidationError(f"Invalid topic name: {topic!r}")

    rev = _coerce_rev(fields.rev)
    if rev is not None and topic is None:
        raise AddressValidationError("A revision requires a topic")

    part = Part.coerce(fields.part)
    subpart = fields.subpart
    if part is not None and topic is None:
        raise AddressValidationError(f"A {part.value} part requires a topic")

    if part is None or part is Part.TEXT:
        if subpart is not None:
            label = part.value if part else "an address without a part"
            raise AddressValidationError(f"Subpart not allowed for {label}")
    elif part is Part.FILE:
        if not isinstance(subpart, str) or not is_valid_filename(subpart):
            raise AddressValidationError(
                f"FILE part requires an attachment name: {subpart!r}"
            )
    else:
        subpart = MetaPath.from_value(subpart)

    return _Fields(tuple(fields.webs), topic, rev, part, subpart)


def _split_web(web: str, separators: SeparatorConfig) -> List[str]:
    """Split a context web string such as "Web/SubWeb" into segments."""
    segments = [web]
    for sep in separators.chars:
        segments = [piece for seg in segments for piece in seg.split(sep)]
    return segments


class Address:
    """Canonical address of a web, topic, attachment or metadata element.

    An address is built either from text (tokenized, then alias-resolved)
    or from direct field values. Every setter validates the whole field
    set before assigning, so a failed mutation leaves the address as it
    was. ``type()`` is recomputed from the current fields on each call.

    Examples:
        Address("Web/SubWeb.Topic")                       → type() == "topic"
        Address("'Web.Topic@2'/META:FIELD[name='Colour']") → type() == "metamember"
        Address(webs=["Web"], topic="Topic", part="FILE", subpart="a.pdf")
                                                           → type() == "file"
        Address("Topic", is_a="topic", webs=["Web"])      → Web.Topic

    Option names follow the address grammar: ``string``, ``webs``, ``web``,
    ``topic``, ``rev``, ``part``, ``subpart``, ``webseparator``,
    ``topicseparator``, ``is_a`` (``isA``) and ``exist_as`` (``existAs``).
    When ``string`` is given, ``webs``/``web`` only name the context web
    for a relative topic.
    """

    __hash__ = None  # mutable

    def __init__(
        self,
        string: Optional[str] = None,
        *,
        webs: Optional[Sequence[str]] = None,
        web: Optional[str] = None,
        topic: Optional[str] = None,
        rev: Optional[int] = None,
        part: Any = None,
        subpart: Any = None,
        webseparator: Optional[str] = None,
        topicseparator: Optional[str] = None,
        is_a: Optional[AddressType] = None,
        exist_as: Optional[Iterable[str]] = None,
        storage: Optional[Storage] = None,
        config: Optional[AddressConfig] = None,
    ):
        self._config = config or DEFAULT_CONFIG
        self._separators = self._make_separators(webseparator, topicseparator)
        self.existence: Dict[str, bool] = {}

        if is_a is not None and is_a not in ADDRESS_TYPES:
            raise AddressValidationError(
                f"Unknown address type {is_a!r}; expected one of {ADDRESS_TYPES}"
            )

        context = self._context_webs(webs, web)
        if string is not None:
            direct = {"topic": topic, "rev": rev, "part": part, "subpart": subpart}
            given = [name for name, value in direct.items() if value is not None]
            if given:
                raise AddressValidationError(
                    f"Cannot combine string with field options: {', '.join(given)}"
                )
            self._fields = self._parse_fields(string, is_a, context)
        else:
            self._fields = _validate(
                _Fields(tuple(context), topic, rev, part, subpart)
            )

        if is_a is not None and self.type() != is_a:
            raise AddressValidationError(
                f"Address is a {self.type()}, not a {is_a}"
            )

        if exist_as:
            self.existence = self._check_existence(exist_as, storage)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "Address":
        """Build an address from an option mapping (``isA``, ``existAs``, ...)."""
        kwargs: Dict[str, Any] = {}
        for name, value in options.items():
            if name not in _OPTION_NAMES:
                raise AddressValidationError(f"Unknown address option: {name!r}")
            kwargs[_OPTION_NAMES[name]] = value
        string = kwargs.pop("string", None)
        return cls(string, **kwargs)

    def _make_separators(
        self, webseparator: Optional[str], topicseparator: Optional[str]
    ) -> SeparatorConfig:
        try:
            return SeparatorConfig(
                webseparator=webseparator or self._config.webseparator,
                topicseparator=topicseparator or self._config.topicseparator,
            )
        except ValidationError as exc:
            raise AddressValidationError(f"Invalid separator: {exc}") from exc

    def _context_webs(
        self, webs: Optional[Sequence[str]], web: Optional[str]
    ) -> List[str]:
        if webs is not None and web is not None:
            raise AddressValidationError("Pass either webs or web, not both")
        if web is not None:
            return _split_web(web, self._separators)
        if isinstance(webs, str):
            raise AddressValidationError("webs must be a sequence of names")
        return list(webs or [])

    def _parse_fields(
        self, string: str, is_a: Optional[str], context: List[str]
    ) -> _Fields:
        tokens = tokenize(string, self._separators)
        webs, topic = self._place_topic(tokens, is_a, context)

        part: Optional[Part] = None
        subpart: Subpart = None
        if tokens.part is not None:
            resolution = AliasResolver(self._config).resolve(
                tokens.part, tokens.raw, tokens.part_offset
            )
            part, subpart = resolution.part, resolution.subpart

        return _validate(_Fields(tuple(webs), topic, tokens.rev, part, subpart))

    @staticmethod
    def _place_topic(
        tokens: Tokens, is_a: Optional[str], context: List[str]
    ) -> Tuple[List[str], Optional[str]]:
        """Decide which prefix segment, if any, is the topic.

        - "Web/SubWeb/" (trailing separator) is always a web
        - is_a="web" makes every segment a web
        - "Web/SubWeb.Topic": the last segment is the topic
        - "Name" alone is a web, unless a topic is implied by is_a, a
          context web, a revision or a part
        """
        segments = list(tokens.segments)
        if tokens.web_only:
            return segments, None

        if is_a == "web":
            if tokens.rev is not None or tokens.part is not None:
                raise AddressValidationError(
                    f"{tokens.raw!r} names a topic-level resource, not a web"
                )
            return segments, None

        if len(segments) > 1:
            return segments[:-1], segments[-1]

        wants_topic = (
            is_a is not None
            or bool(context)
            or tokens.rev is not None
            or tokens.part is not None
        )
        if not wants_topic:
            return segments, None
        if not context:
            raise AddressValidationError(
                f"Topic {segments[0]!r} has no web; pass webs= or web="
            )
        return list(context), segments[0]

    def _check_existence(
        self, exist_as: Iterable[str], storage: Optional[Storage]
    ) -> Dict[str, bool]:
        if storage is None:
            if self._config.store_root is None:
                raise ExistenceCheckFailed(
                    "No storage available for existence checks; "
                    "pass storage= or configure store_root"
                )
            from ..store.filesystem import FileStore

            storage = FileStore(self._config.store_root)
        return ExistenceValidator(storage).check(self, exist_as)

    def _assign(self, **changes: Any) -> None:
        self._fields = _validate(replace(self._fields, **changes))

    def parse(
        self,
        string: str,
        *,
        webs: Optional[Sequence[str]] = None,
        web: Optional[str] = None,
        webseparator: Optional[str] = None,
        topicseparator: Optional[str] = None,
        is_a: Optional[AddressType] = None,
        exist_as: Optional[Iterable[str]] = None,
        storage: Optional[Storage] = None,
    ) -> "Address":
        """Replace every field from ``string``.

        The new fields are parsed and validated in full before anything
        is assigned; on error this address is left unchanged.

        Returns:
            self, for chaining
        """
        parsed = Address(
            string,
            webs=webs,
            web=web,
            webseparator=webseparator or self._separators.webseparator,
            topicseparator=topicseparator or self._separators.topicseparator,
            is_a=is_a,
            exist_as=exist_as,
            storage=storage,
            config=self._config,
        )
        logger.debug("Re-parsed address in place: %r", string)
        self._fields = parsed._fields
        self._separators = parsed._separators
        self.existence = parsed.existence
        return self

    @property
    def webs(self) -> List[str]:
        return list(self._fields.webs)

    @webs.setter
    def webs(self, value: Sequence[str]) -> None:
        if value is None or isinstance(value, str):
            raise AddressValidationError("webs must be a sequence of names")
        self._assign(webs=tuple(value))

    @property
    def web(self) -> str:
        """Web path joined with the web separator."""
        return self._separators.webseparator.join(self._fields.webs)

    @property
    def topic(self) -> Optional[str]:
        return self._fields.topic

    @topic.setter
    def topic(self, value: Optional[str]) -> None:
        self._assign(topic=value)

    @property
    def rev(self) -> Optional[int]:
        return self._fields.rev

    @rev.setter
    def rev(self, value: Optional[int]) -> None:
        self._assign(rev=value)

    @property
    def part(self) -> Optional[Part]:
        return self._fields.part

    @part.setter
    def part(self, value: Any) -> None:
        """Set the part; the current subpart must fit the new part."""
        part = Part.coerce(value)
        subpart = self._fields.subpart
        if part is Part.META and isinstance(subpart, str):
            raise AddressValidationError("Clear the FILE subpart before setting META")
        if part is not Part.META and subpart == MetaPath():
            subpart = None
        self._assign(part=part, subpart=subpart)

    @property
    def subpart(self) -> Subpart:
        return self._fields.subpart

    @subpart.setter
    def subpart(self, value: Any) -> None:
        self._assign(subpart=value)

    @property
    def separators(self) -> SeparatorConfig:
        return self._separators

    def type(self) -> AddressType:
        """Structural kind of the address, from the current fields."""
        part = self._fields.part
        if part is None:
            return "topic" if self._fields.topic is not None else "web"
        if part is Part.TEXT:
            return "text"
        if part is Part.FILE:
            return "file"
        subpart = self._fields.subpart
        shape = subpart.shape if isinstance(subpart, MetaPath) else 0
        return _META_TYPES[shape]

    def is_a(self, address_type: str) -> bool:
        return self.type() == address_type

    def stringify(
        self,
        separators: Optional[SeparatorConfig] = None,
        *,
        webseparator: Optional[str] = None,
        topicseparator: Optional[str] = None,
    ) -> str:
        """Render canonical address text.

        Args:
            separators: Separator config (default: this address's own)
            webseparator: Override for the web separator
            topicseparator: Override for the topic separator

        Raises:
            AddressValidationError: If the address has no web
        """
        if separators is None:
            separators = self._separators
        if webseparator or topicseparator:
            try:
                separators = SeparatorConfig(
                    webseparator=webseparator or separators.webseparator,
                    topicseparator=topicseparator or separators.topicseparator,
                )
            except ValidationError as exc:
                raise AddressValidationError(f"Invalid separator: {exc}") from exc
        return stringify(self, separators, AliasResolver(self._config))

    def equiv(self, other: "Address") -> bool:
        return equiv(self, other)

    def as_dict(self) -> Dict[str, Any]:
        """Plain representation of the fields and derived type."""
        subpart = self._fields.subpart
        if isinstance(subpart, MetaPath):
            subpart = subpart.as_list()
        part = self._fields.part
        return {
            "webs": self.webs,
            "topic": self.topic,
            "rev": self.rev,
            "part": part.value if part is not None else None,
            "subpart": subpart,
            "type": self.type(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return equiv(self, other)

    def __str__(self) -> str:
        return self.stringify()

    def __repr__(self) -> str:
        return f"Address({self.stringify()!r})"


__all__ = ["Address"]
