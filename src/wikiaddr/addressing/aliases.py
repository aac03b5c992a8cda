"""Part specifier resolution - map shorthand spellings to canonical parts.

Resolution walks an ordered list of rules. Each rule either claims the
part specifier (returning a Resolution or raising) or passes it on; the
last rule fails explicitly, so nothing is ever guessed.

    META, META:TYPE[sel].key   canonical metadata address
    FILE:name                  explicit attachment
    text                       topic text
    fields[sel].key            record-type alias (see AddressConfig.record_aliases)
    MyForm[name='X'].key       form-qualified selector
    MyForm.Colour              form-qualified field value
    Colour                     field value shortcut
    report.pdf                 attachment
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..models.config import DEFAULT_CONFIG, AddressConfig
from .errors import AddressSyntaxError, AliasAmbiguous, ParseError
from .tokenizer import PartSpec, split_part_spec
from .types import ByAttributes, MetaPath, Part, Positional, Subpart

logger = logging.getLogger(__name__)

FIELD_TYPE = "FIELD"
FIELD_VALUE_KEY = "value"


@dataclass(frozen=True)
class Resolution:
    """Canonical part and subpart produced for a part specifier."""

    part: Part
    subpart: Subpart
    rule: str


@dataclass(frozen=True)
class _Candidate:
    text: str
    spec: Optional[PartSpec]
    raw: str
    offset: int


def is_valid_filename(name: str) -> bool:
    """Attachment names: non-empty, no "/", no surrounding whitespace."""
    return (
        bool(name)
        and name == name.strip()
        and "/" not in name
        and name.isprintable()
    )


def _capitalized(head: str) -> bool:
    return head[:1].isupper() and not head.startswith("META")


def _canonical_meta(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    if not (c.text == "META" or c.text.startswith(("META:", "META[", "META."))):
        return None
    spec = c.spec
    if spec is None or (
        spec.head == "META" and (spec.selector is not None or spec.key is not None)
    ):
        raise AddressSyntaxError("Malformed META part specifier", c.raw, c.offset)
    if spec.head == "META":
        return Resolution(Part.META, MetaPath(), "meta")
    return Resolution(
        Part.META, MetaPath(spec.head[len("META:") :], spec.selector, spec.key), "meta"
    )


def _explicit_file(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    if not c.text.startswith("FILE:"):
        return None
    name = c.text[len("FILE:") :]
    if not is_valid_filename(name):
        raise AddressSyntaxError(
            f"Invalid attachment name {name!r}", c.raw, c.offset + len("FILE:")
        )
    return Resolution(Part.FILE, name, "file")


def _text_keyword(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    if c.text == Part.TEXT.value:
        return Resolution(Part.TEXT, None, "text")
    return None


def _record_alias(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    if c.spec is None or c.spec.head not in resolver.record_aliases:
        return None
    record_type = resolver.record_aliases[c.spec.head]
    return Resolution(
        Part.META, MetaPath(record_type, c.spec.selector, c.spec.key), "record-alias"
    )


def _form_selector(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    spec = c.spec
    if spec is None or spec.selector is None or not _capitalized(spec.head):
        return None
    if isinstance(spec.selector, Positional):
        raise AliasAmbiguous(
            f"Positional selector cannot be qualified by form {spec.head!r}",
            c.text,
        )
    form = spec.selector.as_dict().get("form")
    if form is not None and form != spec.head:
        raise AliasAmbiguous(
            f"Selector names form {form!r} but part names form {spec.head!r}",
            c.text,
        )
    selector = spec.selector.with_attribute("form", spec.head)
    return Resolution(
        Part.META, MetaPath(FIELD_TYPE, selector, spec.key), "form-selector"
    )


def _form_field(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    spec = c.spec
    if (
        spec is None
        or spec.selector is not None
        or spec.key is None
        or not _capitalized(spec.head)
        or not _capitalized(spec.key)
    ):
        return None
    selector = ByAttributes.from_mapping({"form": spec.head, "name": spec.key})
    return Resolution(
        Part.META, MetaPath(FIELD_TYPE, selector, FIELD_VALUE_KEY), "form-field"
    )


def _field_shortcut(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    spec = c.spec
    if (
        spec is None
        or spec.selector is not None
        or spec.key is not None
        or not _capitalized(spec.head)
    ):
        return None
    if resolver.form_re.match(spec.head):
        raise AliasAmbiguous(
            f"{spec.head!r} names a form, not a field; use "
            f"META:{FIELD_TYPE}[form='{spec.head}'] or {spec.head}[name='...']",
            c.text,
        )
    selector = ByAttributes.from_mapping({"name": spec.head})
    return Resolution(
        Part.META, MetaPath(FIELD_TYPE, selector, FIELD_VALUE_KEY), "field-shortcut"
    )


def _filename(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    if "[" in c.text or "]" in c.text or not is_valid_filename(c.text):
        return None
    return Resolution(Part.FILE, c.text, "filename")


def _unresolvable(resolver: "AliasResolver", c: _Candidate) -> Optional[Resolution]:
    raise AliasAmbiguous(f"Cannot resolve part specifier {c.text!r}", c.text)


Rule = Callable[["AliasResolver", _Candidate], Optional[Resolution]]

RULES: List[Tuple[str, Rule]] = [
    ("meta", _canonical_meta),
    ("file", _explicit_file),
    ("text", _text_keyword),
    ("record-alias", _record_alias),
    ("form-selector", _form_selector),
    ("form-field", _form_field),
    ("field-shortcut", _field_shortcut),
    ("filename", _filename),
    ("unresolvable", _unresolvable),
]


class AliasResolver:
    """Resolve raw part specifiers to canonical ``(Part, Subpart)``.

    Pure and stateless per call; the alias table and form-name pattern
    come from the AddressConfig it was built with.

    Example usage:
        resolver = AliasResolver()
        resolver.resolve("fields[name='Colour'].value")
        # Resolution(part=Part.META,
        #            subpart=MetaPath('FIELD', ByAttributes(...), 'value'), ...)
    """

    def __init__(self, config: Optional[AddressConfig] = None):
        config = config or DEFAULT_CONFIG
        self.record_aliases = dict(config.record_aliases)
        self.form_re = re.compile(config.form_pattern)
        self.rules = list(RULES)

    def resolve(self, text: str, raw: str = "", offset: int = 0) -> Resolution:
        """Resolve a part specifier.

        Args:
            text: Part specifier (the text after the prefix's "/")
            raw: Full address text, for error positions
            offset: Offset of ``text`` within ``raw``

        Raises:
            AddressSyntaxError: Malformed META part or selector
            AliasAmbiguous: No rule yields a unique canonical form
        """
        spec = None
        if not text.startswith("FILE:"):
            spec = split_part_spec(text, raw, offset)
        candidate = _Candidate(text, spec, raw or text, offset)

        for name, rule in self.rules:
            result = rule(self, candidate)
            if result is not None:
                logger.debug("Part %r resolved by rule %s", text, name)
                return result

        raise AliasAmbiguous(f"Cannot resolve part specifier {text!r}", text)

    def render_file(self, name: str) -> str:
        """Spell an attachment so that ``resolve`` reads it back as a file."""
        try:
            resolution = self.resolve(name)
        except ParseError:
            return f"FILE:{name}"
        if resolution.part is Part.FILE and resolution.subpart == name:
            return name
        return f"FILE:{name}"


__all__ = [
    "AliasResolver",
    "FIELD_TYPE",
    "FIELD_VALUE_KEY",
    "RULES",
    "Resolution",
    "is_valid_filename",
]
