"""Address tokenizing for the wiki addressing system.

This module splits address text into its lexical pieces:
    prefix[/partspec]

Where:
    - prefix: Web path, optional topic and optional @revision, optionally
      wrapped in single quotes ('Web/SubWeb.Topic@2')
    - partspec: Anything after the first "/" that follows the prefix
      (filename, META:Type[selector].key, or a shorthand alias)

No alias knowledge lives here: the part specifier is returned as raw
text, and ``split_part_spec`` only cuts it into head, selector and key.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models.config import DEFAULT_CONFIG, SeparatorConfig
from .errors import AddressSyntaxError, AddressValidationError
from .types import (
    IDENTIFIER_RE,
    SEGMENT_RE,
    ByAttributes,
    Positional,
    Selector,
    Tokens,
)

# Unquoted text: "/META" or "/META:..." always starts a part specifier.
_META_BOUNDARY_RE = re.compile(r"/(?=META(?::|\Z))")

_DIGITS_RE = re.compile(r"[0-9]+")

_HEAD_RE = re.compile(r"^(?:META:)?[A-Za-z_]\w*\Z")

_ATTRIBUTE_RE = re.compile(
    r"""\s*([A-Za-z_]\w*)\s*=\s*(?:'([^']*)'|"([^"]*)"|(\w+))\s*"""
)

_QUOTES = "'\""


@dataclass(frozen=True)
class PartSpec:
    """A part specifier cut into ``head[selector].key``.

    Examples:
        "META:FIELD[3].value" → PartSpec("META:FIELD", Positional(3), "value")
        "fields"              → PartSpec("fields")
        "MyForm.Colour"       → PartSpec("MyForm", None, "Colour")
    """

    head: str
    selector: Optional[Selector] = None
    key: Optional[str] = None


def tokenize(raw: str, separators: Optional[SeparatorConfig] = None) -> Tokens:
    """Split address text into prefix segments, revision and part text.

    Args:
        raw: Address text
        separators: Characters that split the prefix into segments
            (default: "/" for webs and "." for the topic)

    Returns:
        Tokens with the raw part specifier left unresolved

    Raises:
        AddressSyntaxError: On empty input, unterminated quotes, malformed
            revision digits, bad name characters or unbalanced brackets

    Examples:
        >>> tokenize("Web/SubWeb.Topic").segments
        ['Web', 'SubWeb', 'Topic']

        >>> tokenize("'Web.Topic@2'/META:FIELD").part
        'META:FIELD'

        >>> tokenize("Web/SubWeb/").web_only
        True
    """
    if separators is None:
        separators = DEFAULT_CONFIG.separators

    if raw is None or not raw.strip():
        raise AddressSyntaxError("Address cannot be empty")

    lead = len(raw) - len(raw.lstrip())
    text = raw.strip()

    part: Optional[str] = None
    part_offset = 0
    if text.startswith("'"):
        end = text.find("'", 1)
        if end == -1:
            raise AddressSyntaxError("Unterminated quote", raw, lead)
        prefix = text[1:end]
        prefix_offset = lead + 1
        rest = text[end + 1 :]
        if rest:
            if not rest.startswith("/"):
                raise AddressSyntaxError(
                    "Expected '/' after quoted prefix", raw, lead + end + 1
                )
            part = rest[1:]
            part_offset = lead + end + 2
        quoted = True
    else:
        prefix, part, part_offset = _split_unquoted(text)
        prefix_offset = lead
        part_offset += lead
        stray = prefix.find("'")
        if stray != -1:
            raise AddressSyntaxError(
                "Unexpected quote in unquoted prefix", raw, lead + stray
            )
        quoted = False

    if part is not None:
        if not part:
            raise AddressSyntaxError("Empty part specifier", raw, part_offset)
        if not part.startswith("FILE:"):
            check_brackets(part, raw, part_offset)

    body, rev = _split_revision(prefix, raw, prefix_offset)
    segments, web_only = _split_segments(body, separators, raw, prefix_offset)
    if web_only and rev is not None:
        raise AddressSyntaxError(
            "Revision must follow a topic", raw, prefix_offset + len(body)
        )

    return Tokens(
        raw=raw,
        segments=segments,
        web_only=web_only,
        rev=rev,
        part=part,
        quoted=quoted,
        part_offset=part_offset,
    )


def reads_as_part(prefix: str) -> bool:
    """True when unquoted ``prefix`` would be split at a "/META" part boundary.

    A topic or web named META joined with "/" must be quoted to read back.
    """
    return _META_BOUNDARY_RE.search(prefix) is not None


def _split_unquoted(text: str) -> Tuple[str, Optional[str], int]:
    """Find the prefix/part boundary of unquoted text.

    Without quotes the boundary is only known after an "@revision" or
    before a literal "META" part; anything else is all prefix.
    """
    meta = _META_BOUNDARY_RE.search(text)
    head = text[: meta.start()] if meta else text

    at = head.find("@")
    if at != -1:
        slash = head.find("/", at)
        if slash != -1:
            return head[:slash], text[slash + 1 :], slash + 1

    if meta:
        return head, text[meta.end() :], meta.end()
    return text, None, 0


def _split_revision(
    prefix: str, raw: str, offset: int
) -> Tuple[str, Optional[int]]:
    at = prefix.find("@")
    if at == -1:
        return prefix, None
    digits = prefix[at + 1 :]
    if not _DIGITS_RE.fullmatch(digits) or int(digits) == 0:
        raise AddressSyntaxError(
            "Revision must be a positive integer", raw, offset + at + 1
        )
    return prefix[:at], int(digits)


def _split_segments(
    body: str, separators: SeparatorConfig, raw: str, offset: int
) -> Tuple[List[str], bool]:
    if not body:
        raise AddressSyntaxError("Missing web or topic name", raw, offset)

    pieces = re.split(f"[{re.escape(separators.chars)}]", body)
    web_only = False
    if len(pieces) > 1 and pieces[-1] == "":
        web_only = True
        pieces = pieces[:-1]

    position = offset
    for piece in pieces:
        if not piece:
            raise AddressSyntaxError("Empty name segment", raw, position)
        if not SEGMENT_RE.match(piece):
            bad = next(i for i, ch in enumerate(piece) if not SEGMENT_RE.match(ch))
            raise AddressSyntaxError(
                f"Invalid character {piece[bad]!r} in name {piece!r}",
                raw,
                position + bad,
            )
        position += len(piece) + 1

    return pieces, web_only


def check_brackets(part: str, raw: str = "", offset: int = 0) -> None:
    """Verify that selector brackets and their quoted values are balanced.

    Quotes outside brackets are ordinary characters (filenames may hold
    them); inside brackets they delimit values that may contain "]".
    """
    opened: Optional[int] = None
    quote: Optional[str] = None
    for index, ch in enumerate(part):
        if opened is None:
            if ch == "[":
                opened = index
            elif ch == "]":
                raise AddressSyntaxError(
                    "Unbalanced ']' in part specifier", raw, offset + index
                )
        elif quote is not None:
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "[":
            raise AddressSyntaxError(
                "Nested '[' in selector", raw, offset + index
            )
        elif ch == "]":
            opened = None

    if quote is not None:
        raise AddressSyntaxError(
            "Unterminated quote in selector", raw, offset + len(part)
        )
    if opened is not None:
        raise AddressSyntaxError(
            "Unbalanced '[' in part specifier", raw, offset + opened
        )


def split_part_spec(
    text: str, raw: str = "", offset: int = 0
) -> Optional[PartSpec]:
    """Cut a part specifier into head, selector and key.

    Returns None when the text does not have the ``head[selector].key``
    shape at all (for example "Atta.h.ent" or "report-2.pdf"), so the
    caller can treat it as a filename.

    Raises:
        AddressSyntaxError: When a selector is present but malformed
    """
    bracket = text.find("[")
    if bracket == -1:
        head, dot, key = text.partition(".")
        if not _HEAD_RE.match(head):
            return None
        if dot and not IDENTIFIER_RE.match(key):
            return None
        return PartSpec(head, None, key or None)

    head = text[:bracket]
    if not _HEAD_RE.match(head):
        return None

    close = _closing_bracket(text, bracket, raw, offset)
    selector = parse_selector(text[bracket + 1 : close], raw, offset + bracket + 1)

    tail = text[close + 1 :]
    key: Optional[str] = None
    if tail:
        if not tail.startswith(".") or not IDENTIFIER_RE.match(tail[1:]):
            raise AddressSyntaxError(
                "Expected '.key' after selector", raw, offset + close + 1
            )
        key = tail[1:]
    return PartSpec(head, selector, key)


def _closing_bracket(text: str, bracket: int, raw: str, offset: int) -> int:
    quote: Optional[str] = None
    for index in range(bracket + 1, len(text)):
        ch = text[index]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "]":
            return index
    raise AddressSyntaxError(
        "Unbalanced '[' in part specifier", raw, offset + bracket
    )


def parse_selector(body: str, raw: str = "", offset: int = 0) -> Selector:
    """Parse the inside of ``[...]``.

    Examples:
        >>> parse_selector("3")
        Positional(index=3)

        >>> parse_selector("name='Colour', form='MyForm'").as_dict()
        {'form': 'MyForm', 'name': 'Colour'}
    """
    stripped = body.strip()
    if not stripped:
        raise AddressSyntaxError("Empty selector", raw, offset)

    if _DIGITS_RE.fullmatch(stripped):
        index = int(stripped)
        if index == 0:
            raise AddressSyntaxError(
                "Positional selector is 1-based", raw, offset
            )
        return Positional(index)

    attributes = []
    position = 0
    while True:
        match = _ATTRIBUTE_RE.match(body, position)
        if not match:
            raise AddressSyntaxError("Malformed selector", raw, offset + position)
        name, single, double, bare = match.groups()
        if single is not None:
            value = single
        elif double is not None:
            value = double
        else:
            value = bare
        attributes.append((name, value))
        position = match.end()
        if position == len(body):
            break
        if body[position] != ",":
            raise AddressSyntaxError(
                "Expected ',' between selector attributes", raw, offset + position
            )
        position += 1

    try:
        return ByAttributes(tuple(attributes))
    except AddressValidationError as exc:
        raise AddressSyntaxError(str(exc), raw, offset) from exc


__all__ = [
    "PartSpec",
    "check_brackets",
    "parse_selector",
    "reads_as_part",
    "split_part_spec",
    "tokenize",
]
