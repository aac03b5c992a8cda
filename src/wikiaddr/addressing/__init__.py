"""Wiki addressing: parse, render and compare resource addresses.

An address names a web, a topic in it (optionally at a revision), an
attachment of the topic, or a metadata element embedded in the topic.

Syntax:
    prefix[/partspec]
    prefix   := ['] web(/web)* [.topic] [@rev] [']
    partspec := filename | FILE:filename | text
              | META[:TYPE[selector][.key]]
              | alias

Examples:
    Web/SubWeb/                                     # web
    Web/SubWeb.Topic                                # topic
    Web/SubWeb.Topic@2                              # topic at revision 2
    'Web/SubWeb.Topic'/report.pdf                   # attachment
    'Web/SubWeb.Topic'/META:FIELD                   # all form fields
    'Web/SubWeb.Topic'/META:FIELD[3]                # third field
    'Web/SubWeb.Topic'/META:FIELD[name='Colour'].value
    'Web/SubWeb.Topic'/fields[name='Colour'].value  # alias of the above
    'Web/SubWeb.Topic'/Colour                       # alias of the above
    'Web/SubWeb.Topic'/MyForm.Colour                # field of a named form
"""

from .address import Address
from .aliases import AliasResolver, Resolution
from .equivalence import equiv
from .errors import (
    AddressError,
    AddressSyntaxError,
    AddressValidationError,
    AliasAmbiguous,
    ExistenceCheckFailed,
    ParseError,
)
from .existence import EXIST_KINDS, ExistenceValidator, Storage
from .stringify import stringify
from .tokenizer import PartSpec, parse_selector, split_part_spec, tokenize
from .types import (
    ADDRESS_TYPES,
    AddressType,
    ByAttributes,
    MetaPath,
    Part,
    Positional,
    Selector,
    Tokens,
)

__all__ = [
    "ADDRESS_TYPES",
    "Address",
    "AddressError",
    "AddressSyntaxError",
    "AddressType",
    "AddressValidationError",
    "AliasAmbiguous",
    "AliasResolver",
    "ByAttributes",
    "EXIST_KINDS",
    "ExistenceCheckFailed",
    "ExistenceValidator",
    "MetaPath",
    "ParseError",
    "Part",
    "PartSpec",
    "Positional",
    "Resolution",
    "Selector",
    "Storage",
    "Tokens",
    "equiv",
    "parse_selector",
    "split_part_spec",
    "stringify",
    "tokenize",
]
