"""Errors raised while parsing, building, rendering and checking addresses."""

from typing import Dict, Optional, Sequence


class AddressError(Exception):
    """Base class for all address errors."""

    pass


class ParseError(AddressError):
    """Address text could not be turned into a canonical address."""

    pass


class AddressSyntaxError(ParseError):
    """Malformed address text.

    Attributes:
        text: The full text being parsed
        position: Zero-based offset of the offending character
    """

    def __init__(self, message: str, text: str = "", position: int = 0):
        self.text = text
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if not self.text:
            return message
        return f"{message} at position {self.position}: {self.text!r}"


class AliasAmbiguous(ParseError):
    """A shorthand part specifier has no unique canonical form."""

    def __init__(self, message: str, token: str = ""):
        self.token = token
        super().__init__(message)


class AddressValidationError(AddressError):
    """Field values violate the address invariants."""

    pass


class ExistenceCheckFailed(AddressError):
    """A storage lookup reported a resource absent, or raised.

    Attributes:
        address: Canonical text of the checked address (if renderable)
        missing: Kinds that were reported absent
        kind: Kind whose lookup raised, when the failure is an exception
    """

    def __init__(
        self,
        message: str,
        address: str = "",
        missing: Sequence[str] = (),
        kind: Optional[str] = None,
        results: Optional[Dict[str, bool]] = None,
    ):
        self.address = address
        self.missing = list(missing)
        self.kind = kind
        self.results = dict(results or {})
        super().__init__(message)


__all__ = [
    "AddressError",
    "AddressSyntaxError",
    "AddressValidationError",
    "AliasAmbiguous",
    "ExistenceCheckFailed",
    "ParseError",
]
