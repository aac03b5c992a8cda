"""wikiaddr: typed addresses for wiki webs, topics, attachments and metadata."""

from . import config
from .addressing import Address, AddressType, equiv

__all__ = ["__version__", "Address", "AddressType", "config", "equiv"]

__version__ = "0.1.0"
