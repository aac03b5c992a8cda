"""wikiaddr context for passing state between commands."""

from typing import Optional

import click

from .models import AddressConfig


class AddrContext:
    def __init__(self):
        self.config: Optional[AddressConfig] = None


pass_context = click.make_pass_decorator(AddrContext, ensure=True)
