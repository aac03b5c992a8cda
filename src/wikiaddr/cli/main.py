"""wikiaddr CLI main entry point with global options."""

import json
import logging
import sys

import click

from ..addressing import (
    ADDRESS_TYPES,
    EXIST_KINDS,
    Address,
    AddressError,
    ExistenceValidator,
)
from ..config import ConfigError, use
from ..context import AddrContext, pass_context
from ..store import FileStore


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="Config file (overrides $WIKIADDR_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, config_file, verbose):
    """wikiaddr - parse, render and compare wiki addresses."""
    ctx.ensure_object(AddrContext)

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        ctx.obj.config = use(config_file)
    except (ConfigError, ValueError) as e:
        _fail(str(e))


@cli.command()
@click.argument("address")
@click.option(
    "--is-a",
    "is_a",
    type=click.Choice(ADDRESS_TYPES),
    help="Expected address type (disambiguates bare names)",
)
@click.option("--web", help="Context web for a relative topic")
@click.option("--webseparator", type=click.Choice(["/", "."]))
@click.option("--topicseparator", type=click.Choice(["/", "."]))
@click.option("--json", "as_json", is_flag=True, help="Print fields as JSON")
@pass_context
def parse(ctx, address, is_a, web, webseparator, topicseparator, as_json):
    """Parse ADDRESS and print its canonical form and type.

    Examples:
        wikiaddr parse "Web/SubWeb.Topic"
        wikiaddr parse "'Web.Topic'/Colour" --json
        wikiaddr parse Topic --is-a topic --web Web/SubWeb
    """
    try:
        addr = Address(
            address,
            web=web,
            is_a=is_a,
            webseparator=webseparator,
            topicseparator=topicseparator,
            config=ctx.config,
        )
        if as_json:
            data = addr.as_dict()
            data["canonical"] = addr.stringify()
            click.echo(json.dumps(data))
        else:
            click.echo(f"{addr.stringify()}\t{addr.type()}")
    except AddressError as e:
        _fail(str(e))


@cli.command("type")
@click.argument("address")
@pass_context
def type_(ctx, address):
    """Print the type of ADDRESS."""
    try:
        click.echo(Address(address, config=ctx.config).type())
    except AddressError as e:
        _fail(str(e))


@cli.command()
@click.argument("first")
@click.argument("second")
@pass_context
def equiv(ctx, first, second):
    """Print whether FIRST and SECOND denote the same resource.

    Exits 0 when they do and 1 when they do not.
    """
    try:
        same = Address(first, config=ctx.config).equiv(
            Address(second, config=ctx.config)
        )
    except AddressError as e:
        _fail(str(e))
    click.echo("true" if same else "false")
    sys.exit(0 if same else 1)


@cli.command()
@click.argument("address")
@click.option(
    "--as",
    "kinds",
    multiple=True,
    type=click.Choice(EXIST_KINDS),
    help="Kind to check (repeatable; default: the address's own level)",
)
@click.option(
    "--store",
    type=click.Path(file_okay=False),
    help="Store root (overrides store_root from config)",
)
@pass_context
def exists(ctx, address, kinds, store):
    """Check whether ADDRESS exists in a store.

    Prints a JSON object of kind → boolean; exits 1 if any is false.

    Examples:
        wikiaddr exists "Web.Topic" --store ./wiki
        wikiaddr exists "'Web.Topic'/report.pdf" --as file --as topic
    """
    root = store or ctx.config.store_root
    if root is None:
        _fail("No store given; pass --store or set store_root in the config")

    try:
        addr = Address(address, config=ctx.config)
        if not kinds:
            kinds = (_default_kind(addr),)
        results = ExistenceValidator(FileStore(root)).check(addr, kinds)
    except AddressError as e:
        _fail(str(e))

    click.echo(json.dumps(results))
    sys.exit(0 if all(results.values()) else 1)


def _default_kind(addr: Address) -> str:
    address_type = addr.type()
    if address_type in ("web", "file"):
        return address_type
    if address_type in ("topic", "text"):
        return "topic"
    return "meta"


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
