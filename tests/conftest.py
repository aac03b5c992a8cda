"""Pytest configuration and shared fixtures."""

import pytest
from click.testing import CliRunner

from wikiaddr import config
from wikiaddr.cli import cli

from tests.helpers import AddressFixture, build_fixture


@pytest.fixture(scope="session")
def address_fixture(tmp_path_factory) -> AddressFixture:
    """Fixture store with the range's webs, topics and attachments.

    Built once per session; tests must not write to it.
    """
    return build_fixture(tmp_path_factory.mktemp("wiki"))


@pytest.fixture(autouse=True)
def clear_config_cache(monkeypatch, tmp_path):
    """Isolate tests from any wikiaddr.json on the machine.

    Points $WIKIADDR_CONFIG at a path that does not exist (so defaults
    apply) and clears the cached config before and after each test.
    """
    monkeypatch.setenv("WIKIADDR_CONFIG", str(tmp_path / "absent.json"))
    config.reset()
    yield
    config.reset()


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args.

    Usage:
        result = invoke(["parse", "Web.Topic"])  # returns click.Result
    """

    def _invoke(args):
        return cli_runner.invoke(cli, args)

    return _invoke
