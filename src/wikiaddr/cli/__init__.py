"""wikiaddr command line.

``cli`` and ``main`` are resolved on first access so that importing
``wikiaddr.cli`` stays cheap and ``python -m wikiaddr.cli.main`` does not
find the module already imported.
"""

__all__ = ["cli", "main"]


def __getattr__(name):
    if name == "cli":
        from .main import cli

        return cli
    if name == "main":
        from .main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
