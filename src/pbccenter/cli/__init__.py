"""Command line interface for pbccenter."""

from pbccenter.cli.main import cli, main

__all__ = ["cli", "main"]
