"""Command line interface."""

from gembridge.frontends.cli.main import main

__all__ = ["main"]
