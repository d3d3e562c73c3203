"""Command-line interface."""

from matchrank.cli.main import cli


__all__ = ["cli"]
