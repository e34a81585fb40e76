"""
CLI module for specref.

Provides the command-line interface using Click.
"""

from specref.cli.main import cli, main

__all__ = ["main", "cli"]
