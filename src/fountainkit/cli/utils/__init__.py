"""CLI utility helpers."""

from fountainkit.cli.utils.cli_handler import CLIHandler, format_json

__all__ = ["CLIHandler", "format_json"]
