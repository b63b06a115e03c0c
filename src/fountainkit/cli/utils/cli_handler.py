"""Shared helpers for CLI commands: document loading, JSON output, errors."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from fountainkit.config import FountainKitSettings, get_logger, get_settings_for_cli
from fountainkit.document import Document, ShowHideSettings
from fountainkit.exceptions import FountainKitError
from fountainkit.parser import FountainParser, ParseOptions

logger = get_logger(__name__)


def format_json(data: Any) -> str:
    """Format data as indented JSON."""
    return json.dumps(data, default=str, indent=2, ensure_ascii=False)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()

    def load_settings(
        self,
        config: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> FountainKitSettings:
        """Load settings for a command, applying CLI overrides last."""
        return get_settings_for_cli(config_file=config, cli_overrides=overrides)

    def load_document(
        self,
        file: Path,
        settings: FountainKitSettings,
        options: ParseOptions | None = None,
    ) -> Document:
        """Parse a file and drop the elements the settings hide.

        Args:
            file: Fountain file to parse
            settings: Settings providing the hide flags
            options: Parse options, title page detection by default

        Returns:
            The filtered document
        """
        document = FountainParser(options).parse_file(file)
        return document.with_hidden_elements_removed(
            ShowHideSettings.from_settings(settings)
        )

    def print_json(self, data: Any) -> None:
        """Print pure JSON without rich markup processing."""
        print(format_json(data))

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Report an error and exit.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use

        Raises:
            typer.Exit: Always
        """
        logger.error(f"Command failed: {error}")
        if json_output:
            self.print_json(
                {
                    "success": False,
                    "error": getattr(error, "message", str(error)),
                    "hint": getattr(error, "hint", None),
                    "code": exit_code,
                }
            )
        elif isinstance(error, FountainKitError):
            self.console.print(f"[red]{error.format_error()}[/red]")
        else:
            self.console.print(f"[red]Error: {error}[/red]")
        raise typer.Exit(exit_code) from error
