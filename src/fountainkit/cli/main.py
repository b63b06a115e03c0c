"""Main CLI entry point."""

from __future__ import annotations

import os
from typing import Annotated

import typer
from rich.console import Console

from fountainkit import __version__
from fountainkit.cli.commands import (
    characters_command,
    notes_command,
    parse_command,
    scenes_command,
    structure_command,
)
from fountainkit.cli.utils.cli_handler import format_json
from fountainkit.config import (
    clear_settings_cache,
    configure_logging,
    get_logger,
    get_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="fountainkit",
    help="Parse and inspect Fountain screenplays",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="parse")(parse_command)
app.command(name="structure")(structure_command)
app.command(name="characters")(characters_command)
app.command(name="notes")(notes_command)
app.command(name="scenes")(scenes_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show fountainkit version."""
    version_info = {
        "name": "fountainkit",
        "version": __version__,
        "description": "Fountain screenplay parser and document model",
    }
    if json_output:
        print(format_json(version_info))
    else:
        console.print(f"fountainkit v{version_info['version']}")


def _reconfigure_logging(level: str) -> None:
    os.environ["FOUNTAINKIT_LOG_LEVEL"] = level
    clear_settings_cache()
    configure_logging(get_settings())


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug", help="Enable debug logging", envvar="FOUNTAINKIT_DEBUG"
        ),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        os.environ["FOUNTAINKIT_DEBUG"] = "true"
        _reconfigure_logging("DEBUG")
        logger.debug("Debug mode enabled")
    elif verbose:
        _reconfigure_logging("INFO")
        logger.info("Verbose mode enabled")


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
