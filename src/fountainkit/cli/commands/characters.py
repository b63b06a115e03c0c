"""List the speaking characters of a Fountain file."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from fountainkit.cli.utils.cli_handler import CLIHandler
from fountainkit.cli.utils.options import ConfigOption, FileArgument, JsonOption
from fountainkit.utils import ScreenplayUtils

console = Console()


def characters_command(
    file: FileArgument,
    prefix: Annotated[
        str,
        typer.Option("--prefix", "-p", help="Only names starting with this text"),
    ] = "",
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """List every character with dialogue, sorted by name.

    Dual dialogue cues such as "BOB & ALICE" count for both characters.
    """
    handler = CLIHandler(console)
    try:
        settings = handler.load_settings(config)
        document = handler.load_document(file, settings)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    names = ScreenplayUtils.filter_characters(document.all_characters, prefix)
    if json_output:
        handler.print_json(names)
        return
    if not names:
        console.print("[yellow]No characters found.[/yellow]")
        return
    for name in names:
        console.print(name, markup=False, highlight=False)
