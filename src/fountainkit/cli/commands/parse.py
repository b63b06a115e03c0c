"""Parse a Fountain file and show its elements."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from fountainkit.cli.utils.cli_handler import CLIHandler
from fountainkit.cli.utils.formatting import preview, title_value
from fountainkit.cli.utils.options import (
    ConfigOption,
    FileArgument,
    HideBoneyardOption,
    HideNotesOption,
    HideSynopsisOption,
    JsonOption,
)
from fountainkit.parser import ParseOptions

console = Console()


def parse_command(
    file: FileArgument,
    no_title_page: Annotated[
        bool,
        typer.Option("--no-title-page", help="Treat the first lines as script text"),
    ] = False,
    hide_notes: HideNotesOption = None,
    hide_synopsis: HideSynopsisOption = None,
    hide_boneyard: HideBoneyardOption = None,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Parse a Fountain file and list its title page and elements.

    With --json the complete document tree is printed, including inline
    emphasis, notes and the source range of every node.
    """
    handler = CLIHandler(console)
    try:
        settings = handler.load_settings(
            config,
            {
                "hide_notes": hide_notes,
                "hide_synopsis": hide_synopsis,
                "hide_boneyard": hide_boneyard,
            },
        )
        document = handler.load_document(
            file, settings, ParseOptions(title_page=not no_title_page)
        )
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        handler.print_json(document.to_dict())
        return

    if document.title_page:
        title_table = Table(title="Title Page", show_header=True)
        title_table.add_column("Key", style="cyan")
        title_table.add_column("Value")
        for entry in document.title_page:
            title_table.add_row(
                Text(entry.key), Text(title_value(document, entry))
            )
        console.print(title_table)

    table = Table(title=f"Elements of {file.name}", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="green")
    table.add_column("Range", style="dim")
    table.add_column("Text")
    for index, element in enumerate(document.elements, 1):
        table.add_row(
            str(index),
            element.kind,
            f"{element.range.start}-{element.range.end}",
            Text(preview(document, element.range)),
        )
    console.print(table)
