"""List the [[notes]] of a Fountain file."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from fountainkit.cli.utils.cli_handler import CLIHandler
from fountainkit.cli.utils.options import (
    ConfigOption,
    FileArgument,
    HideBoneyardOption,
    JsonOption,
)
from fountainkit.utils import ScreenplayUtils

console = Console()


def notes_command(
    file: FileArgument,
    margin: Annotated[
        bool,
        typer.Option("--margin", "-m", help="Only show [[@marker]] margin notes"),
    ] = False,
    hide_boneyard: HideBoneyardOption = None,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """List notes found in action, dialogue and lyrics.

    Notes inside the boneyard are skipped when the boneyard is hidden.
    """
    handler = CLIHandler(console)
    try:
        settings = handler.load_settings(
            config, {"hide_notes": False, "hide_boneyard": hide_boneyard}
        )
        document = handler.load_document(file, settings)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    notes = ScreenplayUtils.extract_notes(document.elements)
    if margin:
        notes = [
            note
            for note in notes
            if ScreenplayUtils.extract_margin_marker(note) is not None
        ]

    rows = [
        {
            "kind": note.note_kind,
            "marker": ScreenplayUtils.extract_margin_marker(note),
            "start": note.range.start,
            "end": note.range.end,
            "text": document.slice_raw(note.text_range).strip(),
        }
        for note in notes
    ]
    if json_output:
        handler.print_json(rows)
        return
    if not rows:
        console.print("[yellow]No notes found.[/yellow]")
        return

    table = Table(title=f"Notes in {file.name}", show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Range", style="dim")
    table.add_column("Text")
    for row in rows:
        table.add_row(
            Text(row["kind"] or "note"),
            f"{row['start']}-{row['end']}",
            Text(row["text"]),
        )
    console.print(table)
