"""List scene headings and add or remove scene numbers."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from fountainkit.cli.utils.cli_handler import CLIHandler
from fountainkit.cli.utils.options import ConfigOption, FileArgument, JsonOption
from fountainkit.config import get_logger
from fountainkit.exceptions import FountainKitError
from fountainkit.parser import FountainParser
from fountainkit.utils import number_scenes, remove_scene_numbers

logger = get_logger(__name__)
console = Console()


def scenes_command(
    file: FileArgument,
    number: Annotated[
        bool,
        typer.Option("--number", help="Add #n# numbers to unnumbered scenes"),
    ] = False,
    remove_numbers: Annotated[
        bool,
        typer.Option("--remove-numbers", help="Remove all scene numbers"),
    ] = False,
    in_place: Annotated[
        bool,
        typer.Option(
            "--in-place", "-i", help="Write the renumbered text back to the file"
        ),
    ] = False,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """List scene headings, or renumber them.

    With --number or --remove-numbers the changed script is printed, or
    written back to FILE with --in-place. Without either flag the scene
    headings are listed.
    """
    handler = CLIHandler(console)
    try:
        if number and remove_numbers:
            raise FountainKitError(
                "Cannot add and remove scene numbers at once",
                hint="Use either --number or --remove-numbers",
            )
        handler.load_settings(config)
        # Hidden elements stay, the text is written back unchanged apart
        # from the numbers
        document = FountainParser().parse_file(file)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if number or remove_numbers:
        text = number_scenes(document) if number else remove_scene_numbers(document)
        if in_place:
            file.write_text(text, encoding="utf-8")
            logger.info("Rewrote scene numbers", path=str(file))
            console.print(f"[green]Updated scene numbers in {file.name}[/green]")
        else:
            print(text, end="")
        return

    rows = [
        {
            "heading": scene.heading.strip(),
            "number": (
                document.slice_raw(scene.number).strip("#").strip()
                if scene.number is not None
                else None
            ),
            "start": scene.range.start,
            "end": scene.range.end,
        }
        for scene in document.scenes()
    ]
    if json_output:
        handler.print_json(rows)
        return
    if not rows:
        console.print("[yellow]No scenes found.[/yellow]")
        return

    table = Table(title=f"Scenes in {file.name}", show_header=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Heading")
    table.add_column("Range", style="dim")
    for row in rows:
        table.add_row(
            Text(row["number"] or ""),
            Text(row["heading"]),
            f"{row['start']}-{row['end']}",
        )
    console.print(table)
