"""Reusable option declarations for fountainkit commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

FileArgument = Annotated[
    Path,
    typer.Argument(
        help="Fountain file to read",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file (YAML, TOML, or JSON)",
    ),
]

JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]

HideNotesOption = Annotated[
    bool | None,
    typer.Option("--hide-notes/--show-notes", help="Drop [[notes]] from the output"),
]

HideSynopsisOption = Annotated[
    bool | None,
    typer.Option(
        "--hide-synopsis/--show-synopsis", help="Drop = synopsis lines from the output"
    ),
]

HideBoneyardOption = Annotated[
    bool | None,
    typer.Option(
        "--hide-boneyard/--show-boneyard",
        help="Drop /* boneyard */ text and the Boneyard section",
    ),
]
