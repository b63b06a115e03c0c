"""fountainkit CLI commands."""

from __future__ import annotations

from fountainkit.cli.commands.characters import characters_command
from fountainkit.cli.commands.notes import notes_command
from fountainkit.cli.commands.parse import parse_command
from fountainkit.cli.commands.scenes import scenes_command
from fountainkit.cli.commands.structure import structure_command

__all__ = [
    "characters_command",
    "notes_command",
    "parse_command",
    "scenes_command",
    "structure_command",
]
