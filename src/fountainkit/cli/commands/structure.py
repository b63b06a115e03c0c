"""Show the section and scene outline of a Fountain file."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from fountainkit.cli.utils.cli_handler import CLIHandler
from fountainkit.cli.utils.formatting import document_title, preview
from fountainkit.cli.utils.options import (
    ConfigOption,
    FileArgument,
    HideBoneyardOption,
    HideSynopsisOption,
    JsonOption,
)
from fountainkit.document import Document
from fountainkit.parser import (
    Snippet,
    StructureScene,
    StructureSection,
    Synopsis,
    as_dict,
)

console = Console()


def _synopsis_text(document: Document, synopsis: Synopsis | None) -> str | None:
    if synopsis is None:
        return None
    return " ".join(document.slice_raw(r).strip() for r in synopsis.lines_of_text)


def _add_scene(tree: Tree, document: Document, node: StructureScene) -> None:
    if node.scene is not None:
        label = Text(node.scene.heading.strip(), style="bold")
    else:
        label = Text("(before first scene)", style="dim")
    branch = tree.add(label)
    synopsis = _synopsis_text(document, node.synopsis)
    if synopsis:
        branch.add(Text(synopsis, style="italic"))


def _add_section(tree: Tree, document: Document, node: StructureSection) -> None:
    if node.section is not None:
        raw = document.slice_raw(node.section.range).strip()
        branch = tree.add(Text(raw, style="cyan"))
    else:
        branch = tree
    synopsis = _synopsis_text(document, node.synopsis)
    if synopsis:
        branch.add(Text(synopsis, style="italic"))
    for child in node.content:
        if isinstance(child, StructureSection):
            _add_section(branch, document, child)
        else:
            _add_scene(branch, document, child)


def _add_snippets(
    tree: Tree, document: Document, snippets: tuple[Snippet, ...]
) -> None:
    branch = tree.add(Text("Snippets", style="magenta"))
    for index, snippet in enumerate(snippets, 1):
        branch.add(Text(f"{index}. {preview(document, snippet.content[0].range)}"))


def structure_command(
    file: FileArgument,
    hide_synopsis: HideSynopsisOption = None,
    hide_boneyard: HideBoneyardOption = None,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Show the outline of sections, scenes and snippets.

    Sections up to three levels deep form the outline. Everything after a
    top level "# Snippets" section is listed as snippets.
    """
    handler = CLIHandler(console)
    try:
        settings = handler.load_settings(
            config,
            {"hide_synopsis": hide_synopsis, "hide_boneyard": hide_boneyard},
        )
        document = handler.load_document(file, settings)
        structure = document.structure()
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        handler.print_json(as_dict(structure))
        return

    title = document_title(document, file.name)
    tree = Tree(Text(title, style="bold"))
    for section in structure.sections:
        _add_section(tree, document, section)
    if structure.snippets:
        _add_snippets(tree, document, structure.snippets)
    console.print(tree)
