"""Tests for ScreenplayUtils."""

import pytest

from fountainkit.parser import parse
from fountainkit.parser.fountain_models import (
    Action,
    Line,
    Note,
    Range,
    Scene,
    Text,
    Transition,
)
from fountainkit.utils import ScreenplayUtils


class TestNotes:
    """Note extraction."""

    def test_extract_notes_from_action_and_dialogue(self):
        """Notes are collected in document order."""
        document = parse("Action [[one]].\n\nBOB\nHi [[@loud]].")

        notes = ScreenplayUtils.extract_notes(document.elements)

        assert [note.note_kind for note in notes] == ["", "@loud"]

    def test_extract_notes_inside_emphasis(self):
        """Notes nested in emphasis are found."""
        document = parse("She *whispers [[check this]] softly* now.\n")

        (note,) = ScreenplayUtils.extract_notes(document.elements)

        assert document.slice_raw(note.text_range) == "check this"

    def test_extract_notes_ignores_other_elements(self):
        """Scene headings carry no notes."""
        document = parse("INT. HOUSE - DAY [[not a note]]")

        assert ScreenplayUtils.extract_notes(document.elements) == []

    @pytest.mark.parametrize(
        ("note_kind", "marker"),
        [("@effect", "effect"), ("@", ""), ("", None), ("todo", None)],
    )
    def test_extract_margin_marker(self, note_kind, marker):
        """Only ``@`` notes have a margin marker."""
        note = Note(Range(0, 10), note_kind, Range(2, 8))

        assert ScreenplayUtils.extract_margin_marker(note) == marker


class TestTransitions:
    """Transition text."""

    def test_forced_transition_drops_marker(self):
        """The ``>`` marker is not part of the text."""
        document = parse("\n> FADE OUT")
        transition = document.elements[-1]

        assert isinstance(transition, Transition)
        assert ScreenplayUtils.extract_transition_text(transition, document) == (
            "FADE OUT"
        )

    def test_plain_transition(self):
        """Unforced transitions are returned as written."""
        document = parse("\nCUT TO:\n\nAction.")
        transition = document.elements[1]

        assert isinstance(transition, Transition)
        assert ScreenplayUtils.extract_transition_text(transition, document) == (
            "CUT TO:"
        )


class TestRangeHelpers:
    """Small range and element predicates."""

    def test_is_blank_lines(self):
        """Actions made of empty lines are blank."""
        blank = Action(Range(0, 2), (Line(Range(0, 1)), Line(Range(1, 2))))
        text = Action(Range(0, 2), (Line(Range(0, 2), (Text(Range(0, 2)),)),))

        assert ScreenplayUtils.is_blank_lines(blank)
        assert not ScreenplayUtils.is_blank_lines(text)
        assert not ScreenplayUtils.is_blank_lines(Scene(Range(0, 2), ".A"))

    @pytest.mark.parametrize(
        ("first", "second", "expected"),
        [
            (Range(0, 5), Range(4, 6), True),
            (Range(0, 5), Range(5, 6), False),
            (Range(3, 4), Range(0, 10), True),
            (Range(2, 2), Range(0, 5), True),
            (Range(5, 5), Range(0, 5), False),
        ],
    )
    def test_intersect(self, first, second, expected):
        """Ranges intersect when each starts before the other ends."""
        assert ScreenplayUtils.intersect(first, second) is expected

    def test_collapse_range_to_start(self):
        """Collapsing gives an empty range at the start."""
        assert ScreenplayUtils.collapse_range_to_start(Range(3, 9)) == Range(3, 3)


class TestTextHelpers:
    """Escaping and normalisation."""

    def test_escape_html(self):
        """Markup characters and quotes are escaped."""
        assert ScreenplayUtils.escape_html("<a href='x'>&</a>") == (
            "&lt;a href=&#39;x&#39;&gt;&amp;&lt;/a&gt;"
        )

    def test_escape_leading_spaces_only_when_asked(self):
        """Without the condition the text is unchanged."""
        assert ScreenplayUtils.escape_leading_spaces(False, "  a") == "  a"
        assert ScreenplayUtils.escape_leading_spaces(True, "  a b") == (
            "\u00a0\u00a0a b"
        )

    @pytest.mark.parametrize(
        ("raw", "title"),
        [
            ("# Snippets", "snippets"),
            ("## Snippets  ", "snippets"),
            ("  ###BONEYARD", "boneyard"),
            ("# Act One", "act one"),
        ],
    )
    def test_section_title(self, raw, title):
        """Markers and case are removed."""
        assert ScreenplayUtils.section_title(raw) == title


class TestFilterCharacters:
    """Prefix filtering of character names."""

    def test_prefix_is_case_sensitive(self):
        """Only names with the exact prefix match."""
        names = {"BOB", "BOBBY", "ALICE", "bob"}

        assert ScreenplayUtils.filter_characters(names, "BOB") == ["BOB", "BOBBY"]

    def test_empty_prefix_returns_all_sorted(self):
        """An empty prefix matches every name."""
        names = {"BOB", "ALICE"}

        assert ScreenplayUtils.filter_characters(names, "") == ["ALICE", "BOB"]

    def test_no_match(self):
        """Unknown prefixes give an empty list."""
        assert ScreenplayUtils.filter_characters({"BOB"}, "Z") == []
