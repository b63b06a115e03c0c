"""Tests for block classification of Fountain lines."""

import pytest

from fountainkit.parser.fountain_models import (
    Action,
    Dialogue,
    Line,
    Lyrics,
    PageBreak,
    Range,
    Scene,
    Section,
    Synopsis,
    Text,
    Transition,
)
from fountainkit.parser.line_classifier import (
    LineClassifier,
    ParseOptions,
    is_uppercase,
    split_lines,
)


def classify(source: str, title_page: bool = True):
    """Classify ``source`` and return only the elements."""
    _, elements = LineClassifier(source, ParseOptions(title_page)).classify()
    return elements


def kinds(source: str) -> list[str]:
    """Element kinds of ``source`` in order."""
    return [element.kind for element in classify(source)]


class TestSplitLines:
    """Physical line splitting."""

    def test_trailing_newline_does_not_add_line(self):
        """A final newline terminates the last line."""
        lines = split_lines("a\nb\n")

        assert [line.text for line in lines] == ["a", "b"]
        assert lines[-1].next == 4

    def test_carriage_return_is_not_content(self):
        """Windows line endings are excluded from the content."""
        (line,) = split_lines("abc\r\n")

        assert line.text == "abc"
        assert line.content_range == Range(0, 3)
        assert line.range == Range(0, 5)

    def test_empty_source_has_no_lines(self):
        """Nothing to split in an empty document."""
        assert split_lines("") == []


class TestIsUppercase:
    """Uppercase detection for cues and transitions."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("JOHN", True),
            ("THUG #1", True),
            ("McCLANE", False),
            ("123", False),
            ("", False),
        ],
    )
    def test_is_uppercase(self, text, expected):
        """At least one cased letter and no lowercase ones."""
        assert is_uppercase(text) is expected


class TestScenes:
    """Scene heading recognition."""

    def test_forced_scene_heading(self):
        """A leading period forces a scene heading."""
        assert classify(".A SCENE") == [Scene(Range(0, 8), ".A SCENE")]

    @pytest.mark.parametrize(
        "heading",
        [
            "INT. HOUSE - DAY",
            "EXT. PARK - NIGHT",
            "EST. CITY - DAWN",
            "INT./EXT. CAR - DAY",
            "I/E CAR - DAY",
            "int. kitchen - night",
        ],
    )
    def test_heuristic_scene_headings(self, heading):
        """Known prefixes start a scene heading in any case."""
        (scene,) = classify(heading)

        assert isinstance(scene, Scene)
        assert scene.heading == heading

    def test_interior_is_not_a_scene_prefix(self):
        """The prefix must be followed by a period or space."""
        assert kinds("INTERIOR DESIGN is hard.") == ["action"]

    def test_ellipsis_is_not_forced_scene(self):
        """Two leading periods are action text."""
        assert kinds("...and then nothing.") == ["action"]

    def test_scene_number(self):
        """A trailing ``#...#`` is the scene number."""
        (scene,) = classify("INT. HOUSE - DAY #1#")

        assert scene.heading == "INT. HOUSE - DAY"
        assert scene.number == Range(17, 20)

    def test_scene_absorbs_blank_line(self):
        """The blank line after a heading belongs to the scene."""
        elements = classify("INT. HOUSE - DAY\n\nAction.")

        assert elements[0] == Scene(Range(0, 18), "INT. HOUSE - DAY")
        assert elements[1].range == Range(18, 25)


class TestTransitions:
    """Transition recognition."""

    def test_uppercase_colon_between_blank_lines(self):
        """Uppercase text ending in a colon between blank lines."""
        elements = classify("A.\n\nCUT TO:\n\nB.")

        assert elements[1] == Transition(Range(4, 13), forced=False)
        assert elements[2].range == Range(13, 15)

    def test_transition_needs_blank_line_after(self):
        """Without a blank line after, the line is not a transition."""
        assert "transition" not in kinds("A.\n\nCUT TO:\nB.")

    def test_forced_transition(self):
        """A leading ``>`` forces a transition."""
        assert classify("> FADE OUT") == [Transition(Range(0, 10), forced=True)]

    def test_centered_text_is_action(self):
        """``>text<`` is centered action, not a transition."""
        (action,) = classify("> THE END <")

        assert isinstance(action, Action)
        assert action.lines == (
            Line(Range(0, 11), (Text(Range(2, 9)),), centered=True),
        )


class TestDialogue:
    """Character cues, parentheticals and speech."""

    def test_cue_with_extension_and_parenthetical(self):
        """Extensions and the parenthetical get their own ranges."""
        elements = classify("Text.\n\nBOB (V.O.)\n(quietly)\nHello.")

        assert elements[1] == Dialogue(
            range=Range(7, 34),
            character_range=Range(7, 10),
            character_extensions_range=Range(11, 17),
            parenthetical=Range(18, 27),
            lines=(Line(Range(28, 34), (Text(Range(28, 34)),)),),
        )

    def test_dual_dialogue_marker(self):
        """A trailing caret marks dual dialogue."""
        (dialogue,) = classify("BRICK ^\nScrew retirement.")

        assert dialogue.dual is True
        assert dialogue.character_range == Range(0, 5)
        assert dialogue.character_extensions_range == Range(5, 5)

    def test_forced_character(self):
        """``@`` forces a cue, the marker is not part of the name."""
        (dialogue,) = classify("@McCLANE\nYippee ki-yay.")

        assert isinstance(dialogue, Dialogue)
        assert dialogue.character_range == Range(1, 8)

    def test_forced_character_without_speech_is_action(self):
        """A forced cue needs a following line."""
        assert kinds("@McCLANE\n\nNothing said.") == ["action", "action"]

    def test_cue_needs_blank_line_before(self):
        """Uppercase text right after action continues the action."""
        (action,) = classify("Some action.\nJOHN\nHello")

        assert isinstance(action, Action)
        assert len(action.lines) == 3

    def test_cue_needs_following_line(self):
        """Uppercase text followed by a blank line is action."""
        assert kinds("JOHN\n\nHello") == ["action", "action"]

    def test_parenthetical_only_cue_is_action(self):
        """Only the name part before ``(`` must be uppercase."""
        assert kinds("\n(beat)\nHello") == ["action", "action"]

    def test_dialogue_stops_at_synopsis(self):
        """Synopses interrupt running dialogue."""
        assert kinds("JOHN\nHello\n= A synopsis") == ["dialogue", "synopsis"]


class TestOtherBlocks:
    """Sections, synopses, page breaks, lyrics and action."""

    def test_section_depth(self):
        """The number of ``#`` is the depth, capped at six."""
        sections = [
            element
            for element in classify("## Act\n####### Deep")
            if isinstance(element, Section)
        ]

        assert [s.depth for s in sections] == [2, 6]

    def test_section_followed_by_blank_line(self):
        """The newline of the section opens the blank run after it."""
        elements = classify("# Act One\n\nINT. HOUSE - DAY")

        assert elements[0] == Section(Range(0, 9), 1)
        assert elements[1] == Action(Range(9, 11), (Line(Range(10, 11)),))
        assert elements[2].range == Range(11, 27)

    def test_section_followed_by_text(self):
        """Without a blank line the section keeps its newline."""
        elements = classify("# Act\nAction.")

        assert elements[0] == Section(Range(0, 6), 1)
        assert elements[1].range == Range(6, 13)

    def test_section_interrupts_action(self):
        """A section line ends a running action."""
        assert kinds("Action line\n# Section") == ["action", "section"]

    def test_synopsis(self):
        """The synopsis text starts after the marker and whitespace."""
        (synopsis,) = classify("= A synopsis")

        assert synopsis == Synopsis(Range(0, 12), (Range(2, 12),))

    def test_page_break(self):
        """Three or more ``=`` are a page break."""
        assert classify("===") == [PageBreak(Range(0, 3))]

    def test_double_equals_is_action(self):
        """Two ``=`` are neither synopsis nor page break."""
        assert kinds("==") == ["action"]

    def test_lyrics(self):
        """Consecutive ``~`` lines form one lyrics block."""
        (lyrics,) = classify("~Some lyrics\n~More")

        assert isinstance(lyrics, Lyrics)
        assert lyrics.lines == (
            Line(Range(0, 13), (Text(Range(1, 12)),)),
            Line(Range(13, 18), (Text(Range(14, 18)),)),
        )

    def test_indented_tilde_is_action(self):
        """Only a ``~`` in the first column starts lyrics."""
        assert kinds("  ~not lyrics") == ["action"]

    def test_forced_action_drops_marker(self):
        """``!`` forces action and is not part of the text."""
        (action,) = classify("!INT. NOT A SCENE")

        assert isinstance(action, Action)
        assert action.lines[0].elements == (Text(Range(1, 17)),)

    def test_blank_lines_only(self):
        """Blank lines form one action of empty lines."""
        (action,) = classify("\n\n\n")

        assert action == Action(
            Range(0, 3),
            (Line(Range(0, 1)), Line(Range(1, 2)), Line(Range(2, 3))),
        )

    def test_comment_keeps_blank_lines_inside_action(self):
        """Blank lines inside a multi-line comment do not split blocks."""
        (action,) = classify("/* hidden\n\nstill hidden */\nAction.")

        assert isinstance(action, Action)
        assert len(action.lines) == 4

    def test_crlf_source(self):
        """Windows line endings are covered by the element ranges."""
        elements = classify("INT. HOUSE - DAY\r\n\r\nAction.\r\n")

        assert elements[0] == Scene(Range(0, 20), "INT. HOUSE - DAY")
        assert elements[1].range == Range(20, 29)

    def test_empty_source(self):
        """An empty document has no elements."""
        assert classify("") == []


class TestTitlePage:
    """Title page recognition."""

    def test_title_page_entries(self):
        """Key value lines up to the first blank line form the title page."""
        source = "Title: My Script\nAuthor: Me\n\nINT. ROOM - DAY"
        title_page, elements = LineClassifier(source).classify()

        assert [entry.key for entry in title_page] == ["Title", "Author"]
        assert title_page[0].range == Range(0, 17)
        assert title_page[1].range == Range(17, 29)
        assert title_page[0].values == ((Text(Range(7, 16)),),)
        assert elements == [Scene(Range(29, 44), "INT. ROOM - DAY")]

    def test_indented_continuation_values(self):
        """Indented lines add values to the previous key."""
        source = "Title:\n\tFirst\n\tSecond\n\nAction."
        title_page, _ = LineClassifier(source).classify()

        (entry,) = title_page
        assert entry.values == ((Text(Range(8, 13)),), (Text(Range(15, 21)),))

    def test_title_page_disabled(self):
        """With title pages disabled the lines are ordinary text."""
        source = "Title: My Script\n\nAction."
        title_page, elements = LineClassifier(
            source, ParseOptions(title_page=False)
        ).classify()

        assert title_page == []
        assert elements[0].range.start == 0

    def test_first_key_needs_value(self):
        """A lone key without any value is not a title page."""
        title_page, elements = LineClassifier("Title:\n\nAction.").classify()

        assert title_page == []
        assert elements[0].range.start == 0

    def test_non_key_line_cancels_title_page(self):
        """Every line of the first paragraph must be a key or value."""
        title_page, _ = LineClassifier("Title: A\nnot a key\n\nB.").classify()

        assert title_page == []
