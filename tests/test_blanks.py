"""
Tests for the bracket syntax parser.
"""

import pytest

from InlineBlanks.blanks import BlankSpec, contains_blank, iter_segments, parse_blanks


class TestParseBlanks:
    """Tests for parse_blanks()."""

    def test_answer_option_and_hint(self):
        specs = parse_blanks("A [cat|dog|hint:a pet] sat.")

        assert len(specs) == 1
        assert specs[0].answer == "cat"
        assert specs[0].local_options == ("dog",)
        assert specs[0].hint == "a pet"
        assert specs[0].token == "[cat|dog|hint:a pet]"

    def test_plain_blank_has_no_options_or_hint(self):
        spec = parse_blanks("[Paris]")[0]
        assert spec == BlankSpec(index=0, answer="Paris", local_options=(), hint=None, token="[Paris]")

    def test_indices_follow_text_order(self):
        specs = parse_blanks("[one] and [two|2] then [three|hint:3]")
        assert [spec.index for spec in specs] == [0, 1, 2]
        assert [spec.answer for spec in specs] == ["one", "two", "three"]

    @pytest.mark.parametrize("text, count", [
        ("no blanks here", 0),
        ("[a]", 1),
        ("[a] [b] [c]", 3),
        ("[a][b]", 2),
        ("text [a|b|c] more [d]", 2),
    ])
    def test_count_matches_bracket_tokens(self, text, count):
        assert len(parse_blanks(text)) == count

    def test_option_order_is_preserved(self):
        spec = parse_blanks("[b|z|a|m]")[0]
        assert spec.local_options == ("z", "a", "m")

    def test_last_hint_wins(self):
        spec = parse_blanks("[x|hint:first|opt|hint:second]")[0]
        assert spec.hint == "second"
        assert spec.local_options == ("opt",)

    def test_hint_can_come_before_options(self):
        spec = parse_blanks("[x|hint:h|y]")[0]
        assert spec.hint == "h"
        assert spec.local_options == ("y",)

    def test_empty_answer_is_allowed(self):
        spec = parse_blanks("fill []")[0]
        assert spec.answer == ""
        assert spec.local_options == ()

    def test_answer_case_is_kept(self):
        assert parse_blanks("[McDonald]")[0].answer == "McDonald"

    def test_non_greedy_match_stops_at_first_closing_bracket(self):
        specs = parse_blanks("[a]b]")
        assert len(specs) == 1
        assert specs[0].answer == "a"

    def test_blank_does_not_span_lines(self):
        assert parse_blanks("[first\nsecond]") == []

    def test_unicode_is_opaque(self):
        spec = parse_blanks("[Zürich|Genève]")[0]
        assert spec.answer == "Zürich"
        assert spec.local_options == ("Genève",)


class TestSegments:
    """Tests for iter_segments() and helpers."""

    def test_segments_alternate_literal_and_blank(self):
        segments = list(iter_segments("a [b] c"))
        assert segments == [(False, "a "), (True, "[b]"), (False, " c")]

    def test_unmatched_bracket_is_literal(self):
        segments = list(iter_segments("a [b c"))
        assert segments == [(False, "a [b c")]

    def test_contains_blank(self):
        assert contains_blank("x [y] z")
        assert not contains_blank("x [y z")


class TestChoices:
    """Tests for picker choices."""

    def test_choices_merge_dedupe_and_sort(self):
        spec = parse_blanks("[Rome|Turin|Milan|Rome]")[0]
        assert spec.choices(["Venice", "Milan"]) == ["Milan", "Rome", "Turin", "Venice"]

    def test_choices_always_include_answer(self):
        spec = parse_blanks("[Paris]")[0]
        assert spec.choices() == ["Paris"]
