import pytest
from fillblank.services.schemas import BlankSegment, TextSegment
from fillblank.services.template_parser import blank_ids, blank_positions, count_blanks, fill_preview, parse

@pytest.mark.parametrize("text", [
    "", "hello", "{BLANK_1}", "The capital of France is {BLANK_1}.",
    "{BLANK_1} and {BLANK_2} and {BLANK_1}", "{BLANK_x} {BLANK_} {BLANK_1 {{BLANK_2}} }",
    "unbalanced {BLANK_3", "BLANK_4}", "{BLANK_007}!", "tabs\t{BLANK_9}\n  trailing  ",
])
def test_segments_reproduce_raw_text(text):
    t = parse(text)
    assert "".join(s.text for s in t.segments) == text
    assert t.render() == text
    assert t.raw_text == text

def test_empty_and_plain_text():
    assert parse("").segments == ()
    assert parse(None).segments == ()
    assert parse("hello").segments == (TextSegment("hello"),)

def test_text_blank_text_order():
    t = parse("The capital of France is {BLANK_1}.")
    assert t.segments == (TextSegment("The capital of France is "), BlankSegment(1, "{BLANK_1}"), TextSegment("."))

def test_no_empty_text_segments_between_adjacent_blanks():
    t = parse("{BLANK_3}{BLANK_3}")
    assert t.segments == (BlankSegment(3, "{BLANK_3}"), BlankSegment(3, "{BLANK_3}"))
    assert t.blank_ids == (3,)
    assert t.blank_count == 1

def test_blank_ids_sorted_distinct():
    assert blank_ids("{BLANK_5} x {BLANK_2} y {BLANK_5} {BLANK_10}") == (2, 5, 10)
    assert blank_ids(parse("none")) == ()

def test_malformed_tokens_stay_literal():
    t = parse("{BLANK_x} {BLANK_} {blank_1} {BLANK_-1} {BLANK_1")
    assert all(isinstance(s, TextSegment) for s in t.segments)
    assert t.blank_ids == ()

def test_leading_zeros_keep_raw_token():
    t = parse("{BLANK_007}")
    assert t.segments == (BlankSegment(7, "{BLANK_007}"),)

def test_non_ascii_digits_are_not_ids():
    assert parse("{BLANK_٣}").blank_ids == ()

def test_nested_brace_matches_inner_token():
    t = parse("{{BLANK_2}}")
    assert t.segments == (TextSegment("{"), BlankSegment(2, "{BLANK_2}"), TextSegment("}"))

def test_count_blanks_counts_occurrences():
    assert count_blanks("{BLANK_1} {BLANK_1} {BLANK_2}") == 3
    assert count_blanks("") == 0

def test_blank_positions():
    pos = blank_positions("ab{BLANK_1}c{BLANK_12}")
    assert [(p.blank_id, p.start_index, p.end_index, p.placeholder) for p in pos] == [
        (1, 2, 11, "{BLANK_1}"), (12, 12, 22, "{BLANK_12}")]

def test_fill_preview_replaces_every_occurrence():
    assert fill_preview("{BLANK_1} + {BLANK_1} = {BLANK_2}", {1: "2"}) == "2 + 2 = ___"
    assert fill_preview("x {BLANK_1}", {1: ""}, missing="?") == "x ?"
    assert fill_preview("no blanks", {}) == "no blanks"

def test_overlong_digit_run_stays_text():
    raw = "Q {BLANK_" + "1" * 5000 + "} end {BLANK_2}"
    t = parse(raw)
    assert t.render() == raw
    assert t.blank_ids == (2,)
    assert count_blanks(raw) == 1
    assert [p.blank_id for p in blank_positions(raw)] == [2]
    assert fill_preview(raw, {2: "x"}).endswith("end x")

def test_id_digit_limit():
    longest = "9" * 18
    assert parse("{BLANK_%s}" % longest).blank_ids == (int(longest),)
    assert parse("{BLANK_%s}" % ("9" * 19)).blank_ids == ()
