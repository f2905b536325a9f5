from __future__ import annotations

import pytest

from indent_alignment.config import LintConfig
from indent_alignment.indentation import extract_marker, leading_spaces, marker_width, realign_fix
from indent_alignment.list_indent import (
    check_list_indent,
    flatten_lists,
    list_events,
    sub_list_indentation,
)
from indent_alignment.models import FixEdit, ListItem, NestingFrame
from indent_alignment.parser import parse_markdown


def _check(markdown: str, config: LintConfig | None = None):
    diagnostics = []
    check_list_indent(parse_markdown(markdown), config or LintConfig(), diagnostics.append)
    return diagnostics


def _summary(diagnostics):
    return [(diagnostic.line, diagnostic.expected, diagnostic.actual) for diagnostic in diagnostics]


@pytest.mark.parametrize(
    ("raw_line", "ordered", "expected"),
    [
        ("* item", False, 2),
        ("-   item", False, 4),
        ("9. item", True, 3),
        ("10. item", True, 4),
        ("10.  item", True, 5),
        ("1) item", True, 3),
        ("   1. item", True, 3),
        ("> 1. item", True, 3),
        ("1.", True, 2),
        ("plain text", True, 0),
        ("* item", True, 0),
    ],
)
def test_marker_width(raw_line: str, ordered: bool, expected: int):
    assert marker_width(raw_line, ordered) == expected


def test_marker_width_from_start_column():
    assert marker_width("1. * item", ordered=False, start=3) == 2
    assert extract_marker("1. 10. item", ordered=True, start=3) == "10. "


def test_leading_spaces():
    assert leading_spaces("   * item") == 3
    assert leading_spaces(">   1. item", 1) == 3
    assert leading_spaces("\t* item") == 1
    assert leading_spaces("") == 0


def test_realign_fix_replaces_whitespace_before_node():
    assert realign_fix("   wrapped", 4, 2) == FixEdit(1, 3, "  ")
    assert realign_fix(">  more", 4, 2) == FixEdit(2, 2, " ")
    assert realign_fix("lazy", 1, 2) == FixEdit(1, 0, "  ")


def test_realign_fix_falls_back_to_leading_whitespace():
    assert realign_fix("  >x", 4, 1) == FixEdit(1, 2, "")
    assert realign_fix(">x", 2, 0) is None


def test_sub_list_indentation_differs_by_marker_width():
    def frame(marker_text: str) -> NestingFrame:
        item = ListItem(1, f"{marker_text}a", marker_text, True, 0)
        return NestingFrame(ordered=True, parents_all_unordered=True, inherited_sub_indent=0, items=(item,))

    nine = sub_list_indentation((frame("9. "),), 2)
    ten = sub_list_indentation((frame("10. "),), 2)

    assert (nine, ten) == (3, 4)


def test_sub_list_indentation_uses_ul_indent_for_unordered_frames():
    bullet = ListItem(1, "* a", "* ", False, 0)
    empty = NestingFrame(ordered=False, parents_all_unordered=True, inherited_sub_indent=0)
    filled = NestingFrame(ordered=False, parents_all_unordered=True, inherited_sub_indent=0, items=(bullet,))

    assert sub_list_indentation((filled,), 4) == 4
    assert sub_list_indentation((empty,), 4) == 0


def test_list_events_in_document_order():
    events = list(list_events(parse_markdown("1. a\n\n> * b\n").nodes))

    assert [kind for kind, _ in events] == [
        "list_open",
        "item_open",
        "inline",
        "list_close",
        "scope_open",
        "list_open",
        "item_open",
        "inline",
        "list_close",
        "scope_close",
    ]


def test_flatten_lists_records_outer_lists_first():
    result = parse_markdown("1. a\n   * b\n     1. c\n")

    frames = flatten_lists(list(list_events(result.nodes)), result.lines, LintConfig())

    assert [(frame.ordered, frame.inherited_sub_indent) for frame in frames] == [
        (True, 0),
        (False, 3),
        (True, 5),
    ]
    assert [frame.parents_all_unordered for frame in frames] == [True, False, False]


def test_flatten_lists_marks_absorbed_markers_as_synthetic():
    result = parse_markdown("1. a\n   2. b\n")

    frames = flatten_lists(list(list_events(result.nodes)), result.lines, LintConfig())

    assert len(frames) == 2
    synthetic = frames[1]
    assert synthetic.items[0].synthetic is True
    assert synthetic.items[0].marker_text == "2. "
    assert synthetic.inherited_sub_indent == 3


def test_well_indented_lists_pass():
    markdown = "1. one\n2. two\n   * sub\n     1. deep\n10. ten\n    1. sub\n"

    assert _check(markdown) == []


def test_unordered_lists_under_unordered_lists_are_skipped():
    assert _check("* a\n     * b\n") == []


def test_nested_list_under_ordered_item():
    diagnostics = _check("1. a\n    * b\n")

    assert _summary(diagnostics) == [(2, 3, 4)]
    diagnostic = diagnostics[0]
    assert diagnostic.rule == "ol-indent"
    assert diagnostic.fix == FixEdit(1, 4, "   ")
    assert diagnostic.fix_range == (1, 5)
    assert diagnostic.context == "    * b"


def test_top_level_ordered_list_should_start_at_column_zero():
    assert _summary(_check("   1. a\n")) == [(1, 0, 3)]


def test_start_indented_uses_start_indent_then_indent():
    assert _check("  1. a\n", LintConfig(start_indented=True, start_indent=2)) == []

    diagnostics = _check("1. a\n", LintConfig(start_indented=True, indent=4))
    assert _summary(diagnostics) == [(1, 4, 0)]
    assert diagnostics[0].fix == FixEdit(1, 0, "    ")


def test_start_indented_adds_to_nested_lists():
    config = LintConfig(start_indented=True, start_indent=2)

    assert _check("  1. a\n     1. b\n", config) == []


def test_absorbed_sub_item_is_checked():
    diagnostics = _check("1. a\n    2. b\n")

    assert _summary(diagnostics) == [(2, 3, 4)]
    assert diagnostics[0].fix == FixEdit(1, 4, "   ")


def test_absorbed_item_under_bullet_aligns_with_bullet_content():
    assert _check("* a\n  2. b\n") == []
    assert _summary(_check("* a\n   2. b\n")) == [(2, 2, 3)]
    assert _summary(_check("* a\n    2. b\n", LintConfig(ul_indent=4))) == [(2, 2, 4)]
    assert _check("*   a\n    2. b\n") == []


def test_absorbed_item_in_block_quote_is_measured_from_the_prefix():
    assert _summary(_check("> 1. a\n>     2. b\n")) == [(2, 3, 4)]


def test_lazy_line_in_block_quote_is_not_treated_as_a_list_item():
    assert _check("> 1. qo\n       1. c\n") == []
    assert _check("> * a\n     3. b\n") == []


def test_width_sensitivity_between_nine_and_ten():
    assert _check("9. a\n   1. b\n") == []
    assert _check("10. a\n    1. b\n") == []
    assert _summary(_check("10. a\n   1. b\n")) == [(2, 0, 3)]


def test_lists_in_block_quotes_indent_from_the_quote():
    assert _check("> 1. a\n>    * b\n") == []
    assert _summary(_check(">  1. a\n")) == [(1, 0, 1)]


def test_lists_in_footnotes_indent_from_the_footnote():
    assert _check("[^1]: note\n\n    1. item\n") == []


def test_list_opening_a_footnote_line():
    assert _check("[^1]: 1. item\n") == []
