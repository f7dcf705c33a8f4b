"""Tests for kite.syntax: classification, selection and comment cascade."""

from __future__ import annotations

from kite.buffer import Document
from kite.constants import (
    HL_COMMENT,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MATCH,
    HL_MLCOMMENT,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
)
from kite.models import Row, SyntaxDefinition
from kite.syntax import HLDB, highlight_row, is_separator, select_syntax, syntax_to_color

C = HLDB[0]


def classify(text: str, in_comment: bool = False) -> tuple[list[int], bool]:
    row = Row(idx=0, chars=text, render=text)
    open_comment = highlight_row(row, C, in_comment)
    return row.hl, open_comment


def c_doc(*lines: str) -> Document:
    doc = Document("test.c")
    doc.load(lines)
    return doc


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class TestSelectSyntax:
    def test_extension_suffix(self) -> None:
        assert select_syntax("src/main.c") is C
        assert select_syntax("x.hpp") is C

    def test_extension_must_be_suffix(self) -> None:
        assert select_syntax("archive.c.bak") is None

    def test_substring_pattern(self) -> None:
        table = [
            SyntaxDefinition(
                filetype="make",
                filematch=("Makefile",),
                keywords1=(),
                keywords2=(),
                singleline_comment_start="#",
                multiline_comment_start="",
                multiline_comment_end="",
                flags=0,
            )
        ]
        assert select_syntax("build/Makefile.am", table) is table[0]

    def test_no_filename(self) -> None:
        assert select_syntax(None) is None
        assert select_syntax("README") is None


class TestSeparators:
    def test_separator_set(self) -> None:
        for ch in " \t\0,.()+-/*=~%<>[];":
            assert is_separator(ch)
        assert is_separator("")

    def test_identifier_chars_are_not_separators(self) -> None:
        for ch in "a_Z9{}":
            assert not is_separator(ch)

    def test_high_bytes_are_not_separators(self) -> None:
        for ch in "\xa0\x85\x1c\x1f\xc3":
            assert not is_separator(ch)


# ---------------------------------------------------------------------------
# Single row classification
# ---------------------------------------------------------------------------


class TestHighlightRow:
    def test_no_syntax_is_all_normal(self) -> None:
        row = Row(idx=0, chars="int x; // hi", render="int x; // hi")
        assert highlight_row(row, None, True) is False
        assert row.hl == [HL_NORMAL] * row.rsize

    def test_single_line_comment(self) -> None:
        hl, _ = classify("x = 1; // note")
        start = len("x = 1; ")
        assert hl[start:] == [HL_COMMENT] * len("// note")
        assert hl[0] == HL_NORMAL

    def test_comment_prefix_inside_string_is_string(self) -> None:
        hl, _ = classify('"a//b"')
        assert hl == [HL_STRING] * 6

    def test_keyword_classes(self) -> None:
        hl, _ = classify("int return")
        assert hl[:3] == [HL_KEYWORD2] * 3
        assert hl[3] == HL_NORMAL
        assert hl[4:] == [HL_KEYWORD1] * 6

    def test_keyword_needs_trailing_separator(self) -> None:
        hl, _ = classify("integer")
        assert hl == [HL_NORMAL] * 7

    def test_keyword_needs_leading_separator(self) -> None:
        hl, _ = classify("xint")
        assert hl == [HL_NORMAL] * 4

    def test_longest_keyword_wins(self) -> None:
        hl, _ = classify("static_cast(")
        assert hl[: len("static_cast")] == [HL_KEYWORD1] * len("static_cast")

    def test_numbers(self) -> None:
        hl, _ = classify("x = 3.14;")
        assert hl[4:8] == [HL_NUMBER] * 4
        assert hl[8] == HL_NORMAL

    def test_superscript_digits_are_not_numbers(self) -> None:
        hl, _ = classify(" \xb2\xb3\xb9")
        assert hl == [HL_NORMAL] * 4

    def test_keyword_after_utf8_bytes_is_not_highlighted(self) -> None:
        # "\xc3\xa0" is the UTF-8 encoding of an accented letter.
        hl, _ = classify("\xc3\xa0if \xc3\xa01")
        assert hl == [HL_NORMAL] * 8

    def test_keyword_after_ascii_whitespace(self) -> None:
        hl, _ = classify("x\vif")
        assert hl[2:] == [HL_KEYWORD1] * 2

    def test_digit_inside_identifier_is_normal(self) -> None:
        hl, _ = classify("x1")
        assert hl == [HL_NORMAL, HL_NORMAL]

    def test_string_with_escape(self) -> None:
        text = r'"a\"b" x'
        hl, _ = classify(text)
        assert hl[:6] == [HL_STRING] * 6
        assert hl[7] == HL_NORMAL

    def test_single_quoted_string(self) -> None:
        hl, _ = classify("'c'")
        assert hl == [HL_STRING] * 3

    def test_multiline_comment_closed_on_same_row(self) -> None:
        hl, open_comment = classify("/* a */ int")
        assert hl[:7] == [HL_MLCOMMENT] * 7
        assert hl[8:] == [HL_KEYWORD2] * 3
        assert open_comment is False

    def test_multiline_comment_left_open(self) -> None:
        hl, open_comment = classify("x /* a")
        assert hl[2:] == [HL_MLCOMMENT] * 4
        assert open_comment is True

    def test_inherited_comment(self) -> None:
        hl, open_comment = classify("still", in_comment=True)
        assert hl == [HL_MLCOMMENT] * 5
        assert open_comment is True

    def test_empty_row_keeps_comment_open(self) -> None:
        hl, open_comment = classify("", in_comment=True)
        assert hl == []
        assert open_comment is True


# ---------------------------------------------------------------------------
# Cascade across rows
# ---------------------------------------------------------------------------


class TestCascade:
    def test_multirow_comment(self) -> None:
        doc = c_doc("/* start", "still in comment", "end */ code")
        r0, r1, r2 = doc.rows
        assert r0.hl == [HL_MLCOMMENT] * r0.rsize
        assert r1.hl == [HL_MLCOMMENT] * r1.rsize
        assert r2.hl[: len("end */")] == [HL_MLCOMMENT] * len("end */")
        assert all(h != HL_MLCOMMENT for h in r2.hl[len("end */") :])
        assert [r.hl_open_comment for r in doc.rows] == [True, True, False]

    def test_closing_first_row_reclassifies_followers(self) -> None:
        doc = c_doc("/* start", "still in comment", "end */ code")
        row0 = doc.rows[0]
        doc.insert_char(0, row0.size, "*")
        doc.insert_char(0, row0.size, "/")
        assert doc.rows[0].hl_open_comment is False
        assert all(h != HL_MLCOMMENT for h in doc.rows[1].hl)
        assert doc.rows[1].hl_open_comment is False

    def test_opening_comment_propagates_down(self) -> None:
        doc = c_doc("int a;", "int b;", "int c;")
        doc.insert_char(0, 0, "*")
        doc.insert_char(0, 0, "/")
        assert all(r.hl_open_comment for r in doc.rows)
        assert doc.rows[2].hl == [HL_MLCOMMENT] * doc.rows[2].rsize

    def test_inserted_closing_row_stops_comment(self) -> None:
        doc = c_doc("/* open", "int x;")
        doc.insert_row(1, "*/")
        assert doc.rows[1].hl_open_comment is False
        assert doc.rows[2].hl[:3] == [HL_KEYWORD2] * 3

    def test_deleting_opener_row_reclassifies(self) -> None:
        doc = c_doc("/* open", "int x;")
        doc.delete_row(0)
        assert doc.rows[0].hl[:3] == [HL_KEYWORD2] * 3

    def test_selecting_syntax_rehighlights_everything(self) -> None:
        doc = Document()
        doc.load(["/* a", "b */"])
        assert all(h == HL_NORMAL for r in doc.rows for h in r.hl)
        doc.set_filename("x.c")
        assert doc.rows[1].hl == [HL_MLCOMMENT] * 4


class TestColors:
    def test_color_table(self) -> None:
        assert syntax_to_color(HL_COMMENT) == 36
        assert syntax_to_color(HL_MLCOMMENT) == 36
        assert syntax_to_color(HL_KEYWORD1) == 33
        assert syntax_to_color(HL_KEYWORD2) == 32
        assert syntax_to_color(HL_STRING) == 35
        assert syntax_to_color(HL_NUMBER) == 31
        assert syntax_to_color(HL_MATCH) == 34
        assert syntax_to_color(HL_NORMAL) == 37
