"""Tests for header-resolved CSV table parsing."""

import pytest

from pcba_export.cam.archive import DocumentKind
from pcba_export.cam.csv_table import ColumnSpec, parse_table, split_line, split_lines
from pcba_export.exceptions import (
    DocumentDecodeError,
    MalformedRowError,
    MissingRequiredColumnError,
)


class TestSplitLines:
    """Tests for split_lines."""

    def test_newline_styles(self):
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_other_separators_are_content(self):
        """Unicode line breaks and control characters stay inside the line."""
        text = "x y;\x0bz\x0c\x1c\x85 \nnext"
        assert split_lines(text) == ["x y;\x0bz\x0c\x1c\x85 ", "next"]


class TestSplitLine:
    """Tests for split_line."""

    def test_strips_quotes(self):
        assert split_line('"C1,C2";"100n";"C0402"') == ["C1,C2", "100n", "C0402"]

    def test_unquoted_fields(self):
        assert split_line("a;b;;d") == ["a", "b", "", "d"]

    def test_trailing_separator_adds_empty_field(self):
        assert split_line('"a";"b";') == ["a", "b", ""]


class TestColumnSpec:
    """Tests for ColumnSpec.resolve."""

    def test_resolves_by_header_name(self):
        spec = ColumnSpec("part_number", headers=("LCSC",))
        assert spec.resolve(["Qty", "Value", "LCSC"]) == 2

    def test_first_matching_alias_wins(self):
        spec = ColumnSpec("designator", headers=("Designator", "Part"))
        assert spec.resolve(["Part", "Designator"]) == 1

    def test_falls_back_to_position(self):
        spec = ColumnSpec("value", headers=("Value",), position=1)
        assert spec.resolve(["Qty", "Val", "Device"]) == 1

    def test_header_match_is_case_sensitive(self):
        spec = ColumnSpec("part_number", headers=("LCSC",))
        assert spec.resolve(["lcsc"]) is None

    def test_unresolved(self):
        assert ColumnSpec("x", headers=("X",)).resolve(["A", "B"]) is None


class TestParseTable:
    """Tests for parse_table."""

    COLUMNS = [
        ColumnSpec("part_number", headers=("LCSC",)),
        ColumnSpec("value", headers=("Value",), position=1),
    ]

    def test_resolves_columns_from_header(self, make_document, eagle_bom_csv):
        table = parse_table(make_document(eagle_bom_csv), self.COLUMNS)

        assert table.document == "BOM"
        assert table.header[0] == "Qty"
        assert table.columns == {"part_number": 6, "value": 1}

    def test_rows_carry_physical_line_numbers(self, make_document, eagle_bom_csv):
        table = parse_table(make_document(eagle_bom_csv), self.COLUMNS)

        rows = list(table.rows())

        assert [r.line_number for r in rows] == [2, 3, 4, 5]
        assert table.get(rows[0], "value") == "100n"
        assert table.get(rows[3], "part_number") == ""

    def test_blank_lines_skipped(self, make_document):
        text = '"Qty";"Value";"LCSC"\n\n"1";"10k";"C1"\n   \n"2";"1u";"C2"\n\n'
        table = parse_table(make_document(text), self.COLUMNS)

        rows = list(table.rows())

        assert table.header == ["Qty", "Value", "LCSC"]
        assert [r.line_number for r in rows] == [3, 5]
        assert [table.get(r, "part_number") for r in rows] == ["C1", "C2"]

    def test_first_line_is_header_even_when_blank(self, make_document):
        """A leading blank line is the header, so named columns are missing."""
        text = '\n"Qty";"Value";"LCSC"\n"1";"10k";"C1"\n'

        with pytest.raises(MissingRequiredColumnError) as exc_info:
            parse_table(make_document(text), self.COLUMNS)

        assert exc_info.value.column == "LCSC"

    def test_unicode_line_separator_inside_field(self, make_document, eagle_bom_csv):
        """U+2028 in an unread column does not split the row."""
        text = eagle_bom_csv.replace('"RESISTOR"', '"Res\u2028istor"')
        columns = self.COLUMNS + [ColumnSpec("description", headers=("Description",))]
        table = parse_table(make_document(text), columns)

        rows = list(table.rows())

        assert [r.line_number for r in rows] == [2, 3, 4, 5]
        assert table.get(rows[1], "part_number") == "C25744"
        assert table.get(rows[1], "description") == "Res\u2028istor"

    def test_crlf_line_endings(self, make_document):
        text = '"Qty";"Value";"LCSC"\r\n"1";"10k";"C1"\r\n'
        table = parse_table(make_document(text), self.COLUMNS)

        rows = list(table.rows())

        assert table.get(rows[0], "part_number") == "C1"

    def test_byte_order_mark_ignored(self, make_document):
        data = "\ufeff" + '"LCSC";"Value"\n"C1";"10k"\n'
        table = parse_table(make_document(data.encode("utf-8")), self.COLUMNS)

        assert table.columns["part_number"] == 0

    def test_missing_required_column(self, make_document):
        text = '"Qty";"Value";"Device"\n"1";"10k";"R"\n'

        with pytest.raises(MissingRequiredColumnError) as exc_info:
            parse_table(make_document(text), self.COLUMNS)

        assert exc_info.value.column == "LCSC"
        assert exc_info.value.document == "BOM"

    def test_optional_column_omitted(self, make_document):
        columns = [ColumnSpec("note", headers=("Note",), required=False)]
        table = parse_table(make_document('"A";"B"\n"1";"2"\n'), columns)
        row = next(table.rows())

        assert not table.has_column("note")
        with pytest.raises(KeyError):
            table.get(row, "note")

    def test_empty_document_has_no_columns(self, make_document):
        with pytest.raises(MissingRequiredColumnError):
            parse_table(make_document(""), self.COLUMNS)

    def test_header_only(self, make_document):
        table = parse_table(make_document('"Qty";"Value";"LCSC"\n'), self.COLUMNS)
        assert list(table.rows()) == []

    def test_short_row_raises_with_line_number(self, make_document):
        text = '"Qty";"Value";"LCSC"\n"1";"10k";"C1"\n"1"\n'
        table = parse_table(make_document(text), self.COLUMNS)
        rows = list(table.rows())

        assert table.get(rows[0], "value") == "10k"
        with pytest.raises(MalformedRowError) as exc_info:
            table.get(rows[1], "value")

        assert exc_info.value.line_number == 3
        assert exc_info.value.document == "BOM"
        assert "found 1" in exc_info.value.reason

    def test_invalid_utf8(self, make_document):
        document = make_document(b'"LCSC"\n"\xff\xfe"\n', kind=DocumentKind.PNP_FRONT)

        with pytest.raises(DocumentDecodeError) as exc_info:
            parse_table(document, self.COLUMNS)

        assert exc_info.value.document == "PnP-Front"
