from __future__ import annotations

from pathlib import Path

import pytest

from conftest import CULTIVAR_LINE, ECOTYPE_LINE, IB0002_LINE, IN_RANGE_PARAMS, MIN_LINE, crlf
from genetics_editor.codec.fixed_width import (
    format_row,
    parse_file,
    parse_line,
    parse_text,
    render_text,
    write_file,
)
from genetics_editor.models.layout import CULTIVAR_LAYOUT, ECOTYPE_LAYOUT


def test_parse_cultivar_line_fields():
    row = parse_line(CULTIVAR_LINE, CULTIVAR_LAYOUT)
    assert row.identifier == "IB0001"
    assert row.name == "SOME CULTIVAR"
    assert row.codes == {"EXPNO": ".", "ECO#": "IB0001"}
    assert len(row.params) == 18
    assert row.params[0] == pytest.approx(12.33)
    assert row.params[8] == pytest.approx(375.0)
    assert row.params[17] == pytest.approx(0.2)
    assert row.parsed_param_count == 18
    assert not row.is_padded


def test_format_row_gives_back_canonical_cultivar_line():
    assert format_row(parse_line(CULTIVAR_LINE)) == CULTIVAR_LINE


def test_format_row_gives_back_canonical_ecotype_line():
    row = parse_line(ECOTYPE_LINE, ECOTYPE_LAYOUT)
    assert row.identifier == "SB0001"
    assert row.name == "SUBGROUP 000"
    assert row.codes == {"MG": "00", "TM": "1"}
    assert row.params[0] == pytest.approx(0.285)
    assert format_row(row, ECOTYPE_LAYOUT) == ECOTYPE_LINE


def test_parse_text_splits_header_and_rows(cul_lines):
    parsed = parse_text("\r\n".join(cul_lines) + "\r\n", CULTIVAR_LAYOUT)
    assert parsed.header_lines == cul_lines[:12]
    assert [r.identifier for r in parsed.rows] == ["999991", "999992", "IB0001", "IB0002"]
    assert parsed.bounds.present
    assert parsed.bounds.minimum[0] == pytest.approx(8.0)
    assert parsed.bounds.maximum[8] == pytest.approx(450.0)


def test_parsed_file_unpacks_into_header_and_rows(cul_lines):
    header_lines, rows = parse_text("\n".join(cul_lines), CULTIVAR_LAYOUT)
    assert header_lines[0].startswith("*SOYBEAN")
    assert len(rows) == 4


def test_blank_lines_are_kept_as_header_lines():
    parsed = parse_text("*TITLE\r\n\r\n" + CULTIVAR_LINE + "\r\n")
    assert parsed.header_lines == ["*TITLE", ""]
    assert len(parsed.rows) == 1


@pytest.mark.parametrize("blank", ["   ", "\t", " \t "])
def test_whitespace_only_lines_are_kept_as_header_lines(blank: str):
    header = ["*TITLE", blank, "@VAR#"]
    parsed = parse_text(render_text([], header))
    assert parsed.header_lines == header
    assert parsed.rows == []


@pytest.mark.parametrize("sep", ["\r\n", "\n", "\r"])
def test_line_terminators(sep):
    text = sep.join(["*TITLE", "@VAR#", CULTIVAR_LINE, MIN_LINE]) + sep
    parsed = parse_text(text)
    assert parsed.header_lines == ["*TITLE", "@VAR#"]
    assert len(parsed.rows) == 2


def test_malformed_lines_are_skipped():
    short = "IB0003 SHORT"
    one_token = "IB0002 LONELY" + " " * 17 + "ABCDEF"
    assert len(one_token) == CULTIVAR_LAYOUT.min_length
    parsed = parse_text("\n".join([short, one_token, CULTIVAR_LINE]))
    assert [r.identifier for r in parsed.rows] == ["IB0001"]
    assert parsed.header_lines == []


def test_missing_parameters_are_zero_padded():
    line = "IB0004 PARTIAL" + " " * 14 + "." + " DFAULT " + "12.33 0.320  21.0"
    row = parse_line(line)
    assert row.params[:3] == pytest.approx([12.33, 0.32, 21.0])
    assert row.params[3:] == [0.0] * 15
    assert row.parsed_param_count == 3
    assert row.is_padded


def test_non_numeric_parameter_reads_as_zero():
    line = CULTIVAR_LINE.replace("12.33", "abcde", 1)
    row = parse_line(line)
    assert row.params[0] == 0.0
    assert row.params[1] == pytest.approx(0.32)


def test_extra_tokens_are_ignored():
    row = parse_line(CULTIVAR_LINE + "  9.99  8.88")
    assert len(row.params) == 18
    assert row.params[17] == pytest.approx(0.2)


def test_latin1_name_with_nel_byte_stays_on_one_line():
    name = "CAF\xc9\x85NOIR"
    line = "IB0005 " + name.ljust(13) + " " * 8 + "." + " DFAULT " + IN_RANGE_PARAMS
    parsed = parse_text(line + "\r\n")
    assert len(parsed.rows) == 1
    assert parsed.rows[0].name == name


@pytest.mark.parametrize("text", ["", "   ", "@VAR#  VRNAME", "! comment", "*TITLE", "IB0001 X"])
def test_parse_line_unusable_text_gives_empty_identifier(text):
    row = parse_line(text)
    assert row.identifier == ""
    assert len(row.params) == CULTIVAR_LAYOUT.param_count


def test_parse_line_strips_surrounding_whitespace():
    row = parse_line("   " + IB0002_LINE + "\r\n")
    assert row.identifier == "IB0002"
    assert row.codes["ECO#"] == "SB9999"


def test_parse_file_reads_latin1(tmp_path: Path, cul_lines):
    lines = list(cul_lines)
    lines[0] = "*SOYBEAN CULTIVAR COEFFICIENTS: S\xe3O PAULO"
    path = tmp_path / "SBGRO048.CUL"
    path.write_bytes(crlf(lines))
    parsed = parse_file(path)
    assert parsed.layout is CULTIVAR_LAYOUT
    assert parsed.header_lines[0].endswith("S\xe3O PAULO")
    assert len(parsed.rows) == 4


def test_parse_file_missing_gives_empty_result(tmp_path: Path):
    parsed = parse_file(tmp_path / "MISSING.ECO")
    assert parsed.layout is ECOTYPE_LAYOUT
    assert parsed.header_lines == []
    assert parsed.rows == []
    assert not parsed.bounds.present


@pytest.mark.parametrize("name", ["X.txt", "SBGRO048.CUL.new", "NOSUFFIX"])
def test_parse_file_unknown_suffix_gives_empty_result(tmp_path: Path, name: str):
    path = tmp_path / name
    path.write_bytes(crlf(["*TITLE", CULTIVAR_LINE]))
    parsed = parse_file(path)
    assert parsed.header_lines == []
    assert parsed.rows == []


def test_render_text_uses_crlf():
    row = parse_line(CULTIVAR_LINE)
    text = render_text([row], ["*TITLE", "@VAR#"])
    assert text == "*TITLE\r\n@VAR#\r\n" + CULTIVAR_LINE + "\r\n"


def test_write_file_then_parse_file(tmp_path: Path, cul_lines):
    src = parse_text("\n".join(cul_lines))
    path = tmp_path / "OUT.CUL"
    assert write_file(path, src.rows, src.header_lines) is True
    raw = path.read_bytes()
    assert raw.endswith(b"\r\n")
    assert b"\n" not in raw.replace(b"\r\n", b"")
    again = parse_file(path)
    assert again.header_lines == src.header_lines
    assert again.rows == src.rows


def test_write_file_unwritable_destination(tmp_path: Path):
    row = parse_line(CULTIVAR_LINE)
    assert write_file(tmp_path / "no_such_dir" / "X.CUL", [row], []) is False


def test_write_file_unknown_suffix_uses_row_layout(tmp_path: Path):
    row = parse_line(ECOTYPE_LINE, ECOTYPE_LAYOUT)
    path = tmp_path / "SBGRO048.ECO.new"
    assert write_file(path, [row], ["*TITLE"]) is True
    assert path.read_bytes() == crlf(["*TITLE", format_row(row, ECOTYPE_LAYOUT)])


def test_write_file_unknown_suffix_without_rows(tmp_path: Path):
    path = tmp_path / "X.txt"
    assert write_file(path, [], ["*TITLE"]) is False
    assert not path.exists()
