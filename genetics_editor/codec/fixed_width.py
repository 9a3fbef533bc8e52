from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..models.bounds import SentinelBounds
from ..models.layout import (
    CULTIVAR_LAYOUT,
    PARAM_WIDTH,
    RowLayout,
    UnknownFileKindError,
    layout_for_path,
)
from ..models.row import NO_CODE, GeneticsRow

"""Fixed-width codec for cultivar (.CUL) and ecotype (.ECO) files.

Line classification (first character):
- blank or whitespace only, '*' (section title), '!' (comment),
  '@' (column labels) -> header line
- anything else -> data row, parsed with the RowLayout table

Header lines are kept verbatim and in order; rows are kept in file order.
Files are single-byte (Latin-1) text and are always written with CRLF.

Malformed data lines (too short, too few tokens) are skipped and a
non-numeric parameter token reads as 0.0. Neither is reported per line; only
the resulting row count is observable.
"""

__all__ = [
    "ParsedFile",
    "ENCODING",
    "LINE_TERMINATOR",
    "HEADER_MARKERS",
    "OVERFLOW",
    "parse_text",
    "parse_file",
    "parse_line",
    "format_param",
    "format_row",
    "render_text",
    "write_file",
]

logger = logging.getLogger(__name__)

ENCODING = "latin-1"
LINE_TERMINATOR = "\r\n"
HEADER_MARKERS = ("*", "!", "@")
OVERFLOW = "*" * PARAM_WIDTH  # Fortran prints asterisks when a value does not fit

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class ParsedFile:
    """Header lines and data rows of one genetics file.

    Unpacks as ``header_lines, rows = parse_file(path)``.
    """
    header_lines: list[str] = field(default_factory=list)
    rows: list[GeneticsRow] = field(default_factory=list)
    layout: RowLayout = CULTIVAR_LAYOUT
    bounds: SentinelBounds = field(default_factory=SentinelBounds)

    def __iter__(self) -> Iterator[list]:
        yield self.header_lines
        yield self.rows


def _split_lines(text: str) -> list[str]:
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()  # terminator of the last line, not an extra blank line
    return lines


def _is_header(line: str) -> bool:
    return not line.strip() or line.startswith(HEADER_MARKERS)


def _to_float(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        return 0.0


def _parse_data_line(line: str, layout: RowLayout) -> GeneticsRow | None:
    """Shared data-row path for whole files and pasted lines. None = malformed."""
    if len(line) < layout.min_length:
        return None

    id_field, name_field = layout.column_fields[:2]
    tokens = line[layout.token_offset:].split()
    token_fields = layout.token_fields
    if len(tokens) < max(2, len(token_fields)):
        return None

    codes = {f.name: tok for f, tok in zip(token_fields, tokens)}
    raw = tokens[len(token_fields): len(token_fields) + layout.param_count]
    params = [_to_float(t) for t in raw]
    params.extend([0.0] * (layout.param_count - len(params)))

    return GeneticsRow(
        identifier=line[id_field.offset: id_field.offset + id_field.width].strip(),
        name=line[name_field.offset: name_field.offset + name_field.width].strip(),
        codes=codes,
        params=params,
        kind=layout.kind,
        parsed_param_count=len(raw),
    )


def parse_text(text: str, layout: RowLayout = CULTIVAR_LAYOUT) -> ParsedFile:
    """Split raw file text into header lines and data rows."""
    header_lines: list[str] = []
    rows: list[GeneticsRow] = []
    for lineno, line in enumerate(_split_lines(text), start=1):
        if _is_header(line):
            header_lines.append(line)
            continue
        row = _parse_data_line(line, layout)
        if row is None:
            logger.debug(f"skipped malformed {layout.kind} line {lineno}: {line!r}")
            continue
        rows.append(row)
    return ParsedFile(
        header_lines=header_lines,
        rows=rows,
        layout=layout,
        bounds=SentinelBounds.from_rows(rows),
    )


def parse_file(path: Path | str, layout: RowLayout | None = None) -> ParsedFile:
    """Read and parse a genetics file.

    The layout defaults from the suffix. An unreadable file, or one whose
    suffix names no known layout, gives an empty ParsedFile; the failure is
    logged and never raised.
    """
    path = Path(path)
    if layout is None:
        try:
            layout = layout_for_path(path)
        except UnknownFileKindError as e:
            logger.warning(f"cannot parse {path}: {e}")
            return ParsedFile()
    try:
        text = path.read_bytes().decode(ENCODING)
    except OSError as e:
        logger.warning(f"cannot read {path}: {e}")
        return ParsedFile(layout=layout)
    parsed = parse_text(text, layout)
    logger.debug(
        f"parsed {path.name}: header_lines={len(parsed.header_lines)} rows={len(parsed.rows)}"
    )
    return parsed


def parse_line(text: str, layout: RowLayout = CULTIVAR_LAYOUT) -> GeneticsRow:
    """Parse one pasted data line (e.g. a GLUE calibration result).

    Returns a row whose identifier is empty when the line cannot be used.
    """
    line = text.strip()
    row = None
    if line and not line.startswith(HEADER_MARKERS):
        row = _parse_data_line(line, layout)
    if row is None:
        return GeneticsRow.blank(layout)
    return row


def _round_half_away(value: float) -> int:
    rounded = int(math.floor(abs(value) + 0.5))
    return -rounded if value < 0 else rounded


def _fixed(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"  # exact binary ties round half to even
    if float(text) == 0.0:
        text = f"{0.0:.{decimals}f}"  # no "-0.00"
    return text


def _drop_leading_zero(text: str) -> str:
    if text.startswith("0."):
        return text[1:]
    if text.startswith("-0."):
        return "-" + text[2:]
    return text


def format_param(value: float, index: int, layout: RowLayout = CULTIVAR_LAYOUT) -> str:
    """Render parameter ``index`` right-justified in exactly 5 columns.

    When the configured precision does not fit, the leading zero of a
    fraction is dropped first (-0.129 -> "-.129"), then decimals are given
    up one at a time. Values that still do not fit come out as "*****".
    """
    if not 0 <= index < layout.param_count:
        raise ValueError(f"{layout.kind} parameter index out of range: {index}")
    fmt = layout.params[index]

    if not math.isfinite(value):
        return str(value).rjust(PARAM_WIDTH)

    if fmt.trailing_dot:
        text = f"{_round_half_away(value)}."
        return text.rjust(PARAM_WIDTH) if len(text) <= PARAM_WIDTH else OVERFLOW

    for decimals in range(fmt.decimals, -1, -1):
        text = _fixed(value, decimals)
        if len(text) > PARAM_WIDTH:
            text = _drop_leading_zero(text)
        if len(text) <= PARAM_WIDTH:
            return text.rjust(PARAM_WIDTH)
    return OVERFLOW


def _text_value(row: GeneticsRow, index: int, name: str, source: str) -> str:
    if index == 0:
        return row.identifier
    if index == 1:
        return row.name
    value = row.codes.get(name, "")
    if source == "token" and not value:
        return NO_CODE  # keeps the token order intact on re-read
    return value


def format_row(row: GeneticsRow, layout: RowLayout | None = None) -> str:
    """Render a row as one fixed-width line (no terminator)."""
    if layout is None:
        layout = row.layout
    line = ""
    for i, f in enumerate(layout.text_fields):
        line = line.ljust(f.offset) + f.render(_text_value(row, i, f.name, f.source))

    params = list(row.params[: layout.param_count])
    params.extend([0.0] * (layout.param_count - len(params)))
    line = line.ljust(layout.param_offset)
    return line + " ".join(format_param(v, i, layout) for i, v in enumerate(params))


def render_text(
    rows: Iterable[GeneticsRow],
    header_lines: Iterable[str],
    layout: RowLayout = CULTIVAR_LAYOUT,
) -> str:
    """Header lines first, then rows; every line ends with CRLF."""
    out = [line + LINE_TERMINATOR for line in header_lines]
    out.extend(format_row(row, layout) + LINE_TERMINATOR for row in rows)
    return "".join(out)


def write_file(
    path: Path | str,
    rows: Iterable[GeneticsRow],
    header_lines: Iterable[str],
    layout: RowLayout | None = None,
) -> bool:
    """Write a genetics file. Returns False when the destination cannot be written.

    Without ``layout`` the suffix decides; for any other suffix the first
    row's layout is used, and with no rows nothing is written.
    Nothing is rolled back on failure; taking a backup first is the caller's job.
    """
    path = Path(path)
    rows = list(rows)
    if layout is None:
        try:
            layout = layout_for_path(path)
        except UnknownFileKindError as e:
            if not rows:
                logger.warning(f"cannot write {path}: {e}")
                return False
            layout = rows[0].layout
    text = render_text(rows, header_lines, layout)
    try:
        path.write_bytes(text.encode(ENCODING, errors="replace"))
    except OSError as e:
        logger.warning(f"cannot write {path}: {e}")
        return False
    return True
