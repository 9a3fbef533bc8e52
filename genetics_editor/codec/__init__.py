"""Fixed-width codec and header metadata extraction for genetics files."""

from .fixed_width import (
    ParsedFile,
    format_param,
    format_row,
    parse_file,
    parse_line,
    parse_text,
    render_text,
    write_file,
)
from .header import CALIBRATION_LABELS, calibration_types, describe_parameter, tooltips_from_header

__all__ = [
    "ParsedFile",
    "parse_text",
    "parse_file",
    "parse_line",
    "format_param",
    "format_row",
    "render_text",
    "write_file",
    "CALIBRATION_LABELS",
    "tooltips_from_header",
    "calibration_types",
    "describe_parameter",
]
