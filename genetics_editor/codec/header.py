from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.layout import CULTIVAR_LAYOUT, RowLayout

"""Documentation mined from the header comment block of a genetics file.

Two things live in the '!' comments above the '@' column-label line:

    ! COEFF   DEFINITIONS
    ! CSDL    Critical short day length below which reproductive
    !         development progresses with no daylength effect (hours)
    ...
    !Calibration   P   P   N   ...

tooltips_from_header() turns the definitions block into name -> description,
calibration_types() binds the calibration tags to parameter names by
position. Both are heuristics over free text, not a grammar: indentation is
the only thing telling an entry from a continuation line.
"""

__all__ = [
    "CALIBRATION_LABELS",
    "tooltips_from_header",
    "calibration_types",
    "describe_parameter",
]

CALIBRATION_LABELS = {
    "P": "Phenology",
    "G": "Growth",
    "N": "Not used",
}

# "! KEYWORD  description": 1-5 blanks after the marker, then an all-caps keyword
_ENTRY_RE = re.compile(r"^![ \t]{1,5}([A-Z][A-Z0-9#/\-]*)[ \t]+(\S.*)$")
# "!        more text": 6+ blanks, aligned with the description column
_CONTINUATION_RE = re.compile(r"^![ \t]{6,}(\S.*)$")
_CALIBRATION_RE = re.compile(r"^!\s*calibration\b", re.IGNORECASE)

# Scanner states
_OUTSIDE = "outside"  # before the COEFF ... DEFINITIONS line
_IN_BLOCK = "in_block"  # inside the block, no entry accepting continuations
_ENTRY_OPEN = "entry_open"  # last entry still accepts continuation lines


def _opens_block(line: str) -> bool:
    upper = line.upper()
    return "COEFF" in upper and "DEFINITIONS" in upper


def tooltips_from_header(header_lines: Iterable[str]) -> dict[str, str]:
    """Parameter/column name -> description from the COEFF DEFINITIONS block.

    Works for both .CUL and .ECO headers. Scanning ends at the first '@'
    line whether or not the block was found.
    """
    tips: dict[str, str] = {}
    state = _OUTSIDE
    key = ""

    for line in header_lines:
        if line.startswith("@"):
            break

        if state == _OUTSIDE:
            if _opens_block(line):
                state = _IN_BLOCK
            continue

        m = _ENTRY_RE.match(line)
        if m:
            key = m.group(1)
            tips[key] = m.group(2).strip()
            state = _ENTRY_OPEN
            continue

        if state == _ENTRY_OPEN:
            mc = _CONTINUATION_RE.match(line)
            if mc:
                tips[key] = f"{tips[key]} {mc.group(1).strip()}"
            else:
                # blank or separator line ends the entry, text so far is kept
                state = _IN_BLOCK

    return tips


def calibration_types(
    header_lines: Iterable[str], layout: RowLayout = CULTIVAR_LAYOUT
) -> dict[str, str]:
    """Parameter name -> calibration tag (P / G / N) from the first "!Calibration" line."""
    types: dict[str, str] = {}
    for line in header_lines:
        m = _CALIBRATION_RE.match(line)
        if not m:
            continue
        tokens = line[m.end():].split()
        for name, tag in zip(layout.param_names, tokens):
            types[name] = tag.upper()
        break
    return types


def describe_parameter(
    name: str, tooltips: dict[str, str], calibration: dict[str, str] | None = None
) -> str:
    """Help text for one column: description (or the bare name) plus calibration label."""
    text = tooltips.get(name, name)
    tag = (calibration or {}).get(name)
    if tag in CALIBRATION_LABELS:
        text += f"\n\nCalibration: {CALIBRATION_LABELS[tag]}"
    return text
