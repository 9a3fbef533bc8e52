from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

"""Column layout tables for the cultivar (.CUL) and ecotype (.ECO) files.

The genetics files have no declared schema: every field lives at a fixed
column range and every parameter has its own Fortran-style precision. Both
the parser and the formatter read these tables, so a change to a width or a
decimal count applies to both directions at once.

Text fields come in two flavours:
- "column": sliced from [offset, offset + width) and stripped
- "token":  taken in order from the whitespace tokens after token_offset;
            offset/width only matter when the row is written back
"""

__all__ = [
    "TextField",
    "ParamFormat",
    "RowLayout",
    "UnknownFileKindError",
    "CULTIVAR_LAYOUT",
    "ECOTYPE_LAYOUT",
    "PARAM_WIDTH",
    "layout_for_path",
]

PARAM_WIDTH = 5


class UnknownFileKindError(ValueError):
    """Raised when a path does not look like a .CUL or .ECO file."""


@dataclass(frozen=True)
class TextField:
    name: str  # column label as printed on the @ line
    offset: int  # first column (0-based)
    width: int
    align: str = "left"  # left | right
    source: str = "column"  # column | token

    def render(self, value: str) -> str:
        text = value[: self.width]
        if self.align == "right":
            return text.rjust(self.width)
        return text.ljust(self.width)


@dataclass(frozen=True)
class ParamFormat:
    name: str
    decimals: int
    trailing_dot: bool = False  # "380." style, used by SLAVR only


@dataclass(frozen=True)
class RowLayout:
    """Fixed-width description of one genetics file variant."""

    kind: str  # cultivar | ecotype
    text_fields: tuple[TextField, ...]
    params: tuple[ParamFormat, ...]
    token_offset: int  # tokens (codes + params) are read from here on
    param_offset: int  # first parameter column when writing
    min_length: int  # shorter data lines are treated as corrupt

    @property
    def param_count(self) -> int:
        return len(self.params)

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)

    @property
    def column_fields(self) -> tuple[TextField, ...]:
        return tuple(f for f in self.text_fields if f.source == "column")

    @property
    def token_fields(self) -> tuple[TextField, ...]:
        return tuple(f for f in self.text_fields if f.source == "token")

    @property
    def column_names(self) -> tuple[str, ...]:
        """Every column in file order: text fields then parameters."""
        return tuple(f.name for f in self.text_fields) + self.param_names

    def field(self, name: str) -> TextField:
        for f in self.text_fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def param_index(self, name: str) -> int:
        return self.param_names.index(name)


CULTIVAR_LAYOUT = RowLayout(
    kind="cultivar",
    text_fields=(
        TextField("VAR#", 0, 6),
        TextField("VRNAME", 7, 13),
        TextField("EXPNO", 21, 8, align="right", source="token"),
        TextField("ECO#", 30, 6, source="token"),
    ),
    params=(
        ParamFormat("CSDL", 2),
        ParamFormat("PPSEN", 3),
        ParamFormat("EM-FL", 1),
        ParamFormat("FL-SH", 1),
        ParamFormat("FL-SD", 1),
        ParamFormat("SD-PM", 1),
        ParamFormat("FL-LF", 1),
        ParamFormat("LFMAX", 3),
        ParamFormat("SLAVR", 0, trailing_dot=True),
        ParamFormat("SIZLF", 1),
        ParamFormat("XFRT", 3),
        ParamFormat("WTPSD", 3),
        ParamFormat("SFDUR", 1),
        ParamFormat("SDPDV", 2),
        ParamFormat("PODUR", 1),
        ParamFormat("THRSH", 1),
        ParamFormat("SDPRO", 3),
        ParamFormat("SDLIP", 3),
    ),
    token_offset=20,
    param_offset=37,
    min_length=36,
)

ECOTYPE_LAYOUT = RowLayout(
    kind="ecotype",
    text_fields=(
        TextField("ECO#", 0, 6),
        TextField("ECONAME", 7, 16),
        TextField("MG", 24, 2, align="right", source="token"),
        TextField("TM", 27, 2, align="right", source="token"),
    ),
    params=(
        ParamFormat("PP-SS", 3),
        ParamFormat("PL-EM", 1),
        ParamFormat("EM-V1", 1),
        ParamFormat("V1-JU", 1),
        ParamFormat("JU-R0", 2),
        ParamFormat("PM06", 2),
        ParamFormat("PM09", 2),
        ParamFormat("LNHSH", 2),
        ParamFormat("R7-R8", 1),
        ParamFormat("FL-VS", 1),
        ParamFormat("TRIFL", 3),
        ParamFormat("RWDTH", 2),
        ParamFormat("RHGHT", 2),
        ParamFormat("R1PPO", 3),
        ParamFormat("OPTBI", 1),
        ParamFormat("SLOBI", 3),
    ),
    token_offset=23,
    param_offset=30,
    min_length=23,
)

_LAYOUTS_BY_SUFFIX = {
    ".CUL": CULTIVAR_LAYOUT,
    ".ECO": ECOTYPE_LAYOUT,
}


def layout_for_path(path: Path | str) -> RowLayout:
    """Pick the layout from the file suffix (case-insensitive)."""
    suffix = Path(path).suffix.upper()
    try:
        return _LAYOUTS_BY_SUFFIX[suffix]
    except KeyError:
        raise UnknownFileKindError(f"not a cultivar/ecotype file: {path}") from None
