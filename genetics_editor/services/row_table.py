from __future__ import annotations

import logging
from collections.abc import Iterable

from ..codec.fixed_width import HEADER_MARKERS, parse_line
from ..models.bounds import SentinelBounds
from ..models.layout import RowLayout
from ..models.row import SENTINEL_CODES, GeneticsRow
from ..models.violation import Violation
from .validation import bounded_violations, ecotype_reference_counts, non_finite_violations

"""Editable row collection for one genetics file.

RowTable is what an editing front end works against: it owns the row list,
the sentinel bounds computed when the rows were set, and the editing rules

- MINIMA/MAXIMA rows are read-only and cannot be deleted
- text values are truncated to their field width
- parameter values must parse as numbers

Mutators return True/False instead of raising, matching how the front end
reports a rejected edit. Callers sharing a table across threads must
serialize access themselves.
"""

__all__ = [
    "RowTable",
    "NEW_ROW_DEFAULTS",
]

logger = logging.getLogger(__name__)

# identifier, name, token codes for a freshly added row
NEW_ROW_DEFAULTS = {
    "cultivar": ("NEW001", "NEW CULTIVAR", {"EXPNO": ".", "ECO#": "DFAULT"}),
    "ecotype": ("NEWE01", "NEW ECOTYPE", {"MG": "0", "TM": "0"}),
}


class RowTable:
    def __init__(self, layout: RowLayout, rows: Iterable[GeneticsRow] = ()) -> None:
        self.layout = layout
        self._rows: list[GeneticsRow] = []
        self.bounds = SentinelBounds()
        self.set_rows(rows)

    # -- collection --------------------------------------------------------

    @property
    def rows(self) -> list[GeneticsRow]:
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> GeneticsRow:
        return self._rows[index]

    def set_rows(self, rows: Iterable[GeneticsRow]) -> None:
        """Replace every row and recompute the sentinel bounds."""
        self._rows = list(rows)
        self.bounds = SentinelBounds.from_rows(self._rows)

    def find(self, identifier: str) -> int:
        """Index of the first row with this identifier, -1 when absent."""
        for i, row in enumerate(self._rows):
            if row.identifier == identifier:
                return i
        return -1

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self._rows)

    # -- row operations ----------------------------------------------------

    def add_row(self) -> GeneticsRow:
        identifier, name, codes = NEW_ROW_DEFAULTS[self.layout.kind]
        row = GeneticsRow.blank(self.layout, identifier, name)
        row.codes.update(codes)
        self._rows.append(row)
        return row

    def duplicate_row(self, index: int) -> GeneticsRow | None:
        """Append a copy of row ``index``; the copy gets an "X" suffix to be renamed."""
        if not self._valid(index):
            return None
        row = self._rows[index].copy()
        row.identifier = row.identifier + "X"
        row.parsed_param_count = None
        self._rows.append(row)
        return row

    def delete_row(self, index: int) -> bool:
        if not self._valid(index) or self._rows[index].is_sentinel:
            return False
        del self._rows[index]
        return True

    def set_field(self, index: int, column: str, value: object) -> bool:
        """Edit one cell by column name (VAR#, VRNAME, EXPNO, ..., or a parameter name)."""
        if not self._valid(index):
            return False
        row = self._rows[index]
        if row.is_sentinel:
            return False

        if column in self.layout.param_names:
            try:
                number = float(value)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                return False
            row.params[self.layout.param_index(column)] = number
            return True

        try:
            f = self.layout.field(column)
        except KeyError:
            return False
        text = str(value).strip()[: f.width]
        if f.source == "token":
            if not text or any(c.isspace() for c in text):
                return False  # would shift every following token on re-read
            row.codes[column] = text
        elif f is self.layout.text_fields[0]:
            if text in SENTINEL_CODES:
                return False  # bounds rows only come from the file
            if text.startswith(HEADER_MARKERS):
                return False  # the saved line would read back as a header line
            row.identifier = text
        else:
            row.name = text
        return True

    def upsert_line(self, text: str) -> tuple[str, int]:
        """Merge one pasted data line into the table.

        Returns ("updated" | "added" | "rejected", row index). A line that
        targets a sentinel row is rejected like any other read-only edit.
        """
        parsed = parse_line(text, self.layout)
        if not parsed.identifier or parsed.is_sentinel:
            return "rejected", -1

        index = self.find(parsed.identifier)
        if index >= 0:
            row = self._rows[index]
            row.name = parsed.name
            row.codes.update(parsed.codes)
            row.params = list(parsed.params)
            row.parsed_param_count = None
            logger.debug(f"updated {parsed.identifier} from pasted line")
            return "updated", index

        parsed.parsed_param_count = None
        self._rows.append(parsed)
        logger.debug(f"added {parsed.identifier} from pasted line")
        return "added", len(self._rows) - 1

    # -- derived views -----------------------------------------------------

    def violations(self) -> list[Violation]:
        """Range violations against the bounds collected in set_rows(), then non-finite values."""
        return bounded_violations(self._rows, self.bounds, self.layout) + non_finite_violations(
            self._rows, self.layout
        )

    def reference_counts(self) -> dict[str, int]:
        return ecotype_reference_counts(self._rows)
