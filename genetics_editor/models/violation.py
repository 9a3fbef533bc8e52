from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass

"""Violation records produced by the validation engine.

Violations are a computed view over a row collection. They are never written
back into the genetics file; the JSON Lines form only feeds the violation
log written by the batch checker.
"""

__all__ = [
    "Violation",
    "ReferenceIssue",
    "OUT_OF_RANGE",
    "NON_FINITE",
]

OUT_OF_RANGE = "OUT_OF_RANGE"
NON_FINITE = "NON_FINITE"


def _num(value: float | None) -> float | str | None:
    # JSON has no NaN/Infinity
    if value is None or math.isfinite(value):
        return value
    return str(value)


def _short(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class Violation:
    """One parameter cell lying outside its bounds (or not finite at all).

    Attributes:
        row_index: 0-based position of the row in the collection
        identifier: VAR# / ECO# of the row
        parameter: parameter name from the layout table
        value: observed value
        lower: minimum bound, None for NON_FINITE
        upper: maximum bound, None for NON_FINITE
        kind: OUT_OF_RANGE or NON_FINITE
    """
    row_index: int
    identifier: str
    parameter: str
    value: float
    lower: float | None
    upper: float | None
    kind: str = OUT_OF_RANGE

    def describe(self) -> str:
        if self.kind == NON_FINITE:
            return f"{self.identifier}: param {self.parameter} is not finite"
        return (
            f"{self.identifier}: {self.parameter}={_short(self.value)} "
            f"(range: {_short(self.lower)} to {_short(self.upper)})"
        )

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["value"] = _num(self.value)
        data["lower"] = _num(self.lower)
        data["upper"] = _num(self.upper)
        return data

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class ReferenceIssue:
    """Record-level problem found by the cross-reference check (empty names, dangling ECO#)."""
    identifier: str
    message: str

    def describe(self) -> str:
        return f"{self.identifier}: {self.message}"
