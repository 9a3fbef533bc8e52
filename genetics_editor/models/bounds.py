from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .row import GeneticsRow

"""Sentinel-derived parameter bounds.

The MINIMA (999991) and MAXIMA (999992) rows of a file carry the allowed
range of every parameter column. They are collected once per load into a
SentinelBounds value so the validator never has to look at identifiers.
"""

__all__ = [
    "SentinelBounds",
]


@dataclass(frozen=True)
class SentinelBounds:
    minimum: tuple[float, ...] | None = None
    maximum: tuple[float, ...] | None = None

    @classmethod
    def from_rows(cls, rows: Iterable[GeneticsRow]) -> SentinelBounds:
        """Collect bounds from the sentinel rows; a later duplicate replaces an earlier one."""
        lo: tuple[float, ...] | None = None
        hi: tuple[float, ...] | None = None
        for row in rows:
            if row.is_minimum:
                lo = tuple(row.params)
            elif row.is_maximum:
                hi = tuple(row.params)
        return cls(minimum=lo, maximum=hi)

    @classmethod
    def from_pair(
        cls, min_row: GeneticsRow | None, max_row: GeneticsRow | None
    ) -> SentinelBounds:
        return cls(
            minimum=tuple(min_row.params) if min_row is not None else None,
            maximum=tuple(max_row.params) if max_row is not None else None,
        )

    @property
    def present(self) -> bool:
        return self.minimum is not None and self.maximum is not None

    def pair(self, index: int) -> tuple[float, float] | None:
        if self.minimum is None or self.maximum is None:
            return None
        if index >= len(self.minimum) or index >= len(self.maximum):
            return None
        return self.minimum[index], self.maximum[index]

    def active(self, index: int) -> bool:
        """A column is only checked when max > min; anything else means "not configured"."""
        bounds = self.pair(index)
        return bounds is not None and bounds[1] > bounds[0]
