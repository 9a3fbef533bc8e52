from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

from ..models.bounds import SentinelBounds
from ..models.layout import CULTIVAR_LAYOUT, RowLayout
from ..models.row import GeneticsRow
from ..models.violation import NON_FINITE, OUT_OF_RANGE, ReferenceIssue, Violation

"""Range validation engine.

The MINIMA/MAXIMA sentinel rows are the authoritative bounds of every
parameter column. A value is out of range iff bounds exist for its column,
max > min there, and the value lies strictly outside [min, max]. Missing or
degenerate bounds silently switch the check off for that column.

Independently of any bounds, non-finite values (NaN, +/-inf) are always
reported. Sentinel rows are never validated.

Everything here is a pure function of the rows: nothing is cached and
nothing is mutated.
"""

__all__ = [
    "DEFAULT_CULTIVAR",
    "is_out_of_range",
    "range_violations",
    "bounded_violations",
    "non_finite_violations",
    "validate_rows",
    "reference_issues",
    "ecotype_reference_counts",
]

DEFAULT_CULTIVAR = "DFAULT"  # may point at an ecotype that does not exist


def _layout_of(rows: Sequence[GeneticsRow], layout: RowLayout | None) -> RowLayout:
    if layout is not None:
        return layout
    return rows[0].layout if rows else CULTIVAR_LAYOUT


def is_out_of_range(bounds: SentinelBounds, index: int, value: float) -> bool:
    if not bounds.active(index):
        return False
    lo, hi = bounds.pair(index)  # type: ignore[misc]
    return value < lo or value > hi


def range_violations(
    rows: Sequence[GeneticsRow],
    min_row: GeneticsRow | None = None,
    max_row: GeneticsRow | None = None,
    layout: RowLayout | None = None,
) -> list[Violation]:
    """One Violation per out-of-range cell, ordered by row then parameter.

    Bounds come from ``min_row``/``max_row`` when either is given, otherwise
    from the sentinel rows inside ``rows``.
    """
    if min_row is not None or max_row is not None:
        bounds = SentinelBounds.from_pair(min_row, max_row)
    else:
        bounds = SentinelBounds.from_rows(rows)
    return bounded_violations(rows, bounds, layout)


def bounded_violations(
    rows: Sequence[GeneticsRow], bounds: SentinelBounds, layout: RowLayout | None = None
) -> list[Violation]:
    """Range check against bounds that were already collected (e.g. at load time)."""
    if not bounds.present:
        return []

    names = _layout_of(rows, layout).param_names
    violations: list[Violation] = []
    for r, row in enumerate(rows):
        if row.is_sentinel:
            continue
        for p, value in enumerate(row.params[: len(names)]):
            if not is_out_of_range(bounds, p, value):
                continue
            lo, hi = bounds.pair(p)  # type: ignore[misc]
            violations.append(
                Violation(
                    row_index=r,
                    identifier=row.identifier,
                    parameter=names[p],
                    value=value,
                    lower=lo,
                    upper=hi,
                    kind=OUT_OF_RANGE,
                )
            )
    return violations


def non_finite_violations(
    rows: Sequence[GeneticsRow], layout: RowLayout | None = None
) -> list[Violation]:
    """NaN / infinite parameter values, whatever the bounds say."""
    names = _layout_of(rows, layout).param_names
    violations: list[Violation] = []
    for r, row in enumerate(rows):
        if row.is_sentinel:
            continue
        for p, value in enumerate(row.params[: len(names)]):
            if math.isfinite(value):
                continue
            violations.append(
                Violation(
                    row_index=r,
                    identifier=row.identifier,
                    parameter=names[p],
                    value=value,
                    lower=None,
                    upper=None,
                    kind=NON_FINITE,
                )
            )
    return violations


def validate_rows(
    rows: Sequence[GeneticsRow], layout: RowLayout | None = None
) -> list[Violation]:
    """Range check followed by the always-on finiteness check."""
    return range_violations(rows, layout=layout) + non_finite_violations(rows, layout)


def reference_issues(
    cultivars: Sequence[GeneticsRow], ecotypes: Sequence[GeneticsRow] | None = None
) -> list[ReferenceIssue]:
    """Record-level checks on a cultivar table.

    - empty VAR# or VRNAME
    - ECO# not defined in the ecotype table (only when ``ecotypes`` is given;
      the DFAULT cultivar is exempt)
    """
    known = None
    if ecotypes is not None:
        known = {e.identifier for e in ecotypes if not e.is_sentinel}

    issues: list[ReferenceIssue] = []
    for row in cultivars:
        if row.is_sentinel:
            continue
        if not row.identifier.strip():
            issues.append(ReferenceIssue(row.identifier, "empty VAR#"))
        if not row.name.strip():
            issues.append(ReferenceIssue(row.identifier, "empty VRNAME"))
        eco = row.code("ECO#")
        if known is not None and row.identifier != DEFAULT_CULTIVAR and eco not in known:
            issues.append(ReferenceIssue(row.identifier, f"ECO# '{eco}' not found in ECO file"))
    return issues


def ecotype_reference_counts(cultivars: Sequence[GeneticsRow]) -> dict[str, int]:
    """ECO# -> number of (non-sentinel) cultivars pointing at it."""
    return dict(Counter(row.code("ECO#") for row in cultivars if not row.is_sentinel))
