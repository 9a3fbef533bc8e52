from __future__ import annotations

from dataclasses import dataclass, field

from .layout import CULTIVAR_LAYOUT, ECOTYPE_LAYOUT, RowLayout

"""GeneticsRow model.

One data line of a cultivar or ecotype file. Rows are edited in place by the
row table, so unlike the result models this dataclass is not frozen.
"""

__all__ = [
    "GeneticsRow",
    "SENTINEL_MIN",
    "SENTINEL_MAX",
    "SENTINEL_CODES",
    "NO_CODE",
]

SENTINEL_MIN = "999991"  # MINIMA row
SENTINEL_MAX = "999992"  # MAXIMA row
SENTINEL_CODES = frozenset({SENTINEL_MIN, SENTINEL_MAX})

# Placeholder written for an empty token field; "." is also how the file
# marks a cultivar without an experiment number.
NO_CODE = "."

_LAYOUTS = {
    CULTIVAR_LAYOUT.kind: CULTIVAR_LAYOUT,
    ECOTYPE_LAYOUT.kind: ECOTYPE_LAYOUT,
}


@dataclass
class GeneticsRow:
    """A single cultivar or ecotype record.

    Position in ``params`` is the join key with the layout's parameter table
    and with the sentinel bounds; names are never used for that.
    """
    identifier: str  # VAR# / ECO#
    name: str  # VRNAME / ECONAME
    codes: dict[str, str]  # token fields (EXPNO, ECO# / MG, TM)
    params: list[float]
    kind: str = CULTIVAR_LAYOUT.kind
    # Number of parameter tokens actually read; anything above was zero padded.
    parsed_param_count: int | None = field(default=None, compare=False)

    @property
    def layout(self) -> RowLayout:
        return _LAYOUTS[self.kind]

    @property
    def is_minimum(self) -> bool:
        return self.identifier == SENTINEL_MIN

    @property
    def is_maximum(self) -> bool:
        return self.identifier == SENTINEL_MAX

    @property
    def is_sentinel(self) -> bool:
        return self.identifier in SENTINEL_CODES

    @property
    def is_padded(self) -> bool:
        return (
            self.parsed_param_count is not None
            and self.parsed_param_count < len(self.params)
        )

    def code(self, name: str) -> str:
        return self.codes.get(name, "")

    def copy(self) -> GeneticsRow:
        return GeneticsRow(
            identifier=self.identifier,
            name=self.name,
            codes=dict(self.codes),
            params=list(self.params),
            kind=self.kind,
            parsed_param_count=self.parsed_param_count,
        )

    @classmethod
    def blank(cls, layout: RowLayout, identifier: str = "", name: str = "") -> GeneticsRow:
        """Row with empty codes and all parameters set to zero."""
        return cls(
            identifier=identifier,
            name=name,
            codes={f.name: NO_CODE for f in layout.token_fields},
            params=[0.0] * layout.param_count,
            kind=layout.kind,
        )
