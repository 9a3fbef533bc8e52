from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..models.layout import RowLayout
from ..models.row import NO_CODE, GeneticsRow

"""CSV export / import of a cultivar or ecotype table.

Columns follow the layout: text fields first (VAR#, VRNAME, EXPNO, ECO# or
ECO#, ECONAME, MG, TM), then one column per parameter. Text columns are
read as strings so identifiers like "000123" and the "." marker survive;
parameter cells that are blank or non-numeric become 0.0, same as the
fixed-width reader.
"""

__all__ = [
    "rows_to_frame",
    "frame_to_rows",
    "export_csv",
    "import_csv",
]


def rows_to_frame(rows: Iterable[GeneticsRow], layout: RowLayout) -> pd.DataFrame:
    records = []
    for row in rows:
        text = [row.identifier, row.name] + [row.code(f.name) for f in layout.token_fields]
        params = list(row.params[: layout.param_count])
        params.extend([0.0] * (layout.param_count - len(params)))
        records.append(text + params)
    return pd.DataFrame(records, columns=list(layout.column_names))


def frame_to_rows(df: pd.DataFrame, layout: RowLayout) -> list[GeneticsRow]:
    text_names = [f.name for f in layout.text_fields]
    missing = [c for c in text_names if c not in df.columns]
    if missing:
        raise ValueError(f"csv missing columns: {missing}")

    numeric = pd.DataFrame(index=df.index)
    for name in layout.param_names:
        if name in df.columns:
            numeric[name] = pd.to_numeric(df[name], errors="coerce").fillna(0.0)
        else:
            numeric[name] = 0.0

    rows: list[GeneticsRow] = []
    for idx, raw in df.iterrows():
        values = ["" if pd.isna(raw[c]) else str(raw[c]).strip() for c in text_names]
        identifier, name = values[0], values[1]
        if not identifier:
            continue
        codes = {
            f.name: (value or NO_CODE)
            for f, value in zip(layout.token_fields, values[2:])
        }
        rows.append(
            GeneticsRow(
                identifier=identifier[: layout.text_fields[0].width],
                name=name[: layout.text_fields[1].width],
                codes=codes,
                params=[float(v) for v in numeric.loc[idx].tolist()],
                kind=layout.kind,
            )
        )
    return rows


def export_csv(rows: Iterable[GeneticsRow], layout: RowLayout, path: Path | str) -> Path:
    path = Path(path)
    rows_to_frame(rows, layout).to_csv(path, index=False)
    return path


def import_csv(path: Path | str, layout: RowLayout) -> list[GeneticsRow]:
    """Read rows back from a CSV written by export_csv (or edited in a spreadsheet)."""
    df = pd.read_csv(Path(path), dtype=str, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]
    return frame_to_rows(df, layout)
