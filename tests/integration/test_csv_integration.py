from __future__ import annotations

from pathlib import Path

import pandas as pd

from genetics_editor.cli import main as cli_main
from genetics_editor.codec.fixed_width import parse_file


def test_export_edit_import(genotype_files, temp_workdir: Path, capsys):
    cul = genotype_files["cul"]
    csv_path = temp_workdir / "cul.csv"
    assert cli_main(["export-csv", str(cul), str(csv_path)]) == 0
    assert f"exported 4 rows to {csv_path}" in capsys.readouterr().out

    # spreadsheet round: fix IB0002, add a cultivar, try to touch MAXIMA
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.loc[df["VAR#"] == "IB0002", "CSDL"] = "14.5"
    df.loc[df["VAR#"] == "999992", "CSDL"] = "99"
    new = df[df["VAR#"] == "IB0001"].copy()
    new["VAR#"] = "IB0005"
    new["VRNAME"] = "FROM CSV"
    df = pd.concat([df, new], ignore_index=True)
    df.to_csv(csv_path, index=False)

    assert cli_main(["import-csv", str(csv_path), str(cul)]) == 0
    assert "imported 3 rows from cul.csv" in capsys.readouterr().out

    rows = {r.identifier: r for r in parse_file(cul).rows}
    assert list(rows) == ["999991", "999992", "IB0001", "IB0002", "IB0005"]
    assert rows["IB0002"].params[0] == 14.5
    assert rows["999992"].params[0] == 16.0
    assert rows["IB0005"].name == "FROM CSV"
    assert rows["IB0005"].params == rows["IB0001"].params


def test_import_csv_missing_columns(genotype_files, temp_workdir: Path, capsys):
    csv_path = temp_workdir / "bad.csv"
    csv_path.write_text("VAR#,CSDL\nIB0009,1.0\n", encoding="utf-8")
    before = genotype_files["cul"].read_bytes()
    code = cli_main(["import-csv", str(csv_path), str(genotype_files["cul"])])
    assert code == 1
    assert "ERROR csv: csv missing columns" in capsys.readouterr().out
    assert genotype_files["cul"].read_bytes() == before


def test_import_csv_missing_file(genotype_files, temp_workdir: Path, capsys):
    code = cli_main(["import-csv", str(temp_workdir / "nope.csv"), str(genotype_files["cul"])])
    assert code == 1
    assert "ERROR file not found:" in capsys.readouterr().out
