from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

from genetics_editor.services.backup import create_backup, list_backups, prune_backups


def _source(tmp_path: Path) -> Path:
    path = tmp_path / "MZCER048.CUL"
    path.write_bytes(b"*MAIZE CULTIVAR COEFFICIENTS\r\n")
    return path


def test_create_backup_name_and_content(tmp_path: Path):
    path = _source(tmp_path)
    backup = create_backup(path, now=datetime(2026, 10, 16, 14, 25, 1))
    assert backup == tmp_path / "MZCER048.CUL.20261016_142501.bak"
    assert backup.read_bytes() == path.read_bytes()


def test_create_backup_missing_source(tmp_path: Path):
    assert create_backup(tmp_path / "NOPE.CUL") is None
    assert list(tmp_path.iterdir()) == []


def test_list_backups_oldest_first(tmp_path: Path):
    path = _source(tmp_path)
    start = datetime(2026, 1, 1, 12, 0, 0)
    for minutes in (5, 1, 3):
        create_backup(path, now=start + timedelta(minutes=minutes))
    names = [p.name for p in list_backups(path)]
    assert names == [
        "MZCER048.CUL.20260101_120100.bak",
        "MZCER048.CUL.20260101_120300.bak",
        "MZCER048.CUL.20260101_120500.bak",
    ]


def test_prune_keeps_newest(tmp_path: Path):
    path = _source(tmp_path)
    start = datetime(2026, 1, 1)
    for day in range(5):
        create_backup(path, now=start + timedelta(days=day))
    removed = prune_backups(path, max_keep=2)
    assert [p.name for p in removed] == [
        "MZCER048.CUL.20260101_000000.bak",
        "MZCER048.CUL.20260102_000000.bak",
        "MZCER048.CUL.20260103_000000.bak",
    ]
    assert len(list_backups(path)) == 2
    assert path.exists()


def test_prune_ignores_other_files(tmp_path: Path):
    path = _source(tmp_path)
    other = tmp_path / "MZCER048.ECO"
    other.write_bytes(b"")
    stray = tmp_path / "MZCER048.ECO.20260101_000000.bak"
    stray.write_bytes(b"")
    create_backup(path, now=datetime(2026, 1, 1))
    assert prune_backups(path, max_keep=0) == [tmp_path / "MZCER048.CUL.20260101_000000.bak"]
    assert other.exists()
    assert stray.exists()
