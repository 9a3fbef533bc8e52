from __future__ import annotations

import glob
import logging
import shutil
from datetime import datetime
from pathlib import Path

"""Timestamped backups written next to a genetics file before it is overwritten.

MZCER048.CUL -> MZCER048.CUL.20261016_142501.bak

The suffix stays in the name so the .CUL and .ECO of one crop keep separate
backup sets.
"""

__all__ = [
    "TIMESTAMP_FMT",
    "create_backup",
    "prune_backups",
    "list_backups",
]

logger = logging.getLogger(__name__)

TIMESTAMP_FMT = "%Y%m%d_%H%M%S"


def create_backup(path: Path | str, *, now: datetime | None = None) -> Path | None:
    """Copy ``path`` to ``<name>.<timestamp>.bak``. Returns None when there is nothing to copy or the copy fails."""
    path = Path(path)
    if not path.exists():
        return None
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FMT)
    backup = path.with_name(f"{path.name}.{stamp}.bak")
    try:
        shutil.copy2(path, backup)
    except OSError as e:
        logger.warning(f"backup failed for {path}: {e}")
        return None
    logger.debug(f"backup written: {backup.name}")
    return backup


def list_backups(path: Path | str) -> list[Path]:
    """Backups of ``path``, oldest first (the timestamp sorts lexically)."""
    path = Path(path)
    return sorted(path.parent.glob(f"{glob.escape(path.name)}.*.bak"), key=lambda p: p.name)


def prune_backups(path: Path | str, max_keep: int = 10) -> list[Path]:
    """Delete the oldest backups beyond ``max_keep``; returns the removed paths."""
    backups = list_backups(path)
    removed: list[Path] = []
    while len(backups) > max_keep:
        oldest = backups.pop(0)
        try:
            oldest.unlink()
        except OSError as e:
            logger.warning(f"cannot remove old backup {oldest}: {e}")
            continue
        removed.append(oldest)
    return removed
