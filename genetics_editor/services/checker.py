from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..codec.fixed_width import ENCODING, ParsedFile, parse_text
from ..logging.violation_log import ViolationLogBuffer, ViolationLogRecord
from ..models.check_result import CheckResult, FileCheck
from ..models.config_models import EditorConfig
from ..models.layout import ECOTYPE_LAYOUT, layout_for_path
from .progress import ProgressTracker
from .validation import bounded_violations, non_finite_violations, reference_issues

"""Batch checker for a genotype directory.

Flow:
1. scan the directory (non-recursive) for *.CUL / *.ECO
2. parse every file; an unreadable file is a failed FileCheck, not an abort
3. per file: range violations against the file's own sentinel rows,
   non-finite values, and for cultivar files the cross-reference check
   against the ecotype file with the same stem (SBGRO048.CUL <-> SBGRO048.ECO)
4. every problem goes to the JSON Lines violation log
"""

__all__ = [
    "CheckError",
    "GENETICS_SUFFIXES",
    "scan_genetics_files",
    "check_file",
    "check_directory",
]

logger = logging.getLogger(__name__)

GENETICS_SUFFIXES = (".CUL", ".ECO")


class CheckError(Exception):
    """Raised when the checker cannot start (e.g. missing genotype directory)."""


def scan_genetics_files(directory: Path) -> list[Path]:
    """Cultivar and ecotype files in ``directory``, sorted by name."""
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.upper() in GENETICS_SUFFIXES),
        key=lambda p: p.name.upper(),
    )


def _read(path: Path) -> ParsedFile | None:
    try:
        text = path.read_bytes().decode(ENCODING)
    except OSError as e:
        logger.warning(f"cannot read {path}: {e}")
        return None
    return parse_text(text, layout_for_path(path))


def check_file(
    path: Path,
    parsed: ParsedFile | None,
    ecotypes: ParsedFile | None = None,
) -> FileCheck:
    """Validate one parsed genetics file (``parsed`` None = unreadable)."""
    layout = layout_for_path(path)
    if parsed is None:
        return FileCheck(file_name=path.name, kind=layout.kind, rows=0, readable=False)

    issues = []
    if layout.kind == "cultivar":
        issues = reference_issues(parsed.rows, ecotypes.rows if ecotypes is not None else None)

    return FileCheck(
        file_name=path.name,
        kind=layout.kind,
        rows=len(parsed.rows),
        violations=bounded_violations(parsed.rows, parsed.bounds, layout),
        non_finite=non_finite_violations(parsed.rows, layout),
        reference_issues=issues,
    )


def _log_records(check: FileCheck) -> list[ViolationLogRecord]:
    if not check.readable:
        return [ViolationLogRecord.unreadable(check.file_name, "file could not be read")]
    records = [ViolationLogRecord.from_violation(check.file_name, v) for v in check.violations]
    records += [ViolationLogRecord.from_violation(check.file_name, v) for v in check.non_finite]
    records += [ViolationLogRecord.from_issue(check.file_name, i) for i in check.reference_issues]
    return records


def check_directory(
    config: EditorConfig, *, log_buffer: ViolationLogBuffer | None = None
) -> CheckResult:
    """Check every genetics file in ``config.genotype_directory``.

    Raises:
        CheckError: when no genotype directory is configured or it does not exist
    """
    if not config.genotype_directory:
        raise CheckError("genotype_directory is not configured")
    directory = Path(config.genotype_directory)
    if not directory.is_dir():
        raise CheckError(f"genotype directory not found: {directory}")

    if log_buffer is None:
        log_buffer = ViolationLogBuffer(config.report_directory)

    start = datetime.now(UTC)
    files = scan_genetics_files(directory)
    logger.info(f"checking {len(files)} genetics files in {directory}")

    parsed = {p: _read(p) for p in files}
    ecotypes_by_stem = {
        p.stem.upper(): pf
        for p, pf in parsed.items()
        if pf is not None and pf.layout is ECOTYPE_LAYOUT
    }

    checks: list[FileCheck] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            check = check_file(path, parsed[path], ecotypes_by_stem.get(path.stem.upper()))
            records = _log_records(check)
            log_buffer.extend(records)
            checks.append(check)
            logger.debug(
                f"{path.name}: rows={check.rows} violations={len(check.violations)} "
                f"non_finite={len(check.non_finite)} reference_issues={len(check.reference_issues)}"
            )
            progress.finish_file(problems=len(records))

    log_path = log_buffer.flush()
    if log_path is not None:
        logger.info(f"violation log: {log_path}")

    end = datetime.now(UTC)
    return CheckResult(
        files=checks,
        start_time=start,
        end_time=end,
        elapsed_seconds=(end - start).total_seconds(),
    )
