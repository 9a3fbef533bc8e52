from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..models.violation import ReferenceIssue, Violation

"""Violation log (JSON Lines) written by the batch checker.

- one file per run: <report_directory>/violations-YYYYMMDD-HHMMSS.log (UTC)
- records are buffered and appended on flush()
- fixed key set per record, see ViolationLogRecord
"""

__all__ = [
    "ViolationLogRecord",
    "ViolationLogBuffer",
    "TIMESTAMP_FMT",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

RECORD_KEYS = (
    "timestamp",
    "file",
    "row",
    "identifier",
    "parameter",
    "value",
    "lower",
    "upper",
    "kind",
    "message",
)


@dataclass(frozen=True)
class ViolationLogRecord:
    """One line of the violation log.

    ``row`` is the 0-based row index, -1 for file-level problems (unreadable
    file, cross-reference issues).
    """
    timestamp: str  # ISO8601 UTC, "Z" suffix
    file: str
    row: int
    identifier: str
    parameter: str | None
    value: float | str | None
    lower: float | str | None
    upper: float | str | None
    kind: str  # OUT_OF_RANGE | NON_FINITE | REFERENCE | UNREADABLE
    message: str

    @staticmethod
    def _now() -> str:
        return datetime.now(UTC).isoformat().replace("+00:00", "Z")

    @classmethod
    def from_violation(cls, file: str, violation: Violation) -> ViolationLogRecord:
        data = violation.to_dict()
        return cls(
            timestamp=cls._now(),
            file=file,
            row=violation.row_index,
            identifier=violation.identifier,
            parameter=violation.parameter,
            value=data["value"],  # type: ignore[arg-type]
            lower=data["lower"],  # type: ignore[arg-type]
            upper=data["upper"],  # type: ignore[arg-type]
            kind=violation.kind,
            message=violation.describe(),
        )

    @classmethod
    def from_issue(cls, file: str, issue: ReferenceIssue) -> ViolationLogRecord:
        return cls(
            timestamp=cls._now(),
            file=file,
            row=-1,
            identifier=issue.identifier,
            parameter=None,
            value=None,
            lower=None,
            upper=None,
            kind="REFERENCE",
            message=issue.message,
        )

    @classmethod
    def unreadable(cls, file: str, message: str) -> ViolationLogRecord:
        return cls(
            timestamp=cls._now(),
            file=file,
            row=-1,
            identifier="",
            parameter=None,
            value=None,
            lower=None,
            upper=None,
            kind="UNREADABLE",
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps({k: getattr(self, k) for k in RECORD_KEYS}, ensure_ascii=False)


class ViolationLogBuffer:
    """In-memory buffer of log records; flush() appends them as JSON Lines.

    The file path is fixed on first access, so repeated flushes of one run
    go to the same file. Single-threaded use only.
    """

    def __init__(self, directory: Path | str = "./logs") -> None:
        self.directory = Path(directory)
        self._records: list[ViolationLogRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.directory / f"violations-{stamp}.log"
        return self._file_path

    def append(self, record: ViolationLogRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[ViolationLogRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
