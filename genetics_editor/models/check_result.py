from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .violation import ReferenceIssue, Violation

"""Result models for the batch checker.

FileCheck holds the outcome for one genetics file, CheckResult aggregates a
whole genotype directory and feeds the SUMMARY line.
"""


@dataclass(frozen=True)
class FileCheck:
    """Per-file check outcome."""
    file_name: str
    kind: str  # cultivar / ecotype
    rows: int  # data rows parsed (sentinels included)
    violations: list[Violation] = field(default_factory=list)  # OUT_OF_RANGE
    non_finite: list[Violation] = field(default_factory=list)  # NON_FINITE
    reference_issues: list[ReferenceIssue] = field(default_factory=list)
    readable: bool = True

    @property
    def ok(self) -> bool:
        return self.readable and not (self.violations or self.non_finite or self.reference_issues)


@dataclass(frozen=True)
class CheckResult:
    """Aggregated results for one checker run."""
    files: list[FileCheck]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def total_rows(self) -> int:
        return sum(f.rows for f in self.files)

    @property
    def total_violations(self) -> int:
        return sum(len(f.violations) for f in self.files)

    @property
    def total_non_finite(self) -> int:
        return sum(len(f.non_finite) for f in self.files)

    @property
    def total_reference_issues(self) -> int:
        return sum(len(f.reference_issues) for f in self.files)

    @property
    def failed_files(self) -> int:
        return sum(1 for f in self.files if not f.ok)

    @property
    def clean(self) -> bool:
        return self.failed_files == 0
