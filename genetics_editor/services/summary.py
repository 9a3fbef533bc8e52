from __future__ import annotations

from ..models.check_result import CheckResult

"""SUMMARY line rendering for the batch checker.

Format:
SUMMARY files={n} failed={f} rows={r} violations={v} non_finite={x}
reference_issues={i} elapsed_sec={s}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}"


def render_summary_line(result: CheckResult) -> str:
    """Render the SUMMARY line for a CheckResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2026, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(CheckResult(files=[], start_time=t, end_time=t, elapsed_seconds=0.0))
        'SUMMARY files=0 failed=0 rows=0 violations=0 non_finite=0 reference_issues=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY files={len(result.files)} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"violations={result.total_violations} "
        f"non_finite={result.total_non_finite} "
        f"reference_issues={result.total_reference_issues} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
