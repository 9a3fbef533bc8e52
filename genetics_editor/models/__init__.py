"""Domain models for the crop genetics editor.

Layout tables, rows, sentinel bounds, violations, check results and
configuration dataclasses used throughout the package.
"""

from .bounds import SentinelBounds
from .check_result import CheckResult, FileCheck
from .config_models import BackupConfig, EditorConfig
from .layout import (
    CULTIVAR_LAYOUT,
    ECOTYPE_LAYOUT,
    ParamFormat,
    RowLayout,
    TextField,
    UnknownFileKindError,
    layout_for_path,
)
from .row import SENTINEL_MAX, SENTINEL_MIN, GeneticsRow
from .violation import NON_FINITE, OUT_OF_RANGE, ReferenceIssue, Violation

__all__ = [
    # Layout tables
    "CULTIVAR_LAYOUT",
    "ECOTYPE_LAYOUT",
    "ParamFormat",
    "RowLayout",
    "TextField",
    "UnknownFileKindError",
    "layout_for_path",
    # Records
    "GeneticsRow",
    "SENTINEL_MIN",
    "SENTINEL_MAX",
    "SentinelBounds",
    "Violation",
    "ReferenceIssue",
    "OUT_OF_RANGE",
    "NON_FINITE",
    # Results / configuration
    "CheckResult",
    "FileCheck",
    "BackupConfig",
    "EditorConfig",
]
