from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the genetics editor.

Kept separate from config/loader.py: the loader deals with YAML and the
JSON schema, these classes are what the services receive.
"""

DEFAULT_REPORT_DIRECTORY = "./logs"
DEFAULT_BACKUP_KEEP = 10


@dataclass(frozen=True)
class BackupConfig:
    """Timestamped .bak copies written before a genetics file is overwritten."""
    enabled: bool = True
    max_keep: int = DEFAULT_BACKUP_KEEP  # oldest copies beyond this are pruned


@dataclass(frozen=True)
class EditorConfig:
    """Root configuration object.

    genotype_directory is only required by the batch checker; the single-file
    commands run with default_config() when no config file exists.
    """
    genotype_directory: str | None  # directory holding *.CUL / *.ECO / *.SPE
    report_directory: str = DEFAULT_REPORT_DIRECTORY  # violation logs go here
    backup: BackupConfig = field(default_factory=BackupConfig)
