from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..codec.fixed_width import ParsedFile, format_row, parse_file, write_file
from ..codec.header import calibration_types, tooltips_from_header
from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from ..logging.init import get_logger, log_summary, setup_logging
from ..models.config_models import EditorConfig
from ..models.layout import UnknownFileKindError, layout_for_path
from ..services.backup import create_backup, prune_backups
from ..services.checker import CheckError, check_directory
from ..services.csv_io import export_csv, import_csv
from ..services.row_table import RowTable
from ..services.summary import render_summary_line

"""Command line entry point.

Subcommands:
- check       validate every .CUL/.ECO file of the configured genotype directory
- describe    parameter descriptions and calibration tags of one file
- validate    range / finiteness report for one file
- normalize   re-write one file through the fixed-width codec
- paste       merge one pasted data line (e.g. a GLUE result) into a file
- export-csv / import-csv

Files are backed up (config: backup.enabled / backup.max_keep) before any
command overwrites them.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PROBLEMS = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Crop genetics (.CUL/.ECO) file editor")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Check every genetics file in the genotype directory")

    for name, help_text in (
        ("describe", "Print parameter descriptions and calibration tags"),
        ("validate", "Report out-of-range and non-finite parameter values"),
        ("normalize", "Re-write a file in canonical fixed-width layout"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("file", type=Path)

    sp = sub.add_parser("paste", help="Add or update one row from a pasted data line")
    sp.add_argument("file", type=Path)
    sp.add_argument("line", help="data line, quoted")

    sp = sub.add_parser("export-csv", help="Export rows to CSV")
    sp.add_argument("file", type=Path)
    sp.add_argument("output", type=Path)

    sp = sub.add_parser("import-csv", help="Merge rows from CSV into a genetics file")
    sp.add_argument("csv", type=Path)
    sp.add_argument("file", type=Path)

    return p.parse_args(argv)


def _file_config(path: Path) -> EditorConfig:
    # single-file commands work without a config file
    if not path.exists():
        return default_config()
    return load_config(path)


def _load(path: Path) -> ParsedFile | None:
    logger = get_logger()
    if not path.exists():
        logger.error(f"file not found: {path}")
        return None
    try:
        layout_for_path(path)
    except UnknownFileKindError as e:
        logger.error(str(e))
        return None
    return parse_file(path)


def _save(path: Path, parsed: ParsedFile, table: RowTable, cfg: EditorConfig) -> int:
    logger = get_logger()
    if cfg.backup.enabled:
        backup = create_backup(path)
        if backup is not None:
            logger.info(f"backup: {backup.name}")
        prune_backups(path, cfg.backup.max_keep)
    if not write_file(path, table.rows, parsed.header_lines, parsed.layout):
        logger.error(f"failed to save: {path}")
        return EXIT_FATAL
    logger.info(f"saved: {path} rows={len(table)}")
    return EXIT_SUCCESS


def _cmd_check(cfg: EditorConfig) -> int:
    logger = get_logger()
    try:
        result = check_directory(cfg)
    except CheckError as e:
        logger.error(f"check: {e}")
        return EXIT_FATAL
    for f in result.files:
        if not f.readable:
            logger.warning(f"{f.file_name}: unreadable")
        for item in f.violations + f.non_finite + f.reference_issues:
            logger.warning(f"{f.file_name}: {item.describe()}")
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS if result.clean else EXIT_PROBLEMS


def _cmd_describe(parsed: ParsedFile) -> int:
    tips = tooltips_from_header(parsed.header_lines)
    cal = calibration_types(parsed.header_lines, parsed.layout)
    for name in parsed.layout.column_names:
        tag = cal.get(name, "-")
        print(f"{name:<8} [{tag}] {tips.get(name, '')}".rstrip())
    return EXIT_SUCCESS


def _cmd_validate(path: Path, parsed: ParsedFile) -> int:
    logger = get_logger()
    table = RowTable(parsed.layout, parsed.rows)
    if not table.bounds.present:
        logger.info(f"{path.name}: no MINIMA/MAXIMA rows, range check disabled")
    violations = table.violations()
    for v in violations:
        logger.warning(v.describe())
    padded = sum(1 for r in table.rows if r.is_padded)
    if padded:
        logger.info(f"{padded} row(s) had missing parameters, read as 0")
    log_summary(f"file={path.name} rows={len(table)} violations={len(violations)}")
    return EXIT_PROBLEMS if violations else EXIT_SUCCESS


def _cmd_paste(path: Path, parsed: ParsedFile, line: str, cfg: EditorConfig) -> int:
    logger = get_logger()
    table = RowTable(parsed.layout, parsed.rows)
    status, index = table.upsert_line(line)
    if status == "rejected":
        logger.error("could not parse the pasted line")
        return EXIT_FATAL
    logger.info(f"{status} {table[index].identifier}: {format_row(table[index])}")
    return _save(path, parsed, table, cfg)


def _cmd_import_csv(csv_path: Path, path: Path, parsed: ParsedFile, cfg: EditorConfig) -> int:
    logger = get_logger()
    if not csv_path.exists():
        logger.error(f"file not found: {csv_path}")
        return EXIT_FATAL
    try:
        incoming = import_csv(csv_path, parsed.layout)
    except ValueError as e:
        logger.error(f"csv: {e}")
        return EXIT_FATAL

    table = RowTable(parsed.layout, parsed.rows)
    imported = 0
    for row in incoming:
        if row.is_sentinel:
            continue
        index = table.find(row.identifier)
        if index >= 0:
            table.rows[index] = row
        else:
            table.rows.append(row)
        imported += 1
    logger.info(f"imported {imported} rows from {csv_path.name}")
    return _save(path, parsed, table, cfg)


def main(argv: list[str] | None = None) -> int:
    # argv=None only: an empty list must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    try:
        if args.command == "check":
            return _cmd_check(load_config(args.config))
        cfg = _file_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    parsed = _load(args.file)
    if parsed is None:
        return EXIT_FATAL

    if args.command == "describe":
        return _cmd_describe(parsed)
    if args.command == "validate":
        return _cmd_validate(args.file, parsed)
    if args.command == "normalize":
        return _save(args.file, parsed, RowTable(parsed.layout, parsed.rows), cfg)
    if args.command == "paste":
        return _cmd_paste(args.file, parsed, args.line, cfg)
    if args.command == "export-csv":
        export_csv(parsed.rows, parsed.layout, args.output)
        logger.info(f"exported {len(parsed.rows)} rows to {args.output}")
        return EXIT_SUCCESS
    if args.command == "import-csv":
        return _cmd_import_csv(args.csv, args.file, parsed, cfg)
    return EXIT_FATAL  # pragma: no cover (argparse rejects unknown commands)
