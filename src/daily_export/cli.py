"""
daily_export — Export the recent daily notes of a Markdown vault.

Overview
--------
`export` (the default command):
  1) indexes every note of the vault by normalized title, with `tree -J`
     when it is installed and a direct directory walk otherwise,
  2) finds the daily notes of the last N days (`2026-01-21.md`,
     `January 21, 2026.md`, `Jan 21, 2026.md`, `21-01-2026.md`, directly in
     the vault, in a same-named folder, or anywhere through the index),
  3) copies them and every note they reach through `[[wiki links]]`, up to
     `--max-depth` hops, into `<export-base>/export-<timestamp>/`,
  4) writes `MANIFEST.md` and packages all copied notes into `export.xml`.

`concat` runs step 4's packaging alone on any directory.

Configuration comes from, by increasing precedence: defaults, environment
variables (`OBSIDIAN_VAULT`, `DAYS_BACK`, `EXPORT_BASE`, `EXPORT_TIMESTAMP`,
`MAX_DEPTH`, also read from a `.env` file), a YAML file given with
`--config`, and command-line flags.

Usage
-----
    OBSIDIAN_VAULT=~/Notes uv run daily-export
    uv run daily-export export --vault ~/Notes --days 14 --export-base ./exports
    uv run daily-export concat --dir ./exports/export-20260121_120000
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from daily_export import __version__
from daily_export.exceptions import MissingVaultPathError
from daily_export.exporter import DailyNoteExporter
from daily_export.logging import logger, setup_logging
from daily_export.output_construction import concatenate_notes
from daily_export.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence

COMMANDS = ("export", "concat")


def build_parser() -> argparse.ArgumentParser:
    """Build the `daily-export` argument parser with its two sub-commands."""
    p = argparse.ArgumentParser(
        prog="daily-export",
        description="Export recent daily notes and their linked notes from a Markdown vault.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="YAML settings file.")
    common.add_argument("--log-file", type=str, default=None, help="Log file path.")
    common.add_argument("--verbose", action="store_true", default=None, help="Log link resolution details.")

    export = sub.add_parser("export", parents=[common], help="Export daily notes (default).")
    export.add_argument("--vault", type=str, default=None, help="Vault root (env: OBSIDIAN_VAULT).")
    export.add_argument("--days", dest="days_back", type=int, default=None, help="Days to export (env: DAYS_BACK).")
    export.add_argument(
        "--export-base",
        type=str,
        default=None,
        help="Parent directory of export-<timestamp>/ (env: EXPORT_BASE).",
    )
    export.add_argument(
        "--timestamp",
        type=str,
        default=None,
        help="Fixed timestamp for the export directory (env: EXPORT_TIMESTAMP).",
    )
    export.add_argument("--max-depth", type=int, default=None, help="Link hops to follow (env: MAX_DEPTH).")
    export.add_argument("--no-tree", action="store_true", default=None, help="Do not use `tree -J` for indexing.")

    concat = sub.add_parser("concat", parents=[common], help="Package a directory of notes into export.xml.")
    concat.add_argument("--dir", dest="directory", type=str, default=".", help="Directory to package.")
    concat.add_argument("--output", type=str, default=None, help="Output file (default: <dir>/export.xml).")
    return p


def parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.Namespace, Settings]:
    """Parse the command line and merge it with the environment and the config file.

    Args:
        argv (Sequence[str] | None, optional): arguments without the program name. Defaults to None.

    Returns:
        tuple[argparse.Namespace, Settings]: raw arguments and merged settings
    """
    args_list = list(sys.argv[1:] if argv is None else argv)
    if not args_list or args_list[0] not in {*COMMANDS, "-h", "--help", "--version"}:
        args_list.insert(0, "export")
    args = build_parser().parse_args(args_list)

    overrides = {k: v for k, v in vars(args).items() if k not in {"command", "config", "directory"}}
    settings = Settings.from_sources(overrides, config_file=args.config)
    return args, settings


def run_export(settings: Settings) -> int:
    """Run an export then package its notes.

    Args:
        settings (Settings): merged settings

    Returns:
        int: process exit code
    """
    try:
        exporter = DailyNoteExporter.from_settings(
            settings.model_copy(update={"vault": resolve_vault(settings.vault)}),
        )
    except MissingVaultPathError as e:
        logger.error("configuration_error", error=e.message)  # noqa: TRY400
        return 2

    result = exporter.run()
    result.aggregate = concatenate_notes(result.export_dir, fs=exporter.fs)

    print(f"Exported {result.total_files} files ({result.daily_notes_count} daily notes) to {result.export_dir}")
    print(f"Wrote {result.aggregate}")
    return 0


def run_concat(directory: Path, settings: Settings) -> int:
    """Package the notes of `directory` into one XML document."""
    output = Path(settings.output) if settings.output else None
    written = concatenate_notes(directory.resolve(), output)
    print(f"Wrote {written}")
    return 0


def resolve_vault(vault: str) -> str:
    """Make a configured vault path absolute, keeping "" as "not configured"."""
    if not vault.strip():
        return ""
    return str(Path(vault).expanduser().resolve())


def main(argv: Sequence[str] | None = None) -> int:
    args, settings = parse_args(argv)
    if settings.log_file or settings.verbose:
        setup_logging(settings.log_file or None, verbose=settings.verbose)

    if args.command == "concat":
        return run_concat(Path(args.directory), settings)
    return run_export(settings)


if __name__ == "__main__":
    raise SystemExit(main())
