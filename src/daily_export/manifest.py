from __future__ import annotations

import io
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from daily_export.config import MANIFEST_NAME
from daily_export.file_manipulation import now_display, relpath
from daily_export.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from daily_export.file_manipulation import FileSystem

KIB = 1024
MIB = 1024**2
TENTH = Decimal("0.1")


def format_size(size: int) -> str:
    """Format a byte count for the manifest.

    Each tier has an inclusive upper bound: 1023 is "1023B", 1024 is "1.0KB",
    1048576 is "1024.0KB" and anything above is shown in MB. Halves round away
    from zero, so 1280 bytes is "1.3KB".

    Args:
        size (int): size in bytes

    Returns:
        str: e.g. "512B", "2.0KB", "2.0MB"
    """
    if size < KIB:
        return f"{size}B"
    if size <= MIB:
        return f"{_one_decimal(size, KIB)}KB"
    return f"{_one_decimal(size, MIB)}MB"


def _one_decimal(size: int, unit: int) -> Decimal:
    return (Decimal(size) / unit).quantize(TENTH, rounding=ROUND_HALF_UP)


def build_manifest(
    vault: Path,
    *,
    days_back: int,
    daily_notes: Sequence[Path],
    copied_files: Iterable[Path],
    tree_used: bool,
    fs: FileSystem,
    exported_at: str | None = None,
) -> str:
    """Build the Markdown manifest of an export run.

    File sizes are read from the vault when the manifest is built.

    Args:
        vault (Path): the vault root, stripped from every listed path
        days_back (int): configured number of days
        daily_notes (Sequence[Path]): resolved daily notes, in lookup order
        copied_files (Iterable[Path]): every source note copied during the run
        tree_used (bool): whether `tree -J` built the index
        fs (FileSystem): filesystem used to read sizes
        exported_at (str | None, optional): display timestamp. Defaults to now.

    Returns:
        str: the manifest text
    """
    copied = sorted(copied_files, key=str)
    out = io.StringIO()
    out.write("# Export Manifest\n\n")
    out.write(f"**Exported**: {exported_at or now_display()}\n")
    out.write(f"**Days**: Last {days_back} days\n")
    out.write(f"**Total Files**: {len(copied)}\n")
    out.write(f"**Tree CLI Used**: {'Yes' if tree_used else 'No (fallback to traversal)'}\n\n")

    out.write("## Daily Notes\n")
    for note in daily_notes:
        out.write(f"- {relpath(note, vault)}\n")

    out.write("\n## All Exported Files\n")
    for source in copied:
        out.write(f"- {relpath(source, vault)} ({format_size(fs.file_size(source))})\n")
    return out.getvalue()


def write_manifest(export_dir: Path, content: str, fs: FileSystem) -> Path:
    """Write the manifest at its well-known name inside the export directory."""
    path = export_dir / MANIFEST_NAME
    fs.write_file(path, content)
    logger.info("manifest_written", path=str(path))
    return path
