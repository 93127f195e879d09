from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from daily_export.config import DAILY_NOTE_FORMATS, NOTE_SUFFIX

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from daily_export.file_manipulation import FileSystem


def candidate_names(day: date) -> list[str]:
    """File stems a daily note for `day` may use, in lookup order."""
    return [day.strftime(fmt) for fmt in DAILY_NOTE_FORMATS]


def last_n_days(days: int, today: date | None = None) -> list[date]:
    """Return the last `days` calendar days, today first.

    Args:
        days (int): how many days to go back, today included
        today (date | None, optional): the reference day. Defaults to `date.today()`.

    Returns:
        list[date]: `days` dates in decreasing order
    """
    start = today or date.today()  # noqa: DTZ011
    return [start - timedelta(days=i) for i in range(max(0, days))]


def find_daily_note(vault: Path, day: date, index: Mapping[str, Path], fs: FileSystem) -> Path | None:
    """Find the daily note of one day.

    Each naming convention is tried in turn, and for each one: a note at the
    vault root, a note inside a folder of the same name, then the title index.
    The index lookup uses a plain lowercase of the stem, not `normalize_name`.

    Args:
        vault (Path): the vault root
        day (date): the day to look for
        index (Mapping[str, Path]): the title index
        fs (FileSystem): filesystem used for existence checks

    Returns:
        Path | None: the first match, or None when the day has no note
    """
    for name in candidate_names(day):
        direct = vault / f"{name}{NOTE_SUFFIX}"
        if fs.file_exist(direct):
            return direct

        nested = vault / name / f"{name}{NOTE_SUFFIX}"
        if fs.file_exist(nested):
            return nested

        indexed = index.get(name.lower())
        if indexed:
            return indexed
    return None


def locate_daily_notes(
    vault: Path,
    days: int,
    index: Mapping[str, Path],
    fs: FileSystem,
    *,
    today: date | None = None,
) -> list[Path]:
    """Collect the daily notes of the last `days` days.

    Args:
        vault (Path): the vault root
        days (int): number of days, today included
        index (Mapping[str, Path]): the title index
        fs (FileSystem): filesystem used for existence checks
        today (date | None, optional): the reference day. Defaults to `date.today()`.

    Returns:
        list[Path]: one note per day that has one, most recent first, without duplicates
    """
    notes: list[Path] = []
    for day in last_n_days(days, today):
        note = find_daily_note(vault, day, index, fs)
        if note is not None and note not in notes:
            notes.append(note)
    return notes
