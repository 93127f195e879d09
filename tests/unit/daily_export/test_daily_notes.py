from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from daily_export.daily_notes import candidate_names, last_n_days, locate_daily_notes
from daily_export.file_index import FileIndex

VAULT = Path("/vaults/notes")
TODAY = date(2026, 1, 21)


@pytest.mark.unit
def test_candidate_names_cover_every_convention() -> None:
    assert candidate_names(date(2026, 1, 5)) == [
        "2026-01-05",
        "January 05, 2026",
        "Jan 05, 2026",
        "05-01-2026",
    ]


@pytest.mark.unit
def test_last_n_days_counts_back_from_today() -> None:
    assert last_n_days(3, TODAY) == [date(2026, 1, 21), date(2026, 1, 20), date(2026, 1, 19)]
    assert last_n_days(0, TODAY) == []


@pytest.mark.unit
def test_locate_daily_notes_iso_names(memory_fs) -> None:  # noqa: ANN001
    memory_fs.add(VAULT / "2026-01-21.md")
    memory_fs.add(VAULT / "2026-01-20.md")

    notes = locate_daily_notes(VAULT, 2, FileIndex(), memory_fs, today=TODAY)

    assert notes == [VAULT / "2026-01-21.md", VAULT / "2026-01-20.md"]


@pytest.mark.unit
def test_locate_daily_notes_long_month_name(memory_fs) -> None:  # noqa: ANN001
    memory_fs.add(VAULT / "January 21, 2026.md")

    assert locate_daily_notes(VAULT, 1, FileIndex(), memory_fs, today=TODAY) == [VAULT / "January 21, 2026.md"]


@pytest.mark.unit
def test_locate_daily_notes_nested_folder(memory_fs) -> None:  # noqa: ANN001
    memory_fs.add(VAULT / "21-01-2026" / "21-01-2026.md")

    assert locate_daily_notes(VAULT, 1, FileIndex(), memory_fs, today=TODAY) == [
        VAULT / "21-01-2026" / "21-01-2026.md",
    ]


@pytest.mark.unit
def test_locate_daily_notes_index_uses_plain_lowercase(memory_fs) -> None:  # noqa: ANN001
    index = FileIndex()
    index.register("jan 21, 2026", VAULT / "Journal" / "Jan 21, 2026.md")

    assert locate_daily_notes(VAULT, 1, index, memory_fs, today=TODAY) == [VAULT / "Journal" / "Jan 21, 2026.md"]


@pytest.mark.unit
def test_locate_daily_notes_direct_path_wins_over_later_conventions(memory_fs) -> None:  # noqa: ANN001
    memory_fs.add(VAULT / "2026-01-21.md")
    memory_fs.add(VAULT / "January 21, 2026.md")
    index = FileIndex()
    index.register("2026-01-21", VAULT / "Archive" / "2026-01-21.md")

    assert locate_daily_notes(VAULT, 1, index, memory_fs, today=TODAY) == [VAULT / "2026-01-21.md"]


@pytest.mark.unit
def test_locate_daily_notes_deduplicates_and_skips_missing_days(memory_fs) -> None:  # noqa: ANN001
    shared = VAULT / "Week.md"
    index = FileIndex()
    index.register("2026-01-21", shared)
    index.register("2026-01-19", shared)

    notes = locate_daily_notes(VAULT, 3, index, memory_fs, today=TODAY)

    assert notes == [shared]
