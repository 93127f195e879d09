from __future__ import annotations

from pathlib import Path

import pytest

from daily_export.manifest import build_manifest, format_size, write_manifest

VAULT = Path("/vaults/notes")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0B"),
        (512, "512B"),
        (1023, "1023B"),
        (1024, "1.0KB"),
        (1280, "1.3KB"),
        (2048, "2.0KB"),
        (1024**2, "1024.0KB"),
        (1024**2 + 1, "1.0MB"),
        (1_310_720, "1.3MB"),
        (2_097_152, "2.0MB"),
    ],
)
def test_format_size(size: int, expected: str) -> None:
    assert format_size(size) == expected


@pytest.mark.unit
def test_build_manifest_lists_daily_notes_and_sorted_files(memory_fs) -> None:  # noqa: ANN001
    daily = memory_fs.add(VAULT / "2026-01-21.md", "x" * 10)
    linked = memory_fs.add(VAULT / "Areas" / "Linked Page.md", "y" * 2048)

    content = build_manifest(
        VAULT,
        days_back=7,
        daily_notes=[daily],
        copied_files={daily, linked},
        tree_used=False,
        fs=memory_fs,
        exported_at="2026-01-21 12:00:00",
    )

    assert content == (
        "# Export Manifest\n\n"
        "**Exported**: 2026-01-21 12:00:00\n"
        "**Days**: Last 7 days\n"
        "**Total Files**: 2\n"
        "**Tree CLI Used**: No (fallback to traversal)\n\n"
        "## Daily Notes\n"
        "- 2026-01-21.md\n"
        "\n## All Exported Files\n"
        "- 2026-01-21.md (10B)\n"
        "- Areas/Linked Page.md (2.0KB)\n"
    )


@pytest.mark.unit
def test_build_manifest_reads_sizes_at_build_time(memory_fs) -> None:  # noqa: ANN001
    note = memory_fs.add(VAULT / "Note.md", "short")
    memory_fs.files[note] = "z" * 1024

    content = build_manifest(
        VAULT,
        days_back=1,
        daily_notes=[],
        copied_files=[note],
        tree_used=True,
        fs=memory_fs,
    )

    assert "- Note.md (1.0KB)" in content
    assert "**Tree CLI Used**: Yes" in content


@pytest.mark.unit
def test_write_manifest_uses_fixed_name(memory_fs) -> None:  # noqa: ANN001
    export_dir = Path("/exports/export-20260121_120000")

    path = write_manifest(export_dir, "# Export Manifest\n", memory_fs)

    assert path == export_dir / "MANIFEST.md"
    assert memory_fs.files[path] == "# Export Manifest\n"
