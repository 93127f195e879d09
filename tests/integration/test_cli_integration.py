from datetime import date
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from daily_export import cli, file_index
from daily_export.config import TREE_LISTING


@pytest.mark.integration
def test_main_uses_tree_listing_when_available(
    vault_dir: Path,
    export_base: Path,
    mocker: MockerFixture,
) -> None:
    vault = vault_dir.resolve()
    stem = date.today().isoformat()  # noqa: DTZ011
    note = vault / "Journal" / f"{stem}.md"
    note.parent.mkdir()
    note.write_text("from tree", encoding="utf-8")
    listing = [
        {
            "type": "directory",
            "name": str(vault),
            "contents": [
                {"type": "directory", "name": "Journal", "contents": [{"type": "file", "name": f"{stem}.md"}]},
            ],
        },
        {"type": "report", "directories": 1, "files": 1},
    ]
    mocker.patch.object(file_index, "tree_available", return_value=True)
    mocker.patch.object(file_index, "load_tree_listing", return_value=TREE_LISTING.validate_python(listing))

    exit_code = cli.main(
        [
            "export",
            "--vault",
            str(vault),
            "--export-base",
            str(export_base),
            "--timestamp",
            "fixed",
            "--days",
            "1",
        ],
    )

    assert exit_code == 0
    export_dir = export_base / "export-fixed"
    assert (export_dir / "Journal" / f"{stem}.md").read_text(encoding="utf-8") == "from tree"
    assert "**Tree CLI Used**: Yes" in (export_dir / "MANIFEST.md").read_text(encoding="utf-8")
    assert "<path>Journal/" in (export_dir / "export.xml").read_text(encoding="utf-8")
