from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from daily_export.config import DEFAULT_DAYS_BACK, DEFAULT_EXPORT_BASE, DEFAULT_MAX_DEPTH, ExportResult
from daily_export.daily_notes import locate_daily_notes
from daily_export.exceptions import MissingVaultPathError
from daily_export.file_index import FileIndex, build_file_index, normalize_name
from daily_export.file_manipulation import LocalFileSystem, now_timestamp, relpath
from daily_export.logging import logger
from daily_export.manifest import build_manifest, write_manifest
from daily_export.wikilinks import extract_wiki_links

if TYPE_CHECKING:
    from datetime import date

    from daily_export.file_manipulation import FileSystem
    from daily_export.settings import Settings


class DailyNoteExporter:
    """Copy recent daily notes and the notes they link to into an export directory.

    One instance is one run. `copied_files` and `processed_links` are shared by
    every daily note walked during the run, so a note reached from several
    daily notes is copied once and its links are expanded once.

    Attributes:
        export_dir: `<export_base>/export-<timestamp>`.
        file_index: normalized title -> note path, filled by `build_file_index`.
        copied_files: source notes already copied.
        processed_links: source notes whose links were already followed.
        tree_used: whether `tree -J` built the index.
    """

    def __init__(
        self,
        vault_path: str | Path | None,
        *,
        days_back: int = DEFAULT_DAYS_BACK,
        export_base: str | Path = DEFAULT_EXPORT_BASE,
        timestamp: str | None = None,
        file_system: FileSystem | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        use_tree: bool = True,
        today: date | None = None,
    ) -> None:
        if vault_path is None or not str(vault_path).strip():
            raise MissingVaultPathError

        self.vault_path = Path(vault_path).expanduser().resolve()
        self.days_back = days_back
        self.export_base = Path(export_base)
        self.timestamp = timestamp or now_timestamp()
        self.export_dir = self.export_base / f"export-{self.timestamp}"
        self.max_depth = max_depth
        self.use_tree = use_tree
        self.today = today
        self.fs: FileSystem = file_system or LocalFileSystem()

        self.file_index: FileIndex = FileIndex()
        self.tree_used = False
        self.copied_files: set[Path] = set()
        self.processed_links: set[Path] = set()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: object) -> DailyNoteExporter:
        """Create an exporter from merged settings; `kwargs` are passed through."""
        return cls(
            settings.vault,
            days_back=settings.days_back,
            export_base=settings.export_base,
            timestamp=settings.timestamp or None,
            max_depth=settings.max_depth,
            use_tree=not settings.no_tree,
            **kwargs,  # type: ignore[arg-type]
        )

    def run(self) -> ExportResult:
        """Export the daily notes of the last `days_back` days and their linked notes.

        Returns:
            ExportResult: destination, copied file count and daily note count
        """
        logger.info(
            "export_started",
            vault=str(self.vault_path),
            days_back=self.days_back,
            export_dir=str(self.export_dir),
        )
        self.fs.mkdir_p(self.export_dir)

        self.build_file_index()

        daily_notes = self.get_daily_notes_for_last_n_days(self.days_back)
        logger.info("daily_notes_found", count=len(daily_notes))

        for note_path in daily_notes:
            self.export_note_with_links(note_path)

        manifest = build_manifest(
            self.vault_path,
            days_back=self.days_back,
            daily_notes=daily_notes,
            copied_files=self.copied_files,
            tree_used=self.tree_used,
            fs=self.fs,
        )
        write_manifest(self.export_dir, manifest, self.fs)

        logger.info("export_complete", export_dir=str(self.export_dir), total_files=len(self.copied_files))
        return ExportResult(
            export_dir=self.export_dir,
            total_files=len(self.copied_files),
            daily_notes_count=len(daily_notes),
            daily_notes=daily_notes,
            tree_used=self.tree_used,
        )

    def build_file_index(self) -> FileIndex:
        """Index every note of the vault by normalized title."""
        self.file_index, self.tree_used = build_file_index(self.vault_path, self.fs, use_tree=self.use_tree)
        logger.info("index_built", notes=len(self.file_index), tree_used=self.tree_used)
        return self.file_index

    def get_daily_notes_for_last_n_days(self, days: int) -> list[Path]:
        """Resolve the daily notes of the last `days` days, most recent first."""
        return locate_daily_notes(self.vault_path, days, self.file_index, self.fs, today=self.today)

    def find_file_for_link(self, link: str) -> Path | None:
        """Resolve a wiki link target to a note.

        Only the last `/` segment counts: `[[Folder/Page]]` resolves like `[[Page]]`.

        Args:
            link (str): the link target as extracted from the note

        Returns:
            Path | None: the indexed note, or None when no note has that title
        """
        search_name = link.split("/")[-1]
        return self.file_index.get(normalize_name(search_name))

    def relative_path(self, path: Path) -> str:
        """Path of a vault note relative to the vault root."""
        return relpath(path, self.vault_path)

    def copy_file(self, source: Path) -> None:
        """Copy a note under the export directory at its vault-relative path, once."""
        if source in self.copied_files:
            return

        relative = self.relative_path(source)
        dest = self.export_dir / relative
        self.fs.mkdir_p(dest.parent)
        self.fs.copy_file(source, dest)
        self.copied_files.add(source)

        logger.info("note_copied", path=relative)

    def export_note_with_links(self, note_path: Path, depth: int = 0, max_depth: int | None = None) -> None:
        """Copy a note, then follow its wiki links depth first.

        Nothing happens past `max_depth` hops, for a missing file, or for a note
        whose links were already followed (which also breaks link cycles). A
        note that cannot be read is still copied but its links are not followed.

        Args:
            note_path (Path): the note to export
            depth (int, optional): hops from the daily note. Defaults to 0.
            max_depth (int | None, optional): hop limit. Defaults to the exporter's `max_depth`.
        """
        limit = self.max_depth if max_depth is None else max_depth
        if depth > limit:
            return
        if not self.fs.file_exist(note_path):
            logger.debug("note_missing", path=str(note_path))
            return
        if note_path in self.processed_links:
            return

        self.processed_links.add(note_path)
        self.copy_file(note_path)

        try:
            content = self.fs.read_file(note_path)
        except OSError as e:
            logger.warning("note_unreadable", path=str(note_path), error=str(e))
            return
        wiki_links = extract_wiki_links(content)
        if wiki_links:
            logger.debug("links_found", note=note_path.name, links=wiki_links)

        for link in wiki_links:
            linked_file = self.find_file_for_link(link)
            if linked_file is None:
                logger.info("link_not_found", note=note_path.name, link=link)
                continue
            logger.debug("link_resolved", link=link, path=str(linked_file))
            if self.fs.file_exist(linked_file):
                self.export_note_with_links(linked_file, depth + 1, limit)
