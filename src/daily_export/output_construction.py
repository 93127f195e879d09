from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from daily_export.config import AGGREGATE_NAME, MANIFEST_NAME, ExportedNote
from daily_export.file_manipulation import LocalFileSystem, relpath
from daily_export.logging import logger

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from daily_export.file_manipulation import FileSystem

SKIP_FILES = frozenset({MANIFEST_NAME, AGGREGATE_NAME})

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&#39;"}


def escape_field(value: str) -> str:
    """Escape `&`, `<`, `>` and both quote characters for an XML text field."""
    return escape(value, _QUOTE_ENTITIES)


def wrap_cdata(content: str) -> str:
    """Wrap text in a CDATA section without altering it.

    A literal `]]>` would close the section early, so it is split across two
    adjacent sections; an XML parser still reads back the exact text.

    Args:
        content (str): the raw text

    Returns:
        str: `<![CDATA[...]]>` markup
    """
    return "<![CDATA[" + content.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def find_note_files(export_dir: Path, fs: FileSystem, skip: Collection[str] = SKIP_FILES) -> list[str]:
    """List the notes to serialize.

    Args:
        export_dir (Path): the directory to scan
        fs (FileSystem): filesystem used to enumerate notes
        skip (Collection[str], optional): file names left out (exact match). Defaults to SKIP_FILES.

    Returns:
        list[str]: POSIX paths relative to `export_dir`, sorted
    """
    return sorted(relpath(p, export_dir) for p in fs.walk_notes(export_dir) if p.name not in skip)


def read_exported_notes(
    export_dir: Path,
    fs: FileSystem,
    skip: Collection[str] = SKIP_FILES,
) -> list[ExportedNote]:
    """Read back every note of an export directory, in serialization order."""
    notes: list[ExportedNote] = []
    for rel in find_note_files(export_dir, fs, skip):
        notes.append(
            ExportedNote(
                filename=Path(rel).name,
                path=rel,
                content=fs.read_file(export_dir / rel),
            ),
        )
    return notes


def build_xml(notes: Sequence[ExportedNote]) -> str:
    """Build the aggregate XML document.

    Each note becomes a `<note>` with `<filename>`, `<path>` and `<content>`.
    File names and paths are escaped; the content goes into CDATA untouched,
    so a parser reads back exactly the text of the source file.

    Args:
        notes (Sequence[ExportedNote]): the notes, already in output order

    Returns:
        str: the document text
    """
    out = io.StringIO()
    out.write('<?xml version="1.0" encoding="UTF-8"?>\n')
    out.write("<notes>\n")
    for note in notes:
        out.write("  <note>\n")
        out.write(f"    <filename>{escape_field(note.filename)}</filename>\n")
        out.write(f"    <path>{escape_field(note.path)}</path>\n")
        out.write(f"    <content>{wrap_cdata(note.content)}</content>\n")
        out.write("  </note>\n")
    out.write("</notes>\n")
    return out.getvalue()


def concatenate_notes(
    export_dir: Path,
    output: Path | None = None,
    fs: FileSystem | None = None,
) -> Path:
    """Serialize every note under `export_dir` into one XML document.

    Works on any directory of Markdown files, not only on export directories.

    Args:
        export_dir (Path): the directory to package
        output (Path | None, optional): destination file. Defaults to `export_dir / "export.xml"`.
        fs (FileSystem | None, optional): filesystem to use. Defaults to the local disk.

    Returns:
        Path: the path of the written document
    """
    fs = fs or LocalFileSystem()
    output = output or export_dir / AGGREGATE_NAME
    notes = read_exported_notes(export_dir, fs, skip=SKIP_FILES | {output.name})
    fs.write_file(output, build_xml(notes))
    logger.info("aggregate_written", path=str(output), notes=len(notes))
    return output
