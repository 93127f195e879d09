from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from daily_export.config import NOTE_SUFFIX, TIMESTAMP_FORMAT

if TYPE_CHECKING:
    from collections.abc import Iterator


class FileSystem(Protocol):
    """The filesystem operations the exporter and the serializer rely on."""

    def file_exist(self, path: Path) -> bool: ...

    def read_file(self, path: Path) -> str: ...

    def write_file(self, path: Path, content: str) -> None: ...

    def copy_file(self, source: Path, dest: Path) -> None: ...

    def mkdir_p(self, path: Path) -> None: ...

    def file_size(self, path: Path) -> int: ...

    def walk_notes(self, root: Path) -> Iterator[Path]: ...


class LocalFileSystem:
    """`FileSystem` backed by the real disk."""

    def file_exist(self, path: Path) -> bool:
        return path.is_file()

    def read_file(self, path: Path) -> str:
        # newline="" keeps CRLF intact; surrogateescape carries non-UTF-8 bytes through to write_file
        return path.read_text(encoding="utf-8", errors="surrogateescape", newline="")

    def write_file(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8", errors="surrogateescape", newline="")

    def copy_file(self, source: Path, dest: Path) -> None:
        shutil.copyfile(source, dest)

    def mkdir_p(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def file_size(self, path: Path) -> int:
        return path.stat().st_size

    def walk_notes(self, root: Path) -> Iterator[Path]:
        return walk_notes(root)


def is_hidden(name: str) -> bool:
    """Check if a directory entry is hidden (dot-prefixed, e.g. `.obsidian`, `.trash`).

    Args:
        name (str): the entry name

    Returns:
        bool: True if the entry should be skipped while enumerating notes
    """
    return name.startswith(".")


def walk_notes(root: Path) -> Iterator[Path]:
    """Yield every note file under `root` in a stable order.

    The order is depth first, and inside each directory entries are sorted by
    name with files and directories interleaved, the same order `tree` prints
    under the C locale. Hidden entries and symlinks are skipped.

    Args:
        root (Path): the directory to walk

    Yields:
        Iterator[Path]: paths of `.md` files under `root`
    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except (FileNotFoundError, NotADirectoryError):
        return
    for entry in entries:
        if is_hidden(entry.name) or entry.is_symlink():
            continue
        if entry.is_dir():
            yield from walk_notes(entry)
        elif entry.suffix == NOTE_SUFFIX and entry.is_file():
            yield entry


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string
            with any leading separator removed.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path).replace("\\", "/").lstrip("/")


def now_timestamp() -> str:
    """Return the local time formatted for export directory names (`20260121_120000`).

    Returns:
        str: the current local time as `%Y%m%d_%H%M%S`
    """
    return datetime.now().strftime(TIMESTAMP_FORMAT)  # noqa: DTZ005


def now_display() -> str:
    """Return the local time formatted for the manifest (`2026-01-21 12:00:00`).

    Returns:
        str: the current local time as `%Y-%m-%d %H:%M:%S`
    """
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")  # noqa: DTZ005
