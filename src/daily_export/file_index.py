from __future__ import annotations

import os
import re
import shutil
import subprocess  # noqa: S404
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from daily_export.config import DASH_TRANSLATION, NOTE_SUFFIX, TREE_LISTING, TreeNode
from daily_export.exceptions import DailyExportError, MalformedTreeListingError, TreeCommandError
from daily_export.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from daily_export.file_manipulation import FileSystem

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    """Canonicalize a note title for lookups.

    Unicode dashes become "-", whitespace runs become one space, then the
    result is lowercased and stripped. The order matters: "A — B" and
    "a - b" must land on the same key.

    Args:
        name (str | None): the raw title, usually a file stem or a link target

    Returns:
        str: the normalized key, "" for None or empty input
    """
    if not name:
        return ""
    n = name.translate(DASH_TRANSLATION)
    n = _WHITESPACE_RE.sub(" ", n)
    return n.lower().strip()


class FileIndex(Mapping[str, Path]):
    """Normalized note title -> absolute note path.

    Keys are only ever added, never replaced: when two notes share a
    normalized title, the first one registered wins.
    """

    def __init__(self) -> None:
        self._paths: dict[str, Path] = {}

    def register(self, key: str, path: Path) -> bool:
        """Insert `key -> path` unless `key` is already present.

        Args:
            key (str): a normalized title
            path (Path): the note it designates

        Returns:
            bool: True if the entry was added
        """
        if key in self._paths:
            return False
        self._paths[key] = path
        return True

    def __getitem__(self, key: str) -> Path:
        return self._paths[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"FileIndex({len(self)} notes)"


def register_note(index: FileIndex, path: Path) -> bool:
    """Register a note under the normalized form of its file stem."""
    if path.suffix != NOTE_SUFFIX:
        return False
    return index.register(normalize_name(path.stem), path)


def tree_available() -> bool:
    """Check if the `tree` command is on PATH."""
    return shutil.which("tree") is not None


def load_tree_listing(vault: Path) -> list[TreeNode]:
    """Run `tree -J` on the vault and parse its JSON output.

    Hidden entries are left out (no `-a`). `LC_ALL=C` makes tree sort names
    bytewise, matching `walk_notes`; `-N` stops it from escaping the non-ASCII
    bytes that locale would otherwise treat as unprintable.

    Args:
        vault (Path): the vault root

    Raises:
        TreeCommandError: if `tree` exits with an error, cannot start, or prints nothing.
        MalformedTreeListingError: if the output is not a JSON array of nodes.

    Returns:
        list[TreeNode]: the top-level nodes of the listing
    """
    command = ["tree", "-J", "-N", str(vault)]
    try:
        out = subprocess.run(  # noqa: S603
            command,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            capture_output=True,
            check=False,
            env={**os.environ, "LC_ALL": "C"},
        )
    except OSError as e:
        raise TreeCommandError(command=" ".join(command), returncode=-1, stdout="", stderr=str(e)) from e
    if out.returncode != 0 or not out.stdout.strip():
        raise TreeCommandError(
            command=" ".join(command),
            returncode=out.returncode,
            stdout=out.stdout,
            stderr=out.stderr,
        )
    try:
        return TREE_LISTING.validate_json(out.stdout)
    except ValidationError as e:
        raise MalformedTreeListingError(folder=vault, reason=str(e)) from e


def index_tree_nodes(
    index: FileIndex,
    nodes: Sequence[TreeNode] | None,
    vault: Path,
    base_path: str = "",
) -> None:
    """Register every note found in a `tree -J` listing.

    Report nodes and nodes without a name are skipped. A node's path is its
    parent's path joined with its name; relative results are anchored at the
    vault root, absolute ones (the listing root) are kept as they are.

    Args:
        index (FileIndex): the index to fill
        nodes (Sequence[TreeNode] | None): sibling nodes to visit
        vault (Path): the vault root
        base_path (str): path of the parent node, "" at the top level
    """
    if not nodes:
        return
    for node in nodes:
        if node.type == "report" or not node.name:
            continue
        current_path = node.name if not base_path else os.path.join(base_path, node.name)  # noqa: PTH118
        full_path = Path(current_path) if os.path.isabs(current_path) else vault / current_path  # noqa: PTH117
        if node.type == "file" and full_path.suffix == NOTE_SUFFIX:
            register_note(index, full_path)
        elif node.type == "directory" and node.contents:
            index_tree_nodes(index, node.contents, vault, current_path)


def index_by_traversal(index: FileIndex, vault: Path, fs: FileSystem) -> None:
    """Register every note found by walking the vault directly."""
    for path in fs.walk_notes(vault):
        register_note(index, path)


def build_file_index(vault: Path, fs: FileSystem, *, use_tree: bool = True) -> tuple[FileIndex, bool]:
    """Build the title index of a vault.

    Prefers `tree -J` when allowed and installed, and falls back to a direct
    traversal when the listing is unavailable or unreadable.

    Args:
        vault (Path): the vault root
        fs (FileSystem): filesystem used by the traversal
        use_tree (bool, optional): whether to try `tree -J` first. Defaults to True.

    Returns:
        tuple[FileIndex, bool]: the index, and whether `tree -J` produced it
    """
    if use_tree and tree_available():
        index = FileIndex()
        try:
            index_tree_nodes(index, load_tree_listing(vault), vault)
        except DailyExportError as e:
            logger.warning("tree_fallback", vault=str(vault), error=repr(e))
        else:
            return index, True

    index = FileIndex()
    index_by_traversal(index, vault, fs)
    return index, False
