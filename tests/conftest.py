from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator


class MemoryFileSystem:
    """In-memory stand-in for `LocalFileSystem` that records every write and copy."""

    def __init__(self, files: dict[str | Path, str] | None = None) -> None:
        self.files: dict[Path, str] = {Path(p): c for p, c in (files or {}).items()}
        self.dirs: set[Path] = set()
        self.copies: list[tuple[Path, Path]] = []
        self.writes: list[Path] = []

    def add(self, path: str | Path, content: str = "") -> Path:
        p = Path(path)
        self.files[p] = content
        return p

    def file_exist(self, path: Path) -> bool:
        return Path(path) in self.files

    def read_file(self, path: Path) -> str:
        try:
            return self.files[Path(path)]
        except KeyError as e:
            raise FileNotFoundError(str(path)) from e

    def write_file(self, path: Path, content: str) -> None:
        self.files[Path(path)] = content
        self.writes.append(Path(path))

    def copy_file(self, source: Path, dest: Path) -> None:
        self.files[Path(dest)] = self.read_file(source)
        self.copies.append((Path(source), Path(dest)))

    def mkdir_p(self, path: Path) -> None:
        self.dirs.add(Path(path))

    def file_size(self, path: Path) -> int:
        return len(self.read_file(path).encode("utf-8"))

    def walk_notes(self, root: Path) -> Iterator[Path]:
        under = [p for p in self.files if p.is_relative_to(root) and p.suffix == ".md"]
        visible = [p for p in under if not any(part.startswith(".") for part in p.relative_to(root).parts)]
        yield from sorted(visible, key=lambda p: p.relative_to(root).parts)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


@pytest.fixture
def export_base(tmp_path: Path) -> Path:
    base = tmp_path / "exports"
    base.mkdir()
    return base
