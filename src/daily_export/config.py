from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

NOTE_SUFFIX = ".md"
MANIFEST_NAME = "MANIFEST.md"
AGGREGATE_NAME = "export.xml"

DEFAULT_DAYS_BACK = 7
DEFAULT_MAX_DEPTH = 3
DEFAULT_EXPORT_BASE = Path(tempfile.gettempdir())
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# U+2010..U+2015: hyphen, non-breaking hyphen, figure dash, en dash, em dash, horizontal bar
DASH_TRANSLATION = str.maketrans(dict.fromkeys("\u2010\u2011\u2012\u2013\u2014\u2015", "-"))

DAILY_NOTE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",  # 2026-01-21
    "%B %d, %Y",  # January 21, 2026
    "%b %d, %Y",  # Jan 21, 2026
    "%d-%m-%Y",  # 21-01-2026
)


class TreeNode(BaseModel):
    """One node of a `tree -J` listing.

    Attributes:
        type: "file", "directory", "report" (or any other tree node kind, ignored).
        name: Node name; absolute for the listing root, a bare name otherwise.
        contents: Child nodes, present on directories only.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: str = Field(default="", description="Node kind")
    name: str | None = Field(default=None, description="Entry name")
    contents: list[TreeNode] | None = Field(default=None, description="Children of a directory")


TREE_LISTING = TypeAdapter(list[TreeNode])


class ExportedNote(BaseModel):
    """A note read back from an export directory for serialization.

    Attributes:
        filename: Bare file name, e.g. "Linked Page.md".
        path: POSIX path relative to the export directory.
        content: Raw file content, newlines untouched.
    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="File name")
    path: str = Field(..., description="Path relative to the export root")
    content: str = Field(..., description="Raw note text")


class ExportResult(BaseModel):
    """Outcome of one export run."""

    export_dir: Path = Field(..., description="Destination root of the run")
    total_files: int = Field(..., ge=0, description="Number of notes copied")
    daily_notes_count: int = Field(..., ge=0, description="Number of daily notes resolved")
    daily_notes: list[Path] = Field(default_factory=list, description="Resolved daily note paths")
    tree_used: bool = Field(default=False, description="Whether `tree -J` built the index")
    aggregate: Path | None = Field(default=None, description="Aggregate XML document, once written")
