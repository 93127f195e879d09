from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DailyExportError(Exception):
    """Base exception for errors in the daily_export module."""


@dataclass(frozen=True)
class MissingVaultPathError(DailyExportError):
    """Raised when no vault root is configured."""

    message: str = "Vault path cannot be empty."


@dataclass(frozen=True)
class TreeCommandError(DailyExportError):
    """Raised when the `tree` listing command fails or prints nothing."""

    command: str
    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class MalformedTreeListingError(DailyExportError):
    """Raised when the `tree -J` output is not a JSON array of nodes."""

    folder: Path
    reason: str
