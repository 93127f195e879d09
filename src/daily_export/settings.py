from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from daily_export.config import DEFAULT_DAYS_BACK, DEFAULT_EXPORT_BASE, DEFAULT_MAX_DEPTH

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_FILE = find_dotenv(usecwd=True)

ENV_VARS: dict[str, str] = {
    "OBSIDIAN_VAULT": "vault",
    "DAYS_BACK": "days_back",
    "EXPORT_BASE": "export_base",
    "EXPORT_TIMESTAMP": "timestamp",
    "MAX_DEPTH": "max_depth",
}


class Settings(BaseModel):
    """Configuration settings for the daily_export module."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    vault: str = Field(default="", description="Vault root directory.")
    days_back: int = Field(default=DEFAULT_DAYS_BACK, ge=0, description="Number of days to export.")
    export_base: Path = Field(default=DEFAULT_EXPORT_BASE, description="Parent of export-<timestamp>/.")
    timestamp: str = Field(default="", description="Fixed export timestamp.")
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0, description="Link hops followed from a daily note.")
    no_tree: bool = Field(default=False, description="Do not use `tree -J` for indexing.")
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log link resolution details.")
    output: str = Field(default="", description="Aggregate document path (concat).")

    @classmethod
    def from_sources(
        cls,
        overrides: Mapping[str, Any] | None = None,
        *,
        config_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Merge defaults, environment, a YAML file and explicit overrides.

        Later sources win. `None` values in `overrides` mean "not given".

        Args:
            overrides: explicit values, typically parsed command-line flags
            config_file: optional YAML mapping whose keys are field names
            environ: environment to read; defaults to `os.environ` after loading `.env`

        Returns:
            Settings: the merged settings
        """
        if environ is None:
            if ENV_FILE:
                load_dotenv(ENV_FILE, override=False)
            environ = os.environ

        values: dict[str, Any] = {}
        for var, field in ENV_VARS.items():
            raw = environ.get(var, "").strip()
            if raw:
                values[field] = raw

        if config_file:
            values.update(load_config_file(Path(config_file)))

        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})

        return cls.model_validate(values)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML settings file.

    Args:
        path (Path): the YAML file to read

    Raises:
        TypeError: if the document is not a mapping

    Returns:
        dict[str, Any]: the settings found in the file (empty for an empty file)
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping of settings"
        raise TypeError(msg)
    return {str(k).replace("-", "_"): v for k, v in data.items()}
