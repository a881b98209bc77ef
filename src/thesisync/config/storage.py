"""Output storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_OUTPUT_DIR: Final[str] = "data"
PROJECTS_FILENAME: Final[str] = "projects.json"
METADATA_FILENAME: Final[str] = "metadata.json"
ORGANIZATIONS_FILENAME: Final[str] = "organizations.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    output_dir: Path

    def resolve_output_dir(self) -> Path:
        return self.output_dir.expanduser().resolve()


def get_storage_config(*, output_dir: str | Path | None = None) -> StorageConfig:
    if output_dir is not None:
        return StorageConfig(output_dir=Path(output_dir))
    env_dir = os.getenv("SYNC_OUTPUT_DIR")
    return StorageConfig(output_dir=Path(env_dir) if env_dir else Path(DEFAULT_OUTPUT_DIR))
