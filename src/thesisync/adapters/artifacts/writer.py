"""Atomic publication of the projects, metadata and organizations documents."""

from __future__ import annotations

import json
import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from thesisync.config.storage import (
    METADATA_FILENAME,
    ORGANIZATIONS_FILENAME,
    PROJECTS_FILENAME,
)
from thesisync.domain.ports.persistence import ArtifactWriteError

from .schema import build_documents

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pydantic import BaseModel

    from thesisync.domain.ports.persistence import ArtifactBundle, ArtifactWriter

log = getLogger(__name__)


def render_document(document: BaseModel) -> bytes:
    payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)
    return (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


class JsonArtifactWriter:
    """Serializes every document up front, then publishes each through a temp file.

    Nothing in ``output_dir`` is touched unless all documents serialized and staged
    cleanly. Each publish is an ``os.replace``; a crash between the individual renames
    can still leave a mix of old and new files.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def write(self, bundle: ArtifactBundle) -> dict[str, Path]:
        try:
            projects, metadata, organizations = build_documents(bundle)
            rendered = {
                PROJECTS_FILENAME: render_document(projects),
                METADATA_FILENAME: render_document(metadata),
                ORGANIZATIONS_FILENAME: render_document(organizations),
            }
        except (ValidationError, TypeError, ValueError) as exc:
            raise ArtifactWriteError(f"Could not serialize artifacts: {exc}") from exc

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactWriteError(f"Cannot create output directory {self.output_dir}") from exc

        staged: dict[str, Path] = {}
        try:
            for filename, content in rendered.items():
                staged[filename] = self._stage(filename, content)
        except OSError as exc:
            _discard(staged.values())
            raise ArtifactWriteError(f"Could not stage artifacts in {self.output_dir}") from exc

        published: dict[str, Path] = {}
        try:
            for filename, temp_path in staged.items():
                target = self.output_dir / filename
                os.replace(temp_path, target)
                published[filename] = target
                log.info(f"Wrote {target} ({len(rendered[filename]) / 1024:.2f} KB)")
        except OSError as exc:
            _discard(path for name, path in staged.items() if name not in published)
            raise ArtifactWriteError(f"Publishing artifacts failed: {exc}") from exc

        return published

    def _stage(self, filename: str, content: bytes) -> Path:
        fd, name = tempfile.mkstemp(prefix=f".{filename}.", suffix=".tmp", dir=self.output_dir)
        temp_path = Path(name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path


def _discard(paths: Iterable[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            log.warning(f"Could not remove temporary file {path}")


if TYPE_CHECKING:
    _writer_check: ArtifactWriter = JsonArtifactWriter(Path())
