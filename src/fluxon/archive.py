"""Zip packaging and artifact persistence."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from fluxon import logger
from fluxon.exceptions import ArchiveError
from fluxon.typing.enums import ProgressPhase
from fluxon.typing.models import ZIP_MEDIA_TYPE, OutputArtifact, ProgressUpdate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fluxon.typing.protocol import ProgressCallback

_COMPRESS_LEVEL = 6


def build_zip(
    artifacts: Sequence[OutputArtifact],
    zip_name: str,
    *,
    on_progress: ProgressCallback | None = None,
) -> OutputArtifact:
    """Bundle artifacts into one zip archive.

    Args:
        artifacts (Sequence[OutputArtifact]): Files to bundle, stored under their filename.
        zip_name (str): Archive filename.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Raises:
        ArchiveError: If there is nothing to bundle or two artifacts share a filename.

    Returns:
        OutputArtifact: The archive.
    """
    if not artifacts:
        raise ArchiveError(message="No files to add to the archive")

    seen: set[str] = set()
    buf = io.BytesIO()
    with zipfile.ZipFile(
        buf,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=_COMPRESS_LEVEL,
    ) as zf:
        for idx, artifact in enumerate(artifacts, start=1):
            if artifact.filename in seen:
                raise ArchiveError(message=f"Duplicate filename in archive: {artifact.filename}")
            seen.add(artifact.filename)
            zf.writestr(artifact.filename, artifact.data)
            if on_progress:
                on_progress(
                    ProgressUpdate(
                        status=f"Adding {artifact.filename} ({idx}/{len(artifacts)})",
                        progress=5 + round(idx / len(artifacts) * 85),
                        phase=ProgressPhase.ARCHIVE,
                    ),
                )

    if on_progress:
        on_progress(ProgressUpdate(status="ZIP ready", progress=100, phase=ProgressPhase.ARCHIVE))

    return OutputArtifact(
        filename=zip_name,
        data=buf.getvalue(),
        media_type=ZIP_MEDIA_TYPE,
        page_numbers=[page for artifact in artifacts for page in artifact.page_numbers],
    )


def save_artifact(artifact: OutputArtifact, directory: Path) -> Path:
    """Write an artifact into `directory`.

    Args:
        artifact (OutputArtifact): File to write.
        directory (Path): Destination directory, created when missing.

    Returns:
        Path: Written file path.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / Path(artifact.filename).name
    path.write_bytes(artifact.data)
    logger.info("Artifact written", extra={"output_path": str(path), "bytes": artifact.size})
    return path


def save_artifacts(artifacts: Sequence[OutputArtifact], directory: Path) -> list[Path]:
    """Write several artifacts into `directory`.

    Args:
        artifacts (Sequence[OutputArtifact]): Files to write.
        directory (Path): Destination directory.

    Returns:
        list[Path]: Written file paths, in input order.
    """
    return [save_artifact(artifact, directory) for artifact in artifacts]
