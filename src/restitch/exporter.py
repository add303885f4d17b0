"""
Export Pipeline

Turns sequences into stitched media files.

Workflow (one sequence):
    1. Check every clip has a readable file
    2. Stage the files into a fresh workspace as input0, input1, ...
    3. Write the concat manifest in sequence order
    4. One ffmpeg concat with stream copy
    5. Read the output; the workspace is removed whatever happened

Batch export runs the same steps for each sequence, one at a time, and
zips the results. The first failure aborts the batch and no archive is
produced.

Usage:
    exporter = SequenceExporter()
    artifact = asyncio.run(exporter.export_one(sequence))
    archive = asyncio.run(exporter.export_all(sequences))
"""

import asyncio
import time
from pathlib import Path
from typing import Iterable, List, Optional

from .archive import build_archive, write_bytes
from .config import ExportConfig, get_settings
from .exceptions import (
    BatchExportError,
    EmptyInputError,
    MissingPayloadError,
    RestitchError,
)
from .logger import log_step, log_success, logger
from .media_service import FFmpegMediaService, MediaService
from .models import ExportArtifact, Sequence
from .workspace import TransientWorkspace

OUTPUT_NAME = "output.mp4"


class SequenceExporter:
    """
    Concatenates sequences via the media service.

    Exports are serialized through a lock: only one export is in flight
    per exporter even if callers schedule several concurrently.
    """

    def __init__(
        self,
        media_service: Optional[MediaService] = None,
        temp_dir: Optional[Path] = None,
        export_config: Optional[ExportConfig] = None,
    ):
        settings = get_settings()
        self.media_service = media_service or FFmpegMediaService()
        self.temp_dir = Path(temp_dir) if temp_dir is not None else settings.paths.temp_dir
        self.export_config = export_config or settings.export
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _export_lock(self) -> asyncio.Lock:
        """Lock bound to the running loop; each asyncio.run gets a fresh one."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def artifact_name(self, label: str) -> str:
        return f"{self.export_config.name_prefix} {label}{self.export_config.output_suffix}"

    @staticmethod
    def check_payloads(sequence: Sequence) -> None:
        for clip in sequence.clips:
            if not clip.has_payload:
                raise MissingPayloadError(
                    clip.id,
                    clip.name,
                    str(clip.payload) if clip.payload is not None else None,
                )

    async def export_one(self, sequence: Sequence, name: Optional[str] = None) -> ExportArtifact:
        """Stitch one sequence; returns the file bytes and a display name."""
        self.check_payloads(sequence)
        async with self._export_lock():
            data = await self._concat_sequence(sequence)
        return ExportArtifact(name=name or self.artifact_name(sequence.id), data=data)

    async def _concat_sequence(self, sequence: Sequence) -> bytes:
        start = time.time()
        async with TransientWorkspace(root=self.temp_dir) as workspace:
            staged = []
            for position, clip in enumerate(sequence.clips):
                staged.append(await workspace.stage(position, clip.payload))
            manifest = await workspace.write_manifest(staged)

            await self.media_service.concat(Path(manifest.name), Path(OUTPUT_NAME), cwd=workspace.path)
            data = await workspace.read_bytes(OUTPUT_NAME)

        logger.debug(
            f"Exported {sequence.id}: {len(sequence.clips)} clips, "
            f"{len(data) / (1024 * 1024):.1f}MB in {time.time() - start:.1f}s"
        )
        return data

    async def export_all(self, sequences: Iterable[Sequence]) -> bytes:
        """Export every sequence in order and zip the results."""
        sequences = list(sequences)
        if not sequences:
            raise EmptyInputError("No sequences to export")

        log_step(f"Exporting {len(sequences)} sequences")
        artifacts: List[ExportArtifact] = []
        for index, sequence in enumerate(sequences, start=1):
            try:
                artifact = await self.export_one(sequence, name=self.artifact_name(str(index)))
            except (RestitchError, OSError) as exc:
                raise BatchExportError(index, sequence.id, str(exc)) from exc
            artifacts.append(artifact)
            logger.info(f"   [{index}/{len(sequences)}] {artifact.name} ({artifact.size_bytes / (1024 * 1024):.1f}MB)")

        archive = await asyncio.to_thread(build_archive, artifacts)
        log_success(f"Packed {len(artifacts)} videos ({len(archive) / (1024 * 1024):.1f}MB)")
        return archive

    async def export_one_to(self, sequence: Sequence, output_dir: Path) -> Path:
        artifact = await self.export_one(sequence)
        return await asyncio.to_thread(write_bytes, artifact.data, Path(output_dir) / artifact.name)

    async def export_all_to(self, sequences: Iterable[Sequence], path: Path) -> Path:
        archive = await self.export_all(sequences)
        return await asyncio.to_thread(write_bytes, archive, Path(path))
