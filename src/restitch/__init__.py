"""
Restitch - hook / selling-point / CTA ad variations from pre-classified clips

Core:
    from restitch import ClipRegistry, generate_sequences, SequenceExporter

    registry = ClipRegistry()
    registry.add("hook_intro", 2.0, "hook", Path("hook_intro.mp4"))
    ...
    sequences = generate_sequences(registry.clips())
    archive = asyncio.run(SequenceExporter().export_all(sequences))

Ingestion (ffprobe / .mov rewrap):
    from restitch.ingest import ClipIngestor

    asyncio.run(ClipIngestor(registry).ingest_directory(Path("clips/")))
"""

__version__ = "0.1.0"

from .exceptions import (
    BatchExportError,
    EmptyInputError,
    MediaServiceError,
    MissingPayloadError,
    MissingRoleError,
    RestitchError,
)
from .exporter import SequenceExporter
from .models import Clip, ClipRole, ExportArtifact, Sequence
from .registry import ClipRegistry
from .sequence_generator import SequenceGenerator, SequenceSet, generate_sequences

__all__ = [
    # Data model
    "Clip",
    "ClipRole",
    "Sequence",
    "ExportArtifact",
    # Core
    "ClipRegistry",
    "SequenceGenerator",
    "SequenceSet",
    "generate_sequences",
    "SequenceExporter",
    # Errors
    "RestitchError",
    "EmptyInputError",
    "MissingRoleError",
    "MissingPayloadError",
    "MediaServiceError",
    "BatchExportError",
]
