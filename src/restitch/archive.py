"""Zip packaging for batch exports."""

import io
import zipfile
from pathlib import Path
from typing import Iterable, List

from .models import ExportArtifact


def build_archive(entries: Iterable[ExportArtifact]) -> bytes:
    """Pack artifacts into one zip, preserving the given order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for entry in entries:
            zf.writestr(entry.name, entry.data)
    return buffer.getvalue()


def archive_names(data: bytes) -> List[str]:
    """Entry names of a zip built by build_archive, in archive order."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return zf.namelist()


def write_bytes(data: bytes, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
