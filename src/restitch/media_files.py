from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple

from .models import ClipRole


def normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """Normalize extension strings to lowercase dot-prefixed suffixes."""
    normalized: List[str] = []
    for ext in extensions:
        if not ext:
            continue
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        normalized.append(ext)
    return tuple(sorted(set(normalized)))


def list_media_files(directory: Path, extensions: Iterable[str], recursive: bool = False) -> List[Path]:
    """List files in a directory that match the provided extensions."""
    if not directory.exists():
        return []

    suffixes = normalize_extensions(extensions)
    if not suffixes:
        return []

    iterator = directory.rglob("*") if recursive else directory.iterdir()
    files: List[Path] = []
    for path in iterator:
        if not path.is_file():
            continue
        if path.name.startswith("._"):
            continue
        if path.suffix.lower() in suffixes:
            files.append(path)
    return sorted(files, key=lambda p: p.name.lower())


def detect_clip_role(filename: str) -> ClipRole:
    """
    Guess a clip's role from its filename.

    "hook" wins over "cta"/"call to action", which wins over
    "selling point"/"sp". Anything else is a selling point.
    """
    lowered = filename.lower()
    if "hook" in lowered:
        return ClipRole.HOOK
    if "cta" in lowered or "call to action" in lowered:
        return ClipRole.CTA
    if "selling point" in lowered or "sp" in lowered:
        return ClipRole.SELLING_POINT
    return ClipRole.SELLING_POINT


def display_name(path: Path) -> str:
    """Filename up to the first dot, as shown in clip listings."""
    return Path(path).name.split(".")[0]


__all__ = [
    "normalize_extensions",
    "list_media_files",
    "detect_clip_role",
    "display_name",
]
