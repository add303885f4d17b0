"""
Data model shared by the registry, the generator and the exporter.

Clips and sequences are frozen: a role change produces a new Clip record,
so sequences generated earlier keep the records they captured.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class ClipRole(str, Enum):
    """Narrative position of a clip inside a sequence."""
    HOOK = "hook"
    SELLING_POINT = "selling-point"
    CTA = "cta"

    @classmethod
    def parse(cls, value: str) -> "ClipRole":
        """Accept the canonical value or a loose spelling (``selling_point``, ``SP``)."""
        normalized = (value or "").strip().lower().replace("_", "-").replace(" ", "-")
        aliases = {"sp": cls.SELLING_POINT, "call-to-action": cls.CTA}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


@dataclass(frozen=True)
class Clip:
    """A classified content unit. ``payload`` points at the clip's file."""
    id: str
    name: str
    duration: float
    role: ClipRole
    payload: Optional[Path] = None

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError(f"duration must be non-negative, got {self.duration}")

    @property
    def has_payload(self) -> bool:
        return self.payload is not None and Path(self.payload).is_file()


@dataclass(frozen=True)
class Sequence:
    """Ordered hook, selling-points, cta composition."""
    id: str
    clips: Tuple[Clip, ...]
    duration: float = field(default=0.0)

    @classmethod
    def from_clips(cls, sequence_id: str, clips) -> "Sequence":
        """Build a sequence and fix its duration once."""
        clips = tuple(clips)
        return cls(id=sequence_id, clips=clips, duration=sum(c.duration for c in clips))

    @property
    def hook(self) -> Clip:
        return self.clips[0]

    @property
    def cta(self) -> Clip:
        return self.clips[-1]

    @property
    def selling_points(self) -> Tuple[Clip, ...]:
        return self.clips[1:-1]

    def describe(self) -> str:
        """Human-readable ``hook > point > cta`` chain."""
        return " > ".join(c.name for c in self.clips)


@dataclass(frozen=True)
class ExportArtifact:
    """A finished media file held in memory."""
    name: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)
