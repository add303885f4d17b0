"""
Clip Registry

Holds the clip records the generator draws from. Only metadata and a
payload reference live here; the files themselves belong to the caller.

Usage:
    registry = ClipRegistry()
    clip = registry.add("hook_intro", 2.5, ClipRole.HOOK, Path("hook_intro.mp4"))
    registry.update_role(clip.id, ClipRole.CTA)
    sequences = generate_sequences(registry.clips())
"""

from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
from uuid import uuid4

from .exceptions import UnknownClipError
from .logger import logger
from .models import Clip, ClipRole


def new_clip_id() -> str:
    return f"clip-{uuid4().hex}"


class ClipRegistry:
    """
    Insertion-ordered store of Clip records keyed by id.

    Records are immutable. ``update_role`` swaps in a new record, so
    sequences generated earlier keep the role they were built with, and
    removal never touches existing sequences.
    """

    def __init__(self, clips: Optional[List[Clip]] = None):
        self._clips: Dict[str, Clip] = {}
        for clip in clips or []:
            self.register(clip)

    def __len__(self) -> int:
        return len(self._clips)

    def __iter__(self) -> Iterator[Clip]:
        return iter(list(self._clips.values()))

    def __contains__(self, clip_id: object) -> bool:
        return clip_id in self._clips

    def add(
        self,
        name: str,
        duration: float,
        role: Union[ClipRole, str],
        payload: Optional[Path] = None,
        clip_id: Optional[str] = None,
    ) -> Clip:
        """Create and register a clip, assigning a fresh id unless one is given."""
        clip = Clip(
            id=clip_id or new_clip_id(),
            name=name,
            duration=float(duration),
            role=ClipRole.parse(role) if isinstance(role, str) else role,
            payload=Path(payload) if payload is not None else None,
        )
        return self.register(clip)

    def register(self, clip: Clip) -> Clip:
        if clip.id in self._clips:
            raise ValueError(f"clip id already registered: {clip.id}")
        self._clips[clip.id] = clip
        logger.debug(f"Registered clip {clip.id} ({clip.name}, {clip.role.value}, {clip.duration:.1f}s)")
        return clip

    def get(self, clip_id: str) -> Clip:
        try:
            return self._clips[clip_id]
        except KeyError:
            raise UnknownClipError(clip_id) from None

    def update_role(self, clip_id: str, role: Union[ClipRole, str]) -> Clip:
        """Reclassify a clip. Returns the new record."""
        current = self.get(clip_id)
        new_role = ClipRole.parse(role) if isinstance(role, str) else role
        updated = replace(current, role=new_role)
        self._clips[clip_id] = updated
        logger.debug(f"Clip {clip_id} role {current.role.value} -> {new_role.value}")
        return updated

    def remove(self, clip_id: str) -> Clip:
        self.get(clip_id)
        return self._clips.pop(clip_id)

    def remove_all(self) -> int:
        """Drop every clip. Returns how many were removed."""
        count = len(self._clips)
        self._clips.clear()
        return count

    def clips(self) -> List[Clip]:
        """Snapshot of the current clip set in insertion order."""
        return list(self._clips.values())

    def by_role(self, role: Union[ClipRole, str]) -> List[Clip]:
        wanted = ClipRole.parse(role) if isinstance(role, str) else role
        return [c for c in self._clips.values() if c.role is wanted]
