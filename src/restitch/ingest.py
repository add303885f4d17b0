"""
Clip ingestion: files on disk to registry clips.

Per file:
    1. Reject extensions that are not accepted video containers
    2. Rewrap containers that cannot be concatenated as-is (.mov → .mp4)
    3. Probe the duration
    4. Detect the role from the filename (unless the caller overrides it)
    5. Register the clip
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .config import Settings, get_settings
from .exceptions import MediaServiceError, UnsupportedMediaError
from .logger import log_success, log_warning, logger
from .media_files import detect_clip_role, display_name, list_media_files
from .media_service import FFmpegMediaService, MediaService
from .models import Clip, ClipRole
from .registry import ClipRegistry


class ClipIngestor:
    """Adds uploaded files to a ClipRegistry."""

    def __init__(
        self,
        registry: ClipRegistry,
        media_service: Optional[MediaService] = None,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry
        self.settings = settings or get_settings()
        self.media_service = media_service or FFmpegMediaService(self.settings.media)

    async def ingest(self, path: Path, role: Optional[Union[ClipRole, str]] = None) -> Clip:
        path = Path(path)
        file_types = self.settings.file_types
        if not file_types.is_video(path.name):
            raise UnsupportedMediaError(str(path))

        usable = path
        if file_types.needs_rewrap(path.name):
            target = self.settings.paths.normalized_dir / f"{path.stem}.mp4"
            logger.info(f"   Converting {path.name} to MP4...")
            usable = await self.media_service.rewrap(path, target)

        duration = await self.media_service.probe_duration(usable)
        clip_role = role if role is not None else detect_clip_role(usable.name)
        clip = self.registry.add(
            name=display_name(usable),
            duration=duration,
            role=clip_role,
            payload=usable,
        )
        log_success(f"Added {usable.name} as {clip.role.value} ({duration:.1f}s)")
        return clip

    async def ingest_many(
        self,
        paths: Iterable[Path],
        roles: Optional[Dict[str, Union[ClipRole, str]]] = None,
    ) -> List[Clip]:
        """
        Ingest files one by one. A file that fails is logged and skipped;
        the clips that made it are returned.

        ``roles`` maps a display name (filename stem) to a role override.
        """
        roles = roles or {}
        added: List[Clip] = []
        for path in paths:
            path = Path(path)
            try:
                added.append(await self.ingest(path, role=roles.get(display_name(path))))
            except (UnsupportedMediaError, MediaServiceError, ValueError, OSError) as exc:
                log_warning(f"Failed to process {path.name}: {exc}")
        return added

    async def ingest_directory(
        self,
        directory: Path,
        roles: Optional[Dict[str, Union[ClipRole, str]]] = None,
    ) -> List[Clip]:
        files = list_media_files(Path(directory), self.settings.file_types.video_extensions)
        if not files:
            log_warning(f"No video files found in {directory}")
        return await self.ingest_many(files, roles=roles)
