"""
Centralized Configuration for Restitch

Single source of truth for paths, generation limits and media tool settings.
Every field defaults from an environment variable so the CLI and tests can
override behaviour without code changes.

Usage:
    from restitch.config import get_settings

    settings = get_settings()
    temp_root = settings.paths.temp_dir
    cap = settings.generation.max_sequences
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Set
from dataclasses import dataclass, field


# =============================================================================
# Path Configuration
# =============================================================================
@dataclass
class PathConfig:
    """Filesystem locations used by Restitch."""

    temp_dir: Path = field(default_factory=lambda: Path(os.environ.get("TEMP_DIR", tempfile.gettempdir())))
    output_dir: Path = field(default_factory=lambda: Path(os.environ.get("OUTPUT_DIR", "output")))
    normalized_dir: Path = field(default_factory=lambda: Path(os.environ.get("NORMALIZED_DIR", "output/normalized")))


# =============================================================================
# Generation Limits
# =============================================================================
@dataclass
class GenerationConfig:
    """Caps applied by the sequence generator."""

    max_sequences: int = field(default_factory=lambda: int(os.environ.get("MAX_SEQUENCES", "10")))
    max_attempts: int = field(default_factory=lambda: int(os.environ.get("MAX_GENERATION_ATTEMPTS", "100")))
    max_selling_points: int = field(default_factory=lambda: int(os.environ.get("MAX_SELLING_POINTS", "3")))


# =============================================================================
# Media Tool Configuration
# =============================================================================
@dataclass
class MediaConfig:
    """ffmpeg / ffprobe binaries and timeouts (seconds)."""

    ffmpeg_bin: str = field(default_factory=lambda: os.environ.get("FFMPEG_BIN", "ffmpeg"))
    ffprobe_bin: str = field(default_factory=lambda: os.environ.get("FFPROBE_BIN", "ffprobe"))
    concat_timeout: float = field(default_factory=lambda: float(os.environ.get("FFMPEG_CONCAT_TIMEOUT", "300")))
    rewrap_timeout: float = field(default_factory=lambda: float(os.environ.get("FFMPEG_REWRAP_TIMEOUT", "300")))
    probe_timeout: float = field(default_factory=lambda: float(os.environ.get("FFPROBE_TIMEOUT", "30")))


# =============================================================================
# File Type Configuration
# =============================================================================
@dataclass
class FileTypeConfig:
    """Accepted clip extensions and which of them need a container rewrap."""

    video_extensions: Set[str] = field(default_factory=lambda: {'mp4', 'mov', 'm4v'})
    rewrap_extensions: Set[str] = field(default_factory=lambda: {'mov'})

    def is_video(self, filename: str) -> bool:
        """Check if filename has a video extension."""
        if '.' not in filename:
            return False
        ext = filename.rsplit('.', 1)[1].lower()
        return ext in self.video_extensions

    def needs_rewrap(self, filename: str) -> bool:
        """Check if the container must be converted before concatenation."""
        if '.' not in filename:
            return False
        ext = filename.rsplit('.', 1)[1].lower()
        return ext in self.rewrap_extensions


# =============================================================================
# Export Naming
# =============================================================================
@dataclass
class ExportConfig:
    """Names given to exported artifacts."""

    name_prefix: str = field(default_factory=lambda: os.environ.get("EXPORT_NAME_PREFIX", "restitched"))
    archive_name: str = field(default_factory=lambda: os.environ.get("EXPORT_ARCHIVE_NAME", "restitched-sequences.zip"))
    output_suffix: str = ".mp4"


# =============================================================================
# Main Settings Class
# =============================================================================
@dataclass
class Settings:
    """
    Main configuration container.

    Usage:
        from restitch.config import get_settings

        settings = get_settings()
        settings.generation.max_attempts
    """

    paths: PathConfig = field(default_factory=PathConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    file_types: FileTypeConfig = field(default_factory=FileTypeConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    def __post_init__(self):
        for name in ("temp_dir", "output_dir", "normalized_dir"):
            value = getattr(self.paths, name)
            if isinstance(value, str):
                setattr(self.paths, name, Path(value))


# =============================================================================
# Global Settings Instance (Singleton)
# =============================================================================
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (lazy initialization)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload of settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
