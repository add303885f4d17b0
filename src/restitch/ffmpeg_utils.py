"""
FFmpeg/FFprobe command helpers.

Centralizes command building so the media service and its tests agree on
the exact argument lists.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union


def _has_flag(args: List[str], flags: List[str]) -> bool:
    return any(flag in args for flag in flags)


def build_ffmpeg_cmd(
    args: List[str],
    *,
    binary: str = "ffmpeg",
    overwrite: bool = True,
    hide_banner: bool = True,
    loglevel: Optional[str] = "error",
) -> List[str]:
    """
    Build a ffmpeg command list with optional standard flags.
    """
    cmd = [binary]
    if overwrite and not _has_flag(args, ["-y", "-n"]):
        cmd.append("-y")
    if hide_banner and "-hide_banner" not in args:
        cmd.append("-hide_banner")
    if loglevel and "-loglevel" not in args:
        cmd.extend(["-loglevel", loglevel])
    return cmd + args


def build_ffprobe_cmd(
    args: List[str],
    *,
    binary: str = "ffprobe",
    verbosity: Optional[str] = "error",
) -> List[str]:
    """
    Build a ffprobe command list with optional verbosity.
    """
    cmd = [binary]
    if verbosity and "-v" not in args:
        cmd.extend(["-v", verbosity])
    return cmd + args


def concat_copy_args(manifest: Union[str, Path], output: Union[str, Path]) -> List[str]:
    """Concat demuxer with stream copy (no re-encode)."""
    return [
        "-f", "concat",
        "-safe", "0",
        "-i", str(manifest),
        "-c", "copy",
        str(output),
    ]


def rewrap_args(input_path: Union[str, Path], output: Union[str, Path]) -> List[str]:
    """Container rewrap: copy video, transcode audio to AAC."""
    return [
        "-i", str(input_path),
        "-c:v", "copy",
        "-c:a", "aac",
        str(output),
    ]


def duration_probe_args(path: Union[str, Path]) -> List[str]:
    return [
        "-show_entries", "format=duration",
        "-of", "json",
        str(path),
    ]


def concat_manifest_line(name: str) -> str:
    """One concat-demuxer entry; single quotes in names are escaped."""
    escaped = name.replace("'", "'\\''")
    return f"file '{escaped}'\n"


def build_concat_manifest(names: Iterable[str]) -> str:
    return "".join(concat_manifest_line(n) for n in names)
