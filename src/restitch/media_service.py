"""
Media Service

Thin async wrapper around ffmpeg/ffprobe. Each operation is one subprocess
invocation awaited to completion; failures surface as MediaServiceError with
the command line and a stderr excerpt attached.

Usage:
    service = FFmpegMediaService()
    await service.concat(Path("list.txt"), Path("output.mp4"), cwd=workdir)
    duration = await service.probe_duration(Path("clip.mp4"))
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional, Protocol, Union

from .config import MediaConfig, get_settings
from .exceptions import MediaServiceError
from .ffmpeg_utils import (
    build_ffmpeg_cmd,
    build_ffprobe_cmd,
    concat_copy_args,
    duration_probe_args,
    rewrap_args,
)
from .logger import log_error, logger

STDERR_EXCERPT = 500


class MediaService(Protocol):
    """Operations the export pipeline and ingestion rely on."""

    async def concat(self, manifest: Path, output: Path, cwd: Optional[Path] = None) -> Path: ...

    async def rewrap(self, input_path: Path, output: Path) -> Path: ...

    async def probe_duration(self, path: Path) -> float: ...


class FFmpegMediaService:
    """MediaService backed by local ffmpeg/ffprobe binaries."""

    def __init__(self, config: Optional[MediaConfig] = None):
        self.config = config or get_settings().media

    async def concat(self, manifest: Path, output: Path, cwd: Optional[Path] = None) -> Path:
        """Concatenate the manifest entries in order with stream copy."""
        cmd = build_ffmpeg_cmd(concat_copy_args(manifest, output), binary=self.config.ffmpeg_bin)
        await self._run(cmd, timeout=self.config.concat_timeout, cwd=cwd)
        output_path = Path(cwd) / output if cwd and not Path(output).is_absolute() else Path(output)
        if not output_path.is_file():
            raise MediaServiceError("ffmpeg reported success but wrote no output", command=" ".join(cmd))
        return output_path

    async def rewrap(self, input_path: Path, output: Path) -> Path:
        """Convert the container (e.g. .mov to .mp4) without touching video."""
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        cmd = build_ffmpeg_cmd(rewrap_args(input_path, output), binary=self.config.ffmpeg_bin)
        await self._run(cmd, timeout=self.config.rewrap_timeout)
        return Path(output)

    async def probe_duration(self, path: Path) -> float:
        cmd = build_ffprobe_cmd(duration_probe_args(path), binary=self.config.ffprobe_bin)
        stdout = await self._run(cmd, timeout=self.config.probe_timeout)
        try:
            data = json.loads(stdout or "{}")
            duration = float(data.get("format", {}).get("duration") or 0.0)
        except (ValueError, TypeError) as exc:
            raise MediaServiceError(f"Unreadable ffprobe output for {path}", command=" ".join(cmd)) from exc
        return max(duration, 0.0)

    async def _run(
        self,
        cmd: List[str],
        timeout: Optional[float] = None,
        cwd: Optional[Union[str, Path]] = None,
    ) -> str:
        cmd_str = " ".join(str(x) for x in cmd)
        logger.debug(f"Running command: {cmd_str}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd) if cwd else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise MediaServiceError(f"{cmd[0]} not found; is it installed?", command=cmd_str) from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            logger.error(f"Command timed out after {timeout}s: {cmd_str}")
            raise MediaServiceError(f"{cmd[0]} timed out after {timeout}s", command=cmd_str) from exc

        if process.returncode != 0:
            error = stderr.decode(errors="replace")[:STDERR_EXCERPT]
            log_error(f"{cmd[0]} failed: {error}")
            raise MediaServiceError(
                f"{cmd[0]} exited with code {process.returncode}",
                command=cmd_str,
                stderr=error,
            )
        return stdout.decode(errors="replace")
