"""
Transient Workspace

Short-lived staging directory for one export: staged inputs, the concat
manifest and the output all live in a directory with a unique name under the
temp root, so two exports never collide. The directory is removed on every
exit path of the ``async with`` block.

Usage:
    async with TransientWorkspace(root=settings.paths.temp_dir) as ws:
        name = await ws.stage(0, clip.payload)
        manifest = await ws.write_manifest([name])
        ...
"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .ffmpeg_utils import build_concat_manifest
from .logger import logger

MANIFEST_NAME = "list.txt"
DEFAULT_SUFFIX = ".mp4"


class TransientWorkspace:
    """Per-export staging namespace with guaranteed cleanup."""

    def __init__(self, root: Optional[Path] = None, prefix: str = "restitch-"):
        self.root = Path(root) if root is not None else None
        self.prefix = prefix
        self.path: Optional[Path] = None
        self.staged: List[str] = []

    async def __aenter__(self) -> "TransientWorkspace":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.cleanup()
        return False

    async def open(self) -> Path:
        if self.root is not None:
            self.root.mkdir(parents=True, exist_ok=True)
        created = await asyncio.to_thread(
            tempfile.mkdtemp, prefix=self.prefix, dir=str(self.root) if self.root else None
        )
        self.path = Path(created)
        logger.debug(f"Opened workspace {self.path}")
        return self.path

    def _require_open(self) -> Path:
        if self.path is None:
            raise RuntimeError("workspace is not open")
        return self.path

    @staticmethod
    def staged_name(position: int, source: Path) -> str:
        """Names are keyed by position so repeated clips cannot collide."""
        suffix = Path(source).suffix.lower() or DEFAULT_SUFFIX
        return f"input{position}{suffix}"

    async def stage(self, position: int, source: Path) -> str:
        """Copy a payload into the workspace; returns the staged name."""
        workdir = self._require_open()
        name = self.staged_name(position, source)
        await asyncio.to_thread(shutil.copyfile, str(source), str(workdir / name))
        self.staged.append(name)
        return name

    async def write_manifest(self, names: Iterable[str]) -> Path:
        workdir = self._require_open()
        manifest = workdir / MANIFEST_NAME
        await asyncio.to_thread(manifest.write_text, build_concat_manifest(names), "utf-8")
        return manifest

    async def read_bytes(self, name: str) -> bytes:
        workdir = self._require_open()
        return await asyncio.to_thread((workdir / name).read_bytes)

    async def cleanup(self) -> None:
        """Remove staged inputs, manifest and any partial output."""
        if self.path is None:
            return
        path, self.path = self.path, None
        self.staged = []
        try:
            await asyncio.to_thread(shutil.rmtree, str(path))
            logger.debug(f"Removed workspace {path}")
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Workspace cleanup failed for {path}: {exc}")
