from pathlib import Path
from typing import List, Optional

import pytest

from restitch.config import reload_settings
from restitch.exceptions import MediaServiceError
from restitch.models import Clip, ClipRole


def parse_manifest_names(text: str) -> List[str]:
    """Staged names from a concat manifest, unescaping single quotes."""
    names = []
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("file "):
            continue
        quoted = line[len("file "):].strip()
        if quoted.startswith("'") and quoted.endswith("'"):
            quoted = quoted[1:-1]
        names.append(quoted.replace("'\\''", "'"))
    return names


class FakeMediaService:
    """
    Stand-in for ffmpeg.

    concat() joins the staged files' bytes in manifest order, so the output
    shows exactly which inputs were used and in what order.
    """

    def __init__(self, fail_on_call: Optional[int] = None, durations: Optional[dict] = None):
        self.fail_on_call = fail_on_call
        self.durations = durations or {}
        self.concat_calls: List[List[str]] = []
        self.workspaces: List[Path] = []
        self.rewraps: List[tuple] = []
        self.probes: List[Path] = []

    async def concat(self, manifest: Path, output: Path, cwd: Optional[Path] = None) -> Path:
        workdir = Path(cwd)
        names = parse_manifest_names((workdir / manifest).read_text(encoding="utf-8"))
        self.concat_calls.append(names)
        self.workspaces.append(workdir)
        out = workdir / output
        if self.fail_on_call is not None and len(self.concat_calls) == self.fail_on_call:
            out.write_bytes(b"partial")
            raise MediaServiceError("ffmpeg exited with code 1", command="ffmpeg", stderr="boom")
        out.write_bytes(b"".join((workdir / n).read_bytes() for n in names))
        return out

    async def rewrap(self, input_path: Path, output: Path) -> Path:
        self.rewraps.append((Path(input_path), Path(output)))
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_bytes(Path(input_path).read_bytes())
        return Path(output)

    async def probe_duration(self, path: Path) -> float:
        self.probes.append(Path(path))
        return self.durations.get(Path(path).name, 1.0)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every configurable directory into tmp_path."""
    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setenv("NORMALIZED_DIR", str(tmp_path / "normalized"))
    settings = reload_settings()
    yield settings
    reload_settings()


@pytest.fixture
def media_factory():
    return FakeMediaService


@pytest.fixture
def media():
    return FakeMediaService()


@pytest.fixture
def make_clip(tmp_path):
    """Factory for clips backed by small files whose content is the clip name."""
    clip_dir = tmp_path / "clips"
    clip_dir.mkdir()

    def _make(name: str, role: ClipRole = ClipRole.SELLING_POINT, duration: float = 1.0,
              with_file: bool = True) -> Clip:
        payload = clip_dir / f"{name}.mp4"
        if with_file:
            payload.write_bytes(name.encode("utf-8"))
        return Clip(id=f"clip-{name}", name=name, duration=duration, role=role, payload=payload)

    return _make
