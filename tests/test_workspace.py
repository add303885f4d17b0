"""
Tests for the per-export staging workspace and the concat manifest format.
"""

import asyncio

import pytest

from restitch.ffmpeg_utils import build_concat_manifest, concat_manifest_line
from restitch.workspace import MANIFEST_NAME, TransientWorkspace


class TestManifest:

    def test_line_format(self):
        assert concat_manifest_line("input0.mp4") == "file 'input0.mp4'\n"

    def test_single_quotes_are_escaped(self):
        assert concat_manifest_line("it's.mp4") == "file 'it'\\''s.mp4'\n"

    def test_manifest_keeps_order(self):
        text = build_concat_manifest(["input0.mp4", "input1.mov", "input2.mp4"])
        assert text == "file 'input0.mp4'\nfile 'input1.mov'\nfile 'input2.mp4'\n"


class TestTransientWorkspace:

    def test_stage_and_manifest(self, tmp_path):
        source = tmp_path / "Hook Intro.MOV"
        source.write_bytes(b"x")

        async def run():
            async with TransientWorkspace(root=tmp_path / "tmp") as ws:
                name = await ws.stage(0, source)
                manifest = await ws.write_manifest([name])
                return name, manifest.name, manifest.read_text(encoding="utf-8"), ws.path

        name, manifest_name, text, path = asyncio.run(run())

        assert name == "input0.mov"
        assert manifest_name == MANIFEST_NAME
        assert text == "file 'input0.mov'\n"
        assert not path.exists()

    def test_missing_suffix_defaults_to_mp4(self):
        assert TransientWorkspace.staged_name(3, "clip") == "input3.mp4"

    def test_unique_directories(self, tmp_path):
        async def run():
            async with TransientWorkspace(root=tmp_path) as first:
                async with TransientWorkspace(root=tmp_path) as second:
                    return first.path, second.path

        first, second = asyncio.run(run())
        assert first != second

    def test_cleanup_on_error(self, tmp_path):
        seen = {}

        async def run():
            async with TransientWorkspace(root=tmp_path) as ws:
                seen["path"] = ws.path
                (ws.path / "output.mp4").write_bytes(b"partial")
                raise RuntimeError("ffmpeg blew up")

        with pytest.raises(RuntimeError):
            asyncio.run(run())

        assert not seen["path"].exists()
        assert list(tmp_path.iterdir()) == []

    def test_use_before_open(self, tmp_path):
        ws = TransientWorkspace(root=tmp_path)
        with pytest.raises(RuntimeError):
            asyncio.run(ws.read_bytes("output.mp4"))

    def test_cleanup_is_idempotent(self, tmp_path):
        async def run():
            ws = TransientWorkspace(root=tmp_path)
            await ws.open()
            await ws.cleanup()
            await ws.cleanup()
            return ws.path

        assert asyncio.run(run()) is None
