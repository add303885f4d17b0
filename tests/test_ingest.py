"""
Tests for clip ingestion (files on disk to registry clips).
"""

import asyncio

import pytest

from restitch.exceptions import UnsupportedMediaError
from restitch.ingest import ClipIngestor
from restitch.models import ClipRole
from restitch.registry import ClipRegistry


@pytest.fixture
def upload_dir(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    for name in ("hook_intro.mp4", "feature.mp4", "cta_buy.mov", "readme.txt"):
        (directory / name).write_bytes(name.encode())
    return directory


class TestClipIngestor:

    def test_ingest_detects_role_and_probes(self, media, upload_dir):
        media.durations["hook_intro.mp4"] = 2.5
        registry = ClipRegistry()

        clip = asyncio.run(ClipIngestor(registry, media).ingest(upload_dir / "hook_intro.mp4"))

        assert clip.role is ClipRole.HOOK
        assert clip.duration == 2.5
        assert clip.name == "hook_intro"
        assert clip.payload == upload_dir / "hook_intro.mp4"
        assert registry.get(clip.id) is clip

    def test_mov_is_rewrapped(self, media, upload_dir, isolated_settings):
        registry = ClipRegistry()

        clip = asyncio.run(ClipIngestor(registry, media).ingest(upload_dir / "cta_buy.mov"))

        target = isolated_settings.paths.normalized_dir / "cta_buy.mp4"
        assert media.rewraps == [(upload_dir / "cta_buy.mov", target)]
        assert clip.payload == target
        assert clip.role is ClipRole.CTA
        assert media.probes == [target]

    def test_unsupported_file(self, media, upload_dir):
        with pytest.raises(UnsupportedMediaError):
            asyncio.run(ClipIngestor(ClipRegistry(), media).ingest(upload_dir / "readme.txt"))

    def test_explicit_role_wins(self, media, upload_dir):
        clip = asyncio.run(
            ClipIngestor(ClipRegistry(), media).ingest(upload_dir / "feature.mp4", role=ClipRole.CTA)
        )
        assert clip.role is ClipRole.CTA

    def test_ingest_many_skips_failures(self, media, upload_dir):
        registry = ClipRegistry()
        paths = [upload_dir / "readme.txt", upload_dir / "feature.mp4"]

        added = asyncio.run(ClipIngestor(registry, media).ingest_many(paths))

        assert [c.name for c in added] == ["feature"]
        assert len(registry) == 1

    def test_ingest_many_skips_os_errors(self, media_factory, upload_dir):
        class UnreadableProbe(media_factory):
            async def probe_duration(self, path):
                if path.name == "hook_intro.mp4":
                    raise PermissionError(f"cannot read {path}")
                return await super().probe_duration(path)

        registry = ClipRegistry()
        paths = [upload_dir / "hook_intro.mp4", upload_dir / "feature.mp4"]

        added = asyncio.run(ClipIngestor(registry, UnreadableProbe()).ingest_many(paths))

        assert [c.name for c in added] == ["feature"]
        assert len(registry) == 1

    def test_ingest_directory_with_overrides(self, media, upload_dir):
        registry = ClipRegistry()

        added = asyncio.run(
            ClipIngestor(registry, media).ingest_directory(upload_dir, roles={"feature": "hook"})
        )

        roles = {c.name: c.role for c in added}
        assert roles == {
            "cta_buy": ClipRole.CTA,
            "feature": ClipRole.HOOK,
            "hook_intro": ClipRole.HOOK,
        }
