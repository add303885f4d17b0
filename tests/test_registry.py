"""
Tests for the clip registry and the clip data model.
"""

import pytest

from restitch.exceptions import UnknownClipError
from restitch.models import Clip, ClipRole
from restitch.registry import ClipRegistry


class TestClipRole:

    @pytest.mark.parametrize("value,expected", [
        ("hook", ClipRole.HOOK),
        ("Selling_Point", ClipRole.SELLING_POINT),
        ("selling point", ClipRole.SELLING_POINT),
        ("SP", ClipRole.SELLING_POINT),
        ("cta", ClipRole.CTA),
        ("call to action", ClipRole.CTA),
    ])
    def test_parse(self, value, expected):
        assert ClipRole.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            ClipRole.parse("outro")


class TestClip:

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Clip(id="c", name="c", duration=-1.0, role=ClipRole.HOOK)

    def test_has_payload_requires_existing_file(self, tmp_path):
        present = tmp_path / "a.mp4"
        present.write_bytes(b"a")

        assert Clip("1", "a", 1.0, ClipRole.HOOK, present).has_payload
        assert not Clip("2", "b", 1.0, ClipRole.HOOK, tmp_path / "b.mp4").has_payload
        assert not Clip("3", "c", 1.0, ClipRole.HOOK).has_payload


class TestClipRegistry:

    def test_add_assigns_unique_ids(self):
        registry = ClipRegistry()
        first = registry.add("intro", 2.0, ClipRole.HOOK)
        second = registry.add("intro", 2.0, ClipRole.HOOK)

        assert first.id != second.id
        assert first.id.startswith("clip-")
        assert len(registry) == 2

    def test_add_accepts_role_strings(self):
        clip = ClipRegistry().add("buy now", 1.0, "cta")
        assert clip.role is ClipRole.CTA

    def test_duplicate_id_rejected(self):
        registry = ClipRegistry()
        registry.add("a", 1.0, ClipRole.HOOK, clip_id="clip-a")
        with pytest.raises(ValueError):
            registry.add("b", 1.0, ClipRole.HOOK, clip_id="clip-a")

    def test_unknown_clip(self):
        registry = ClipRegistry()
        with pytest.raises(UnknownClipError):
            registry.get("clip-missing")
        with pytest.raises(KeyError):
            registry.remove("clip-missing")

    def test_update_role_replaces_record(self):
        registry = ClipRegistry()
        original = registry.add("a", 1.0, ClipRole.SELLING_POINT, clip_id="clip-a")

        updated = registry.update_role("clip-a", "hook")

        assert original.role is ClipRole.SELLING_POINT
        assert updated.role is ClipRole.HOOK
        assert registry.get("clip-a") is updated
        assert registry.by_role(ClipRole.HOOK) == [updated]

    def test_insertion_order_and_removal(self):
        registry = ClipRegistry()
        for name in ("a", "b", "c"):
            registry.add(name, 1.0, ClipRole.SELLING_POINT, clip_id=f"clip-{name}")

        registry.remove("clip-b")

        assert [c.name for c in registry.clips()] == ["a", "c"]
        assert "clip-b" not in registry
        assert registry.remove_all() == 2
        assert registry.clips() == []
