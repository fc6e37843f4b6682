import json
import logging

import pytest

from display_visualizer.creative import CreativeContent, ImageTransform, Offset
from display_visualizer.storage import PresetStore


def _save(store, name, headline=""):
    return store.save(name, CreativeContent(headline=headline), ImageTransform(scale=1.1, offset=Offset(2, 3)))


def test_missing_file_reads_as_empty(tmp_path):
    assert PresetStore(root_dir=tmp_path).list_presets() == []


def test_save_is_newest_first_and_persisted(tmp_path):
    store = PresetStore(root_dir=tmp_path)
    first = _save(store, "First")
    second = _save(store, "Second")
    assert [p.id for p in store.list_presets()] == [second.id, first.id]

    reloaded = PresetStore(root_dir=tmp_path)
    assert [p.name for p in reloaded.list_presets()] == ["Second", "First"]
    assert reloaded.get(first.id).image_offset == {"x": 2, "y": 3}
    assert reloaded.get(first.id).image_scale == 1.1


def test_eleventh_preset_evicts_oldest(tmp_path):
    store = PresetStore(root_dir=tmp_path)
    saved = [_save(store, f"p{i}") for i in range(11)]
    kept = store.list_presets()
    assert len(kept) == 10
    assert [p.name for p in kept] == [f"p{i}" for i in range(10, 0, -1)]
    assert store.get(saved[0].id) is None

    on_disk = json.loads(store.path.read_text("utf-8"))
    assert len(on_disk) == 10


def test_delete(tmp_path):
    store = PresetStore(root_dir=tmp_path)
    keep = _save(store, "keep")
    drop = _save(store, "drop")
    assert store.delete(drop.id) is True
    assert store.delete("missing") is False
    assert [p.id for p in PresetStore(root_dir=tmp_path).list_presets()] == [keep.id]


def test_blank_name_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        _save(PresetStore(root_dir=tmp_path), "   ")


def test_corrupt_file_reads_as_empty(tmp_path, caplog):
    (tmp_path / "ga-visualizer-presets.json").write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        store = PresetStore(root_dir=tmp_path)
    assert store.list_presets() == []
    assert "Could not load presets" in caplog.text


def test_wrong_shape_reads_as_empty(tmp_path):
    (tmp_path / "ga-visualizer-presets.json").write_text('{"presets": []}', encoding="utf-8")
    assert PresetStore(root_dir=tmp_path).list_presets() == []


def test_malformed_entries_are_skipped(tmp_path):
    payload = [
        {"id": "a1", "name": "Good", "headline": "Hi"},
        {"name": "no id"},
        "junk",
        {"id": "c1", "name": "Bad color", "accent_color": "red"},
        {"id": "n1", "name": "Bad offset", "image_offset": {"x": float("nan"), "y": 0}},
        {"id": "s1", "name": "Bad scale", "image_scale": float("inf")},
    ]
    # json.dumps writes NaN and Infinity literals, which json.loads accepts.
    (tmp_path / "ga-visualizer-presets.json").write_text(json.dumps(payload), encoding="utf-8")
    presets = PresetStore(root_dir=tmp_path).list_presets()
    assert [p.id for p in presets] == ["a1"]
    assert presets[0].image_scale == 1.0


def test_write_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = PresetStore(root_dir=blocker)
    with caplog.at_level(logging.WARNING):
        preset = _save(store, "Kept in memory")
    assert store.get(preset.id) is not None
    assert "Could not save presets" in caplog.text


def test_loaded_accent_color_is_normalized(tmp_path):
    payload = [{"id": "a1", "name": "Short hex", "accent_color": "#fb0"}]
    (tmp_path / "ga-visualizer-presets.json").write_text(json.dumps(payload), encoding="utf-8")
    assert PresetStore(root_dir=tmp_path).get("a1").accent_color == "#FFBB00"
