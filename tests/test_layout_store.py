import json

import pytest

from toolbox.layout.geometry import compute_default_layout
from toolbox.layout.store import LayoutStore
from toolbox.storage.kv import KeyValueStore, StorageUnavailable


@pytest.fixture
def kv(tmp_path):
    return KeyValueStore(tmp_path / "local_storage.json")


@pytest.fixture
def store(kv):
    return LayoutStore(kv, lambda: compute_default_layout(1920))


def test_missing_key_gives_defaults(store):
    assert [a.to_dict() for a in store.load()] == [a.to_dict() for a in compute_default_layout(1920)]


def test_malformed_json_gives_full_defaults(kv, store):
    kv.set_item("toolbox-layout", "{not json")
    layout = store.load()
    assert len(layout) == 10
    assert [a.id for a in layout] == [a.id for a in compute_default_layout(1920)]


def test_wrong_shape_gives_defaults(kv, store):
    kv.set_item("toolbox-layout", json.dumps({"apps": "nope"}))
    assert len(store.load()) == 10
    kv.set_item("toolbox-layout", json.dumps(42))
    assert len(store.load()) == 10


def test_save_then_load_envelope(kv, store):
    layout = compute_default_layout(1920)[:2]
    layout[0].x, layout[0].y, layout[0].size = 600, 400, 140
    assert store.save(layout)
    raw = json.loads(kv.get_item("toolbox-layout"))
    assert list(raw) == ["apps"]
    loaded = store.load()
    assert [a.id for a in loaded] == ["anilist", "media-search"]
    assert (loaded[0].x, loaded[0].y, loaded[0].size) == (600, 400, 140)


def test_legacy_bare_array(kv, store):
    kv.set_item("toolbox-layout", json.dumps([{"id": "meteo", "x": 200, "y": 300, "size": 80}]))
    loaded = store.load()
    assert len(loaded) == 1
    assert loaded[0].id == "meteo"
    assert loaded[0].path == "/meteo"  # filled from the canonical entry
    assert (loaded[0].x, loaded[0].y, loaded[0].size) == (200, 300, 80)


def test_entries_without_id_and_duplicates_are_dropped(kv, store):
    kv.set_item(
        "toolbox-layout",
        json.dumps({"apps": [{"name": "x"}, {"id": "a", "x": 1}, {"id": "a", "x": 2}, "junk"]}),
    )
    loaded = store.load()
    assert [(a.id, a.x) for a in loaded] == [("a", 1)]


def test_failed_write_is_swallowed(kv, store, monkeypatch):
    def boom(key, value):
        raise StorageUnavailable("disk full")

    monkeypatch.setattr(kv, "set_item", boom)
    assert store.save(compute_default_layout(1920)) is False


def test_reset_removes_key(kv, store):
    store.save(compute_default_layout(1920)[:1])
    layout = store.reset()
    assert kv.get_item("toolbox-layout") is None
    assert len(layout) == 10


def test_kv_survives_reopen(tmp_path):
    path = tmp_path / "sub" / "store.json"
    KeyValueStore(path).set_item("k", "v")
    assert KeyValueStore(path).get_item("k") == "v"


def test_kv_unreadable_file_is_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2", encoding="utf-8")
    kv = KeyValueStore(path)
    assert len(kv) == 0
    kv.set_item("k", "v")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
