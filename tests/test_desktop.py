import json

from toolbox.config import settings
from toolbox.layout.defaults import DEFAULT_APPS
from toolbox.services.desktop import Desktop
from toolbox.storage.kv import KeyValueStore


def _kv():
    return KeyValueStore(settings.storage_path)


def test_fresh_desktop_uses_defaults():
    desktop = Desktop(_kv(), settings, viewport=(1920, 1080))
    assert [a.id for a in desktop.apps] == [a["id"] for a in DEFAULT_APPS]
    assert _kv().get_item("toolbox-layout") is None  # nothing written before a gesture ends


def test_new_defaults_appear_for_existing_users():
    kv = _kv()
    kv.set_item("toolbox-layout", json.dumps({"apps": [{"id": "meteo", "x": 800, "y": 400, "size": 120}]}))
    desktop = Desktop(kv, settings, viewport=(1920, 1080))
    apps = desktop.apps
    assert apps[0].id == "meteo" and (apps[0].x, apps[0].y, apps[0].size) == (800, 400, 120)
    assert len(apps) == len(DEFAULT_APPS)


def test_layout_persisted_only_when_gesture_ends():
    kv = _kv()
    desktop = Desktop(kv, settings, viewport=(1000, 800))
    desktop.set_editing(True)
    desktop.pointer_down("anilist", 50, 110)
    desktop.pointer_move(5000, 5000)
    assert kv.get_item("toolbox-layout") is None
    desktop.pointer_up()
    saved = json.loads(kv.get_item("toolbox-layout"))["apps"]
    first = next(a for a in saved if a["id"] == "anilist")
    assert (first["x"], first["y"]) == (900, 680)

    again = Desktop(KeyValueStore(settings.storage_path), settings, viewport=(1000, 800))
    assert (again.apps[0].x, again.apps[0].y) == (900, 680)


def test_replace_layout_normalises_input():
    desktop = Desktop(_kv(), settings, viewport=(1000, 800))
    apps = desktop.replace_layout(
        [
            {"id": "meteo", "x": 5000, "y": -10, "size": 999},
            {"id": "meteo", "x": 0, "y": 0},
            {"nope": True},
        ]
    )
    assert apps[0].id == "meteo"
    assert (apps[0].x, apps[0].y, apps[0].size) == (850, 80, 150)
    assert len(apps) == len(DEFAULT_APPS)


def test_reset_layout():
    kv = _kv()
    desktop = Desktop(kv, settings, viewport=(1920, 1080))
    desktop.replace_layout([{"id": "meteo", "x": 600, "y": 600}])
    assert kv.get_item("toolbox-layout") is not None
    apps = desktop.reset_layout()
    assert kv.get_item("toolbox-layout") is None
    assert apps[0].id == "anilist"


def test_viewport_lays_out_unsaved_defaults():
    desktop = Desktop(_kv(), settings, viewport=(1920, 1080))
    desktop.set_viewport(600, 900)
    apps = desktop.apps
    assert sorted({a.y for a in apps}) == [100, 220]
    assert sorted({a.x for a in apps}) == [40, 160, 280, 400, 520]
    assert all(a.x < 600 for a in apps)


def test_viewport_keeps_saved_layout():
    kv = _kv()
    desktop = Desktop(kv, settings, viewport=(1920, 1080))
    desktop.replace_layout([{"id": "meteo", "x": 1400, "y": 300}])
    desktop.set_viewport(600, 900)
    assert (desktop.apps[0].id, desktop.apps[0].x) == ("meteo", 1400)
