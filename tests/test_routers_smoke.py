import importlib
import json

from fastapi.testclient import TestClient


def get_app():
    mod = importlib.import_module("toolbox.main")
    return mod.app


def test_index_ok():
    client = TestClient(get_app())
    r = client.get("/")
    assert r.status_code == 200
    assert 'data-id="meteo"' in r.text


def test_settings_page_ok():
    client = TestClient(get_app())
    r = client.get("/settings")
    assert r.status_code == 200


def test_layout_roundtrip_through_gestures():
    client = TestClient(get_app())
    assert client.post("/dashboard/viewport", json={"width": 1000, "height": 800}).status_code == 200

    r = client.post("/dashboard/pointer/down", json={"id": "anilist", "x": 60, "y": 110})
    assert r.json() == {"ok": False, "gesture": "idle"}

    assert client.post("/dashboard/edit", json={"editing": True}).json()["editing"] is True
    r = client.post("/dashboard/pointer/down", json={"id": "anilist", "x": 60, "y": 110})
    assert r.json() == {"ok": True, "gesture": "dragging"}
    assert client.post("/dashboard/pointer/down", json={"id": "meteo", "x": 0, "y": 0}).status_code == 409

    r = client.post("/dashboard/pointer/move", json={"x": 5000, "y": 5000})
    assert r.json()["app"]["x"] == 900
    r = client.post("/dashboard/pointer/up")
    assert r.json()["ok"] is True

    layout = client.get("/dashboard/layout").json()
    anilist = next(a for a in layout["apps"] if a["id"] == "anilist")
    assert (anilist["x"], anilist["y"]) == (900, 680)
    assert layout["gesture"] == "idle"


def test_unknown_app_and_edit_mode_open():
    client = TestClient(get_app())
    assert client.get("/dashboard/apps/meteo/open").json() == {"path": "/meteo"}
    assert client.get("/dashboard/apps/nope/open").status_code == 404
    client.post("/dashboard/edit", json={"editing": True})
    assert client.get("/dashboard/apps/meteo/open").status_code == 409
    r = client.post("/dashboard/pointer/down", json={"id": "nope", "x": 0, "y": 0})
    assert r.status_code == 404


def test_layout_post_validation():
    client = TestClient(get_app())
    assert client.post("/dashboard/layout", json={"apps": "x"}).status_code == 400
    r = client.post("/dashboard/layout", json={"apps": [{"id": "meteo", "x": 300, "y": 300}]})
    assert r.status_code == 200
    assert r.json()["apps"][0]["id"] == "meteo"
    r = client.post("/dashboard/layout/reset")
    assert r.json()["apps"][0]["id"] == "anilist"


def test_backup_export_import_clear():
    client = TestClient(get_app())
    assert client.get("/settings/export").status_code == 404

    r = client.post("/settings/import", json={"version": "1.0"})
    assert r.status_code == 400

    layout = {"apps": [{"id": "meteo", "x": 600, "y": 300, "size": 120}]}
    r = client.post(
        "/settings/import",
        json={"data": {"toolbox-layout": json.dumps(layout), "anilist_theme": "light"}},
    )
    assert r.json() == {"ok": True, "imported": 2}
    apps = client.get("/dashboard/layout").json()["apps"]
    assert (apps[0]["id"], apps[0]["x"]) == ("meteo", 600)
    assert client.get("/settings/preferences").json()["preferences"]["theme"] == "light"

    r = client.get("/settings/export")
    assert r.status_code == 200
    assert "toolbox-backup-" in r.headers["content-disposition"]
    assert set(r.json()["data"]) == {"toolbox-layout", "anilist_theme"}
    assert client.get("/settings/stats").json()["used"] == 2

    assert client.post("/settings/clear").json() == {"ok": True, "removed": 2}
    assert client.get("/dashboard/layout").json()["apps"][0]["id"] == "anilist"


def test_preferences_routes():
    client = TestClient(get_app())
    r = client.post("/settings/preferences", json={"theme": "light", "compact_mode": True})
    assert r.json()["attributes"]["data-theme"] == "light"
    assert client.post("/settings/preferences", json={"theme": "neon"}).status_code == 400
    assert 'data-theme="light"' in client.get("/").text


def test_notifications_routes():
    client = TestClient(get_app())
    r = client.post("/notifications", json={"message": "hello", "type": "success"})
    toast_id = r.json()["toast"]["id"]
    assert [t["id"] for t in client.get("/notifications").json()["toasts"]] == [toast_id]
    assert client.delete(f"/notifications/{toast_id}").json() == {"ok": True}
    assert client.delete(f"/notifications/{toast_id}").status_code == 404

    assert client.post("/notifications/requests").json() == {"count": 1}
    assert client.get("/notifications/requests").json() == {"count": 1}
    assert client.post("/notifications/requests/reset").json() == {"count": 0}


def test_viewport_relayouts_fresh_desktop():
    client = TestClient(get_app())
    client.post("/dashboard/viewport", json={"width": 600, "height": 900})
    apps = client.get("/dashboard/layout").json()["apps"]
    assert max(a["x"] for a in apps) == 520
    assert sorted({a["y"] for a in apps}) == [100, 220]


def test_quick_click_leaves_no_gesture_open():
    client = TestClient(get_app())
    client.post("/dashboard/edit", json={"editing": True})
    client.post("/dashboard/pointer/down", json={"id": "anilist", "x": 60, "y": 110})
    assert client.post("/dashboard/pointer/up").json()["gesture"] == "idle"
    r = client.post("/dashboard/pointer/move", json={"x": 700, "y": 700})
    assert r.json() == {"ok": False, "app": None}
    apps = client.get("/dashboard/layout").json()["apps"]
    assert (apps[0]["x"], apps[0]["y"]) == (40, 100)


def test_cancel_clears_stuck_gesture():
    client = TestClient(get_app())
    client.post("/dashboard/edit", json={"editing": True})
    client.post("/dashboard/pointer/down", json={"id": "anilist", "x": 60, "y": 110})
    assert client.post("/dashboard/pointer/down", json={"id": "meteo", "x": 300, "y": 110}).status_code == 409
    assert client.post("/dashboard/pointer/cancel").json() == {"ok": True, "gesture": "idle"}
    r = client.post("/dashboard/pointer/down", json={"id": "meteo", "x": 300, "y": 110})
    assert r.json() == {"ok": True, "gesture": "dragging"}


def test_partial_import_failure_reloads_desktop(monkeypatch):
    from toolbox.deps import get_store
    from toolbox.storage.kv import StorageUnavailable

    client = TestClient(get_app())
    kv = get_store()
    real_set = kv.set_item

    def flaky_set(key, value):
        if key != "toolbox-layout":
            raise StorageUnavailable("disk full")
        real_set(key, value)

    monkeypatch.setattr(kv, "set_item", flaky_set)
    layout = {"apps": [{"id": "meteo", "x": 600, "y": 300, "size": 120}]}
    r = client.post(
        "/settings/import",
        json={"data": {"toolbox-layout": json.dumps(layout), "anilist_theme": "light"}},
    )
    assert r.status_code == 507
    apps = client.get("/dashboard/layout").json()["apps"]
    assert (apps[0]["id"], apps[0]["x"]) == ("meteo", 600)
