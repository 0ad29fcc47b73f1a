from __future__ import annotations

import base64


def _upload(client, name: str = "clip.mp4") -> str:
    resp = client.post("/api/upload", files={"video": (name, b"0" * 32, "video/mp4")})
    assert resp.status_code == 200
    return str(resp.json()["recordingId"])


def test_list_is_empty_initially(client) -> None:
    resp = client.get("/api/recordings")
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_returns_newest_first_with_base64_thumbnail(client, media_provider) -> None:
    first = _upload(client, "first.mp4")
    second = _upload(client, "second.mp4")

    resp = client.get("/api/recordings")
    assert resp.status_code == 200
    items = resp.json()
    assert [item["id"] for item in items] == [second, first]

    item = items[0]
    assert set(item) == {"id", "transcript", "thumbnail", "timestamp", "metadata"}
    assert item["transcript"] == "hello from the clip"
    assert base64.b64decode(item["thumbnail"]) == media_provider.thumbnail_bytes
    assert item["metadata"]["original_filename"] == "second.mp4"


def test_list_twice_without_writes_is_identical(client) -> None:
    _upload(client)
    assert client.get("/api/recordings").json() == client.get("/api/recordings").json()


def test_delete_removes_recording(client) -> None:
    rid = _upload(client)

    resp = client.delete(f"/api/recordings/{rid}")
    assert resp.status_code == 200
    assert resp.json() == {"deleted": True, "id": rid}
    assert client.get("/api/recordings").json() == []


def test_delete_unknown_recording_returns_404(client) -> None:
    resp = client.delete("/api/recordings/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"errorKind": "NOT_FOUND", "message": "recording not found"}


def test_delete_twice_returns_404_second_time(client) -> None:
    rid = _upload(client)
    assert client.delete(f"/api/recordings/{rid}").status_code == 200
    assert client.delete(f"/api/recordings/{rid}").status_code == 404


def test_get_recording_by_id(client, media_provider) -> None:
    rid = _upload(client, "single.mp4")

    resp = client.get(f"/api/recordings/{rid}")
    assert resp.status_code == 200
    item = resp.json()
    assert item["id"] == rid
    assert item["metadata"]["original_filename"] == "single.mp4"
    assert base64.b64decode(item["thumbnail"]) == media_provider.thumbnail_bytes
    assert item == client.get("/api/recordings").json()[0]


def test_get_unknown_recording_returns_404(client) -> None:
    resp = client.get("/api/recordings/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"errorKind": "NOT_FOUND", "message": "recording not found"}
