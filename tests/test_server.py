"""
Tests for the Flask task API.
"""
import pytest

from taskboard.config import Settings
from taskboard.server import create_app


def _create(http, **body):
    return http.post("/tasks", json=body)


def test_create_and_list(http):
    r = _create(http, title="Write tests", description="all of them")
    assert r.status_code == 201
    task = r.get_json()["task"]
    assert task["title"] == "Write tests"
    assert task["status"] == "todo"
    assert task["createdAt"] == task["updatedAt"]

    r = http.get("/tasks")
    assert r.status_code == 200
    assert [t["id"] for t in r.get_json()["tasks"]] == [task["id"]]


def test_create_requires_title(http):
    r = _create(http, title="  ")
    assert r.status_code == 400
    assert r.get_json()["error"] == "title is required"
    r = _create(http, description="no title")
    assert r.status_code == 400


def test_create_rejects_bad_status(http):
    r = _create(http, title="x", status="blocked")
    assert r.status_code == 400


def test_get_task(http):
    task = _create(http, title="Find me", status="done").get_json()["task"]
    r = http.get(f"/tasks/{task['id']}")
    assert r.status_code == 200
    assert r.get_json()["task"]["status"] == "done"
    assert http.get("/tasks/nope").status_code == 404


def test_update_status_bumps_updated_at(http):
    task = _create(http, title="Move me").get_json()["task"]
    r = http.put(f"/tasks/{task['id']}", json={"status": "in-progress"})
    assert r.status_code == 200
    updated = r.get_json()["task"]
    assert updated["status"] == "in-progress"
    assert updated["title"] == "Move me"
    assert updated["updatedAt"] > task["updatedAt"]


def test_update_validation_and_missing(http):
    task = _create(http, title="Keep").get_json()["task"]
    assert http.put(f"/tasks/{task['id']}", json={"title": ""}).status_code == 400
    assert http.put(f"/tasks/{task['id']}", json={"status": "later"}).status_code == 400
    assert http.put("/tasks/nope", json={"title": "x"}).status_code == 404
    assert http.get(f"/tasks/{task['id']}").get_json()["task"]["title"] == "Keep"


def test_delete(http):
    task = _create(http, title="Bye").get_json()["task"]
    r = http.delete(f"/tasks/{task['id']}")
    assert r.status_code == 200
    assert r.get_json() == {"deleted": task["id"]}
    assert http.delete(f"/tasks/{task['id']}").status_code == 404
    assert http.get("/tasks").get_json()["tasks"] == []


def test_health(http):
    _create(http, title="a", status="done")
    body = http.get("/health").get_json()
    assert body["status"] == "ok"
    assert body["counts"] == {"todo": 0, "in-progress": 0, "done": 1}


def test_unknown_route_returns_json_404(http):
    r = http.get("/nowhere")
    assert r.status_code == 404
    assert "error" in r.get_json()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# API key
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@pytest.fixture
def secured(db_path, store):
    app = create_app(Settings(db_path=db_path, api_secret="s3cret"), store=store)
    app.config["TESTING"] = True
    return app.test_client()


def test_api_key_required_for_writes(secured):
    assert secured.post("/tasks", json={"title": "x"}).status_code == 401
    r = secured.post("/tasks", json={"title": "x"}, headers={"X-API-Key": "wrong"})
    assert r.status_code == 403
    r = secured.post("/tasks", json={"title": "x"}, headers={"X-API-Key": "s3cret"})
    assert r.status_code == 201


def test_reads_are_open_with_api_key_configured(secured):
    assert secured.get("/tasks").status_code == 200
    assert secured.get("/health").status_code == 200
