from __future__ import annotations

import base64
from uuid import UUID, uuid4

import pytest

from planwise.db.models.task import Task
from planwise.services.storage import factory


def _data_url(content: bytes, mime: str = "text/plain") -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode('ascii')}"


@pytest.fixture()
def inline_storage(monkeypatch):
    factory.get_blob_storage.cache_clear()
    monkeypatch.setattr(factory.settings, "storage_provider", "inline")
    yield
    factory.get_blob_storage.cache_clear()


def test_projects_require_session(client):
    assert client.get("/projects").status_code == 401
    assert client.post("/projects", json={"title": "Spanish"}).status_code == 401


def test_create_and_list_projects(client, auth_headers):
    created = client.post(
        "/projects",
        json={"title": "Spanish", "description": "Conversational", "deadline": "2027-01-15", "daily_hours": 1.5},
        headers=auth_headers,
    )

    assert created.status_code == 201
    body = created.json()
    assert body["title"] == "Spanish"
    assert body["deadline"] == "2027-01-15"
    assert body["daily_hours"] == 1.5
    assert body["is_active"] is True

    listed = client.get("/projects", headers=auth_headers)
    assert listed.status_code == 200
    assert [project["id"] for project in listed.json()] == [body["id"]]


def test_create_project_requires_title(client, auth_headers):
    response = client.post("/projects", json={"description": "no title"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"].startswith("title:")


def test_create_project_keeps_data_url_when_storage_is_inline(client, auth_headers, inline_storage):
    data_url = _data_url(b"syllabus")

    response = client.post(
        "/projects",
        json={"title": "Spanish", "files": [{"data_url": data_url, "file_name": "syllabus.txt"}]},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["file_urls"] == [data_url]


def test_projects_are_scoped_to_their_owner(client, auth_headers):
    other = client.post("/auth/session", json={}).json()
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}
    project_id = client.post("/projects", json={"title": "Private"}, headers=other_headers).json()["id"]

    assert client.get(f"/projects/{project_id}", headers=auth_headers).status_code == 404
    assert client.get("/projects", headers=auth_headers).json() == []
    assert client.delete(f"/projects/{project_id}", headers=auth_headers).status_code == 404


def test_update_project_changes_only_given_fields(client, auth_headers):
    project = client.post(
        "/projects",
        json={"title": "Spanish", "description": "Conversational"},
        headers=auth_headers,
    ).json()

    response = client.patch(
        f"/projects/{project['id']}",
        json={"is_active": False, "daily_hours": 3},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["is_active"] is False
    assert body["daily_hours"] == 3
    assert body["description"] == "Conversational"


def test_update_project_rejects_null_title(client, auth_headers):
    project_id = client.post("/projects", json={"title": "Spanish"}, headers=auth_headers).json()["id"]

    response = client.patch(f"/projects/{project_id}", json={"title": None}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "title cannot be null"}


def test_delete_project_removes_its_tasks(client, auth_headers, session_factory):
    project_id = client.post("/projects", json={"title": "Spanish"}, headers=auth_headers).json()["id"]
    client.post(f"/projects/{project_id}/tasks", json={"title": "Warm up"}, headers=auth_headers)

    response = client.delete(f"/projects/{project_id}", headers=auth_headers)

    assert response.status_code == 204
    assert client.get(f"/projects/{project_id}", headers=auth_headers).status_code == 404
    with session_factory() as db:
        assert db.query(Task).filter(Task.project_id == UUID(project_id)).count() == 0


def test_curriculum_missing_returns_404(client, auth_headers):
    project_id = client.post("/projects", json={"title": "Spanish"}, headers=auth_headers).json()["id"]

    response = client.get(f"/projects/{project_id}/curriculum", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Curriculum not found"}


def test_unknown_project_returns_404(client, auth_headers):
    response = client.get(f"/projects/{uuid4()}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Project not found"}
