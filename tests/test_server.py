"""
Tests for the Flask JSON API: route guards, portal views, mutations.
"""
from unittest.mock import MagicMock

import pytest

from board_server import create_app
from charityboard.config import Config
from charityboard.workspace import Workspace


def login(client, portal, username, password):
    return client.post(f"/api/login/{portal}", json={"username": username, "password": password})


@pytest.fixture
def manager(client):
    assert login(client, "charity", "ber", "123").status_code == 200
    return client


@pytest.fixture
def employee(client):
    assert login(client, "charity", "emp1", "123").status_code == 200
    return client


@pytest.fixture
def admin(client):
    assert login(client, "admin", "admin", "123").status_code == 200
    return client


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Landing, login, guards
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_landing(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "admin" in r.get_json()["portals"]


def test_health(client):
    data = client.get("/health").get_json()
    assert data["status"] == "ok"
    assert data["tasks"] == 3


def test_login_failure(client):
    r = login(client, "admin", "admin", "wrong")
    assert r.status_code == 401
    assert r.get_json()["error"] == "Invalid username or password"


def test_login_returns_navigation(client):
    data = login(client, "charity", "emp1", "123").get_json()
    assert data["user"]["role"] == "EMPLOYEE"
    assert [e["label"] for e in data["navigation"]] == ["Task board", "Mail"]
    assert data["redirect"] == "/charity"
    assert "password" not in data["user"]


def test_anonymous_redirected(client):
    r = client.get("/api/charity/board")
    assert r.status_code == 401
    assert r.get_json()["redirect"] == "/"


def test_charity_user_at_admin_portal(manager):
    r = manager.get("/api/admin/charities")
    assert r.status_code == 403
    assert r.get_json()["redirect"] == "/charity"


def test_admin_at_charity_portal(admin):
    r = admin.get("/api/charity/board")
    assert r.status_code == 403
    assert r.get_json()["redirect"] == "/admin"


def test_logout(manager):
    manager.post("/api/logout")
    assert manager.get("/api/charity/board").status_code == 401
    assert manager.get("/api/session").get_json()["currentUser"] is None


def test_navigation_for_manager(manager):
    labels = [e["label"] for e in manager.get("/api/navigation").get_json()["navigation"]]
    assert labels == ["Task board", "Projects", "Team", "Mail"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Charity portal
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_board(manager):
    data = manager.get("/api/charity/board").get_json()
    columns = {c["id"]: c for c in data["columns"]}
    assert list(columns) == ["TODO", "IN_PROGRESS", "REVIEW", "APPROVED"]
    assert [t["id"] for t in columns["IN_PROGRESS"]["tasks"]] == ["t1"]
    assert data["summary"]["total"] == 2


def test_create_and_move_task(manager):
    r = manager.post("/api/charity/tasks", json={"title": "Sort donations"})
    assert r.status_code == 201
    task_id = r.get_json()["task"]["id"]

    r = manager.post(f"/api/charity/tasks/{task_id}/move", json={"status": "review"})
    data = r.get_json()
    assert data["moved"] is True
    assert data["task"]["status"] == "REVIEW"

    r = manager.post(f"/api/charity/tasks/{task_id}/move", json={"status": "REVIEW"})
    assert r.get_json()["moved"] is False

    activity = manager.get(f"/api/charity/tasks/{task_id}/activity").get_json()["activity"]
    assert [a["content"] for a in activity] == [
        "Task created", 'Status changed from "To Do" to "Review"',
    ]


def test_move_invalid_status(manager):
    r = manager.post("/api/charity/tasks/t1/move", json={"status": "DONE"})
    assert r.status_code == 400


def test_move_other_charity_task(manager):
    r = manager.post("/api/charity/tasks/t3/move", json={"status": "TODO"})
    assert r.status_code == 404


def test_strict_move_rejected():
    app = create_app(Config(strict_workflow=True))
    client = app.test_client()
    login(client, "charity", "ber", "123")
    r = client.post("/api/charity/tasks/t2/move", json={"status": "APPROVED"})
    assert r.status_code == 400
    assert "cannot move" in r.get_json()["error"]


def test_comment(employee):
    r = employee.post("/api/charity/tasks/t1/activity", json={"content": "Done with half"})
    assert r.status_code == 201
    assert r.get_json()["activity"]["type"] == "COMMENT"
    assert employee.post("/api/charity/tasks/t1/activity", json={"content": "  "}).status_code == 400


def test_create_task_requires_title(manager):
    r = manager.post("/api/charity/tasks", json={})
    assert r.status_code == 400
    assert r.get_json()["error"] == "title is required"


def test_projects_progress_is_derived(manager):
    projects = manager.get("/api/charity/projects").get_json()["projects"]
    assert projects[0]["id"] == "p1"
    assert projects[0]["progress"] == 0

    manager.post("/api/charity/tasks/t1/move", json={"status": "APPROVED"})
    projects = manager.get("/api/charity/projects").get_json()["projects"]
    assert projects[0]["progress"] == 100


def test_employee_cannot_create_project(employee):
    r = employee.post("/api/charity/projects", json={"title": "Sneaky"})
    assert r.status_code == 403


def test_employee_cannot_add_member(employee):
    r = employee.post("/api/charity/team",
                      json={"name": "X", "username": "x", "password": "pw"})
    assert r.status_code == 403


def test_manager_adds_project_and_member(manager):
    assert manager.post("/api/charity/projects", json={"title": "Wells"}).status_code == 201
    r = manager.post("/api/charity/team", json={
        "name": "Sara", "username": "sara", "password": "pw",
        "jobRole": "ACCOUNTANT", "permissions": ["manage_financials"],
    })
    assert r.status_code == 201
    assert r.get_json()["user"]["jobRole"] == "ACCOUNTANT"
    team = manager.get("/api/charity/team").get_json()["team"]
    assert {u["username"] for u in team} == {"emp1", "sara"}


def test_unknown_permission_rejected(manager):
    r = manager.post("/api/charity/team", json={
        "name": "Sara", "username": "sara", "password": "pw", "permissions": ["root"],
    })
    assert r.status_code == 400


def test_charity_mail(manager):
    mail = manager.get("/api/charity/mail").get_json()
    assert mail["unread"] == 1
    assert [m["id"] for m in mail["inbox"]] == ["m1"]

    r = manager.post("/api/charity/mail/m1/read")
    assert r.get_json()["message"]["isRead"] is True
    assert manager.post("/api/charity/mail/m1/read").status_code == 200
    assert manager.get("/api/charity/mail").get_json()["unread"] == 0

    r = manager.post("/api/charity/mail", json={"subject": "Hi", "content": "Hello admin"})
    assert r.get_json()["message"]["receiverId"] == "admin"


def test_cannot_read_someone_elses_mail(manager):
    assert manager.post("/api/charity/mail/m2/read").status_code == 404


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Admin portal
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_admin_charities(admin):
    r = admin.post("/api/admin/charities",
                   json={"name": "Hope", "username": "hope", "password": "pw"})
    assert r.status_code == 201
    charity_id = r.get_json()["charity"]["id"]

    r = admin.patch(f"/api/admin/charities/{charity_id}", json={"password": "pw2", "memberCount": "7"})
    data = r.get_json()["charity"]
    assert data["password"] == "pw2"
    assert data["memberCount"] == 7

    assert len(admin.get("/api/admin/charities").get_json()["charities"]) == 3
    assert admin.patch("/api/admin/charities/missing", json={}).status_code == 404


def test_member_count_must_be_numeric(admin):
    r = admin.post("/api/admin/charities",
                   json={"name": "Hope", "username": "hope", "password": "pw", "memberCount": "many"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "memberCount must be an integer"

    r = admin.patch("/api/admin/charities/c1", json={"memberCount": "many"})
    assert r.status_code == 400
    assert admin.get("/api/admin/charities/c1").get_json()["charity"]["memberCount"] == 15


def test_patch_keeps_untouched_fields(admin):
    data = admin.patch("/api/admin/charities/c1", json={"username": "birr"}).get_json()["charity"]
    assert data["username"] == "birr"
    assert data["name"] == "Al-Birr Charity"
    assert data["password"] == "123"
    assert data["memberCount"] == 15


def test_admin_charity_detail(admin):
    data = admin.get("/api/admin/charities/c1").get_json()
    assert data["charity"]["name"] == "Al-Birr Charity"
    assert [u["id"] for u in data["employees"]] == ["u1"]
    assert {t["id"] for t in data["tasks"]} == {"t1", "t2"}
    assert data["summary"]["completion_rate"] == 0
    assert data["summary"]["in_progress"] == 1

    assert admin.get("/api/admin/charities/c2").get_json()["summary"]["completion_rate"] == 100
    assert admin.get("/api/admin/charities/missing").status_code == 404


def test_charity_detail_is_admin_only(manager):
    assert manager.get("/api/admin/charities/c1").status_code == 403


def test_non_object_body_reads_as_empty(client):
    r = client.post("/api/login/admin", json=["admin", "123"])
    assert r.status_code == 401

    login(client, "admin", "admin", "123")
    r = client.post("/api/admin/charities", json=["Hope", "hope", "pw"])
    assert r.status_code == 400
    assert client.post("/api/admin/settings", json="theme").status_code == 400
    r = client.post("/api/admin/tasks", data="not json", content_type="application/json")
    assert r.status_code == 400


def test_admin_assigns_task(admin):
    r = admin.post("/api/admin/tasks", json={"title": "Audit", "charityId": "c2"})
    assert r.status_code == 201
    assert r.get_json()["task"]["isFromAdmin"] is True
    assert admin.get("/api/admin/tasks?charityId=c2").get_json()["count"] == 2
    assert admin.post("/api/admin/tasks", json={"title": "x", "charityId": "zz"}).status_code == 404


def test_admin_stats(admin):
    data = admin.get("/api/admin/stats").get_json()
    assert data["total_tasks"] == 3
    assert data["completed"] == 1


def test_admin_settings(admin):
    assert admin.post("/api/admin/settings", json={"toggle": "theme"}).get_json()["theme"] == "dark"
    assert admin.post("/api/admin/settings", json={"toggle": "fontSize"}).get_json()["fontSize"] == "large"
    assert admin.post("/api/admin/settings", json={"toggle": "x"}).status_code == 400


def test_admin_mail(admin):
    r = admin.post("/api/admin/mail", json={"receiverId": "c2", "subject": "s", "content": "c"})
    assert r.status_code == 201
    mail = admin.get("/api/admin/mail").get_json()
    assert [m["id"] for m in mail["inbox"]] == ["m2"]
    assert mail["outbox"][0]["receiverId"] == "c2"
    assert admin.post("/api/admin/mail", json={"subject": "s", "content": "c"}).status_code == 400


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AI description
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_describe_uses_generator():
    describer = MagicMock()
    describer.generate.return_value = "Generated text"
    app = create_app(workspace=Workspace(Config(), describer=describer))
    client = app.test_client()

    assert client.post("/api/describe", json={"title": "x"}).status_code == 401
    login(client, "charity", "ber", "123")
    r = client.post("/api/describe", json={"title": "Food drive"})
    assert r.get_json()["description"] == "Generated text"
    describer.generate.assert_called_once_with("Food drive")


def test_describe_without_key(manager):
    r = manager.post("/api/describe", json={"title": "Food drive"})
    assert r.get_json()["description"].startswith("API key missing")
