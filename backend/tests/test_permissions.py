from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from grampanchayat import models, permissions
from grampanchayat.config import settings

CERT = {"certificates": [{"certificateName": "Birth certificate"}]}
REPS = {"representatives": [{"name": "A", "mobile": "9000000000", "position": "Sarpanch"}]}


def test_write_without_token_is_401(client):
    r = client.post("/api/certificates", json=CERT)
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_expired_token_is_401(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()["data"]
    token = jwt.encode(
        {"id": me["id"], "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token has expired"


def test_editor_limited_to_granted_tasks(client, make_user):
    headers = make_user("reps@test.local", permissions=["task1"])
    assert client.post("/api/representatives", json=REPS, headers=headers).status_code == 200

    r = client.post("/api/certificates", json=CERT, headers=headers)
    assert r.status_code == 403
    assert r.json()["message"] == permissions.NO_TASK_PERMISSION


def test_wildcard_editor_can_write_everywhere(client, make_user):
    headers = make_user("all@test.local", permissions=["*"])
    assert client.post("/api/certificates", json=CERT, headers=headers).status_code == 200
    assert client.post("/api/representatives", json=REPS, headers=headers).status_code == 200


def test_viewer_cannot_write(client, make_user):
    headers = make_user("viewer@test.local", role="viewer", permissions=["*"])
    r = client.post("/api/certificates", json=CERT, headers=headers)
    assert r.status_code == 403
    assert r.json()["message"] == permissions.VIEW_ONLY


def test_public_reads_need_no_token(client):
    for path in ("/api/representatives", "/api/certificates", "/api/images", "/api/hero-images",
                 "/api/infrastructure", "/api/historical", "/api/grampanchayat", "/api/announcements",
                 "/api/documents", "/api/website/all"):
        assert client.get(path).status_code == 200, path


def test_validate_permissions_dedupes_and_rejects_unknown():
    assert permissions.validate_permissions(["task2", "task1", "task2"]) == ["task2", "task1"]
    assert permissions.validate_permissions(["*"]) == ["*"]
    with pytest.raises(ValueError):
        permissions.validate_permissions(["task10"])


def test_default_permissions():
    assert permissions.default_permissions("admin", []) == ["*"]
    assert permissions.default_permissions("admin", ["task1"]) == ["task1"]
    assert permissions.default_permissions("editor", []) == []


def test_check_write_permission():
    editor = models.User(email="e", password_hash="x", role="editor", permissions=["task3"])
    viewer = models.User(email="v", password_hash="x", role="viewer", permissions=["*"])
    admin = models.User(email="a", password_hash="x", role="admin", permissions=[])

    permissions.check_write_permission(editor, "task3", "POST")
    permissions.check_write_permission(viewer, "task3", "GET")
    permissions.check_write_permission(admin, "task9", "DELETE")
    with pytest.raises(HTTPException) as exc:
        permissions.check_write_permission(editor, "task4", "DELETE")
    assert exc.value.status_code == 403
    with pytest.raises(HTTPException) as exc:
        permissions.check_write_permission(viewer, "task3", "PUT")
    assert exc.value.detail == permissions.VIEW_ONLY


def test_require_task_rejects_unknown_task():
    with pytest.raises(ValueError):
        permissions.require_task("task0")
