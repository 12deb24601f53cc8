import uuid
from pathlib import Path

from sqlmodel import Session, select

from grampanchayat import models
from grampanchayat.database import engine
from conftest import png_upload


def _rep(name, position, **extra):
    return {"name": name, "mobile": "9876543210", "position": position, **extra}


def test_bulk_upsert_orders_by_position(client, admin_headers):
    payload = {"representatives": [_rep("A", "Sarpanch", fixed=True), _rep("B", "Member"), _rep("C", "Member")]}
    r = client.post("/api/representatives", json=payload, headers=admin_headers)
    assert r.status_code == 200
    saved = r.json()["data"]
    assert [(x["name"], x["order"]) for x in saved] == [("A", 0), ("B", 1), ("C", 2)]

    # resubmit reversed with ids: order follows the new positions
    reordered = [dict(_rep(x["name"], x["position"], fixed=x["fixed"]), id=x["id"]) for x in reversed(saved)]
    r = client.post("/api/representatives", json={"representatives": reordered}, headers=admin_headers)
    assert [(x["name"], x["order"]) for x in r.json()["data"]] == [("C", 0), ("B", 1), ("A", 2)]

    listed = client.get("/api/representatives").json()["data"]
    assert [x["name"] for x in listed] == ["C", "B", "A"]
    assert {x["id"] for x in listed} == {x["id"] for x in saved}


def test_fixed_position_is_reused(client, admin_headers):
    client.post("/api/representatives", json={"representatives": [_rep("Old", "Sarpanch", fixed=True)]},
                headers=admin_headers)
    r = client.post("/api/representatives", json={"representatives": [_rep("New", "Sarpanch", fixed=True)]},
                    headers=admin_headers)
    assert r.status_code == 200
    listed = client.get("/api/representatives").json()["data"]
    assert len(listed) == 1
    assert listed[0]["name"] == "New"


def test_unknown_id_rolls_back_batch(client, admin_headers):
    client.post("/api/representatives", json={"representatives": [_rep("A", "Member")]}, headers=admin_headers)
    payload = {"representatives": [_rep("B", "Member"), dict(_rep("Ghost", "Member"), id=str(uuid.uuid4()))]}
    r = client.post("/api/representatives", json=payload, headers=admin_headers)
    assert r.status_code == 400
    with Session(engine) as session:
        names = [rep.name for rep in session.exec(select(models.Representative)).all()]
    assert names == ["A"]


def test_upload_and_delete_removes_file(client, admin_headers, storage):
    r = client.post("/api/representatives/upload", files=png_upload(), headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["filePath"].startswith("officials/")
    assert data["filePath"].endswith(".png")
    stored = Path(storage.root) / data["filePath"]
    assert stored.exists()

    # the upload is served back by the app
    assert client.get(data["imageUrl"]).status_code == 200

    r = client.post("/api/representatives", json={"representatives": [_rep("A", "Member", image=data["imageUrl"])]},
                    headers=admin_headers)
    rep_id = r.json()["data"][0]["id"]
    assert client.delete(f"/api/representatives/{rep_id}", headers=admin_headers).status_code == 200
    assert not stored.exists()
    assert client.delete(f"/api/representatives/{rep_id}", headers=admin_headers).status_code == 404


def test_upload_rejects_non_images(client, admin_headers):
    files = {"image": ("notes.txt", b"hello", "text/plain")}
    r = client.post("/api/representatives/upload", files=files, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Only image files are allowed!"
