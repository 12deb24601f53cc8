import uuid
from pathlib import Path

INFO = {
    "grampanchayatName": "Shivapur",
    "talukaName": "Haveli",
    "districtName": "Pune",
    "phone": "020-1234567",
}


def test_historical_upsert_and_order(client, admin_headers):
    payload = {
        "events": [{"year": "1950", "eventName": "Founded"}, {"year": "1998", "eventName": "School opened"}],
        "places": [{"placeName": "Temple"}, {"placeName": "Fort", "image": "/files/grampanchayat-files/p/fort.png"}],
        "awards": [{"awardName": "Clean village", "year": "2015"}],
    }
    r = client.post("/api/historical", json=payload, headers=admin_headers)
    assert r.status_code == 200
    saved = r.json()["data"]
    assert len(saved["events"]) == 2

    data = client.get("/api/historical").json()["data"]
    assert [e["year"] for e in data["events"]] == ["1998", "1950"]
    assert [p["placeName"] for p in data["places"]] == ["Fort", "Temple"]

    # update one event in place, add an award
    event = saved["events"][0]
    update = {
        "events": [{"id": event["id"], "year": "1951", "eventName": "Founded", "additionalInfo": "By charter"}],
        "awards": [{"awardName": "Water conservation"}],
    }
    client.post("/api/historical", json=update, headers=admin_headers)
    data = client.get("/api/historical").json()["data"]
    assert len(data["events"]) == 2
    assert {e["year"] for e in data["events"]} == {"1951", "1998"}
    assert len(data["awards"]) == 2


def test_historical_unknown_id_is_rejected(client, admin_headers):
    payload = {"events": [{"year": "1950", "eventName": "Founded"}],
               "awards": [{"id": str(uuid.uuid4()), "awardName": "Ghost"}]}
    r = client.post("/api/historical", json=payload, headers=admin_headers)
    assert r.status_code == 400
    assert client.get("/api/historical").json()["data"]["events"] == []


def test_historical_delete(client, admin_headers, storage):
    upload = client.post("/api/representatives/upload", files={"image": ("fort.png", b"png", "image/png")},
                         data={"category": "historical"}, headers=admin_headers).json()["data"]
    stored = Path(storage.root) / upload["filePath"]
    saved = client.post(
        "/api/historical",
        json={"places": [{"placeName": "Fort", "image": upload["imageUrl"]}],
              "events": [{"year": "1950", "eventName": "Founded"}]},
        headers=admin_headers,
    ).json()["data"]

    place_id = saved["places"][0]["id"]
    assert client.delete(f"/api/historical/places/{place_id}", headers=admin_headers).status_code == 200
    assert not stored.exists()
    assert client.delete(f"/api/historical/places/{place_id}", headers=admin_headers).status_code == 404

    event_id = saved["events"][0]["id"]
    assert client.delete(f"/api/historical/awards/{event_id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/historical/events/{event_id}", headers=admin_headers).status_code == 200


def test_grampanchayat_info_is_a_singleton(client, admin_headers):
    assert client.get("/api/grampanchayat").json() == {"success": True, "data": None}

    first = client.post("/api/grampanchayat", json=INFO, headers=admin_headers).json()["data"]
    second = client.post("/api/grampanchayat", json=dict(INFO, pincode="411001"),
                         headers=admin_headers).json()["data"]
    assert first["id"] == second["id"]
    assert client.get("/api/grampanchayat").json()["data"]["pincode"] == "411001"

    r = client.post("/api/grampanchayat", json={"grampanchayatName": "X"}, headers=admin_headers)
    assert r.status_code == 400


def test_announcement_document_upload(client, admin_headers, storage):
    files = {"document": ("notice.pdf", b"%PDF-1.4" + b"0" * 2048, "application/pdf")}
    r = client.post("/api/announcements/upload", files=files, headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["fileName"] == "notice.pdf"
    assert data["fileType"] == "application/pdf"
    assert data["fileSize"] == "2.01 KB"
    assert "/documents/" in data["filePath"]

    bad = {"document": ("run.exe", b"MZ", "application/octet-stream")}
    r = client.post("/api/announcements/upload", files=bad, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Only PDF, Word, and Excel files are allowed!"


def test_announcements_create_list_delete(client, admin_headers, storage):
    upload = client.post(
        "/api/announcements/upload",
        files={"document": ("notice.pdf", b"%PDF-1.4", "application/pdf")},
        headers=admin_headers,
    ).json()["data"]
    payload = {"announcements": [
        {"title": "Old notice", "uploadDate": "2024-01-01T00:00:00Z"},
        {"title": "Gram sabha", "filePath": upload["filePath"], "fileType": upload["fileType"],
         "fileSize": upload["fileSize"], "uploadDate": "2024-06-01T00:00:00Z"},
    ]}
    r = client.post("/api/announcements", json=payload, headers=admin_headers)
    assert r.status_code == 200
    listed = client.get("/api/announcements").json()["data"]
    assert [a["title"] for a in listed] == ["Gram sabha", "Old notice"]
    assert listed[1]["category"] == "general"

    stored = Path(storage.root) / upload["filePath"].split(f"{storage.bucket}/")[-1]
    assert stored.exists()
    assert client.delete(f"/api/announcements/{listed[0]['id']}", headers=admin_headers).status_code == 200
    assert not stored.exists()
    assert client.delete(f"/api/announcements/{listed[0]['id']}", headers=admin_headers).status_code == 404


def test_website_aggregate(client, admin_headers):
    client.post("/api/representatives",
                json={"representatives": [{"name": "A", "mobile": "1", "position": "Sarpanch"}]},
                headers=admin_headers)
    client.post("/api/grampanchayat", json=INFO, headers=admin_headers)

    data = client.get("/api/website/all").json()["data"]
    assert set(data) == {"representatives", "certificates", "images", "infrastructure", "historical",
                         "grampanchayat", "heroImages", "announcements"}
    assert data["representatives"][0]["name"] == "A"
    assert data["grampanchayat"]["grampanchayatName"] == "Shivapur"
    assert set(data["historical"]) == {"events", "places", "awards"}
    assert [o["name"] for o in client.get("/api/website/officials").json()["data"]] == ["A"]


def test_health_and_unknown_route(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert "X-Request-ID" in r.headers
    assert client.get("/api/health", headers={"X-Request-ID": "abc"}).headers["X-Request-ID"] == "abc"

    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["success"] is False

    assert "/api/website/all" in client.get("/").json()["endpoints"]
