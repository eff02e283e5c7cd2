from __future__ import annotations

import base64
import json
from urllib.parse import quote


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _signup(client, email="carol@example.com", name="Carol", password="pw-carol"):
    r = client.post("/api/auth/signup", json={"email": email, "name": name, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def test_health_and_version(client):
    assert client.get("/health").json() == {"status": "ok"}
    body = client.get("/version").json()
    assert body["app"] == "recall-api"
    assert body["version"]


def test_signup_signin_and_validate(client):
    res = _signup(client)
    assert res["success"] is True
    assert len(res["token"]) == 64
    assert res["user"]["email"] == "carol@example.com"
    assert "password_hash" not in res["user"]

    r = client.post("/api/auth/signin", json={"email": "carol@example.com", "password": "pw-carol"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert token != res["token"]

    v = client.get("/api/auth/validate", headers=_auth(token)).json()
    assert v["email"] == "carol@example.com"
    assert client.get("/api/auth/validate").json() is None
    assert client.get("/api/auth/validate", headers=_auth("x" * 64)).json() is None


def test_auth_errors_use_the_envelope(client):
    _signup(client)
    r = client.post("/api/auth/signup", json={"email": "carol@example.com", "name": "C2", "password": "x"})
    assert r.status_code == 409
    assert r.json() == {"success": False, "message": "User with this email already exists", "error": "DUPLICATE_EMAIL"}

    r = client.post("/api/auth/signin", json={"email": "carol@example.com", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid email or password"

    r = client.get("/api/areas")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid or expired token", "error": "INVALID_OR_EXPIRED_TOKEN"}

    r = client.get("/api/areas", headers={"Authorization": "Basic abc"})
    assert r.status_code == 401


def test_sign_out_invalidates_only_that_session(client):
    first = _signup(client)["token"]
    second = client.post("/api/auth/signin", json={"email": "carol@example.com", "password": "pw-carol"}).json()["token"]

    r = client.delete("/api/auth/session", headers=_auth(first))
    assert r.json() == {"success": True, "token": first}
    assert client.get("/api/areas", headers=_auth(first)).status_code == 401
    assert client.get("/api/areas", headers=_auth(second)).status_code == 200
    # signing out again is harmless
    assert client.delete("/api/auth/session", headers=_auth(first)).status_code == 200


def test_profile_and_password(client):
    token = _signup(client)["token"]
    r = client.put("/api/auth/user", json={"name": "Caroline", "email": "caroline@example.com"}, headers=_auth(token))
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Caroline"

    r = client.post(
        "/api/auth/password",
        json={"current_password": "nope", "new_password": "pw-2"},
        headers=_auth(token),
    )
    assert r.status_code == 401
    assert r.json()["error"] == "INCORRECT_PASSWORD"

    r = client.post(
        "/api/auth/password",
        json={"current_password": "pw-carol", "new_password": "pw-2"},
        headers=_auth(token),
    )
    assert r.json() == {"success": True}
    r = client.post("/api/auth/signin", json={"email": "caroline@example.com", "password": "pw-2"})
    assert r.status_code == 200


def test_full_tree_over_http(client):
    h = _auth(_signup(client)["token"])

    r = client.post("/api/areas", json={"name": "Work"}, headers=h)
    assert r.status_code == 201
    area = r.json()["area"]

    r = client.post("/api/projects", json={"area_id": area["id"], "title": "Launch", "status": "Inbox"}, headers=h)
    assert r.status_code == 201
    project = r.json()["project"]
    assert project["area_name"] == "Work"

    r = client.post(f"/api/projects/{project['id']}/move", json={"status": "Progress"}, headers=h)
    assert r.json()["project"]["status"] == "Progress"

    raw = b"attachment bytes"
    r = client.post(
        "/api/resources",
        json={"project_id": project["id"], "name": "a.txt", "file_data": base64.b64encode(raw).decode(), "file_type": "text/plain"},
        headers=h,
    )
    assert r.status_code == 201
    resource = r.json()["resource"]
    assert resource["file_size"] == len(raw)

    r = client.get(f"/api/resources/{resource['id']}/file", headers=h)
    assert r.status_code == 200
    assert r.content == raw
    assert r.headers["content-type"].startswith("text/plain")
    assert 'filename="a.txt"' in r.headers["content-disposition"]

    r = client.post("/api/events", json={"project_id": project["id"], "title": "Kickoff", "start_time": 1000}, headers=h)
    assert r.status_code == 201
    event = r.json()["event"]
    assert event["all_day"] is False

    listed = client.get("/api/events", params={"start_time": 900, "end_time": 1100}, headers=h).json()["events"]
    assert [e["id"] for e in listed] == [event["id"]]
    assert client.get("/api/events", params={"start_time": 1001}, headers=h).json()["events"] == []

    assert [p["id"] for p in client.get("/api/projects", params={"area_id": area["id"]}, headers=h).json()["projects"]] == [project["id"]]
    assert [x["id"] for x in client.get("/api/resources", params={"project_id": project["id"]}, headers=h).json()["resources"]] == [resource["id"]]

    r = client.delete(f"/api/areas/{area['id']}", headers=h)
    assert r.json()["id"] == area["id"]
    assert client.get(f"/api/projects/{project['id']}", headers=h).status_code == 404
    assert client.get(f"/api/events/{event['id']}", headers=h).json()["event"]["project_id"] is None


def test_validation_failures(client):
    h = _auth(_signup(client)["token"])
    area = client.post("/api/areas", json={"name": "Work"}, headers=h).json()["area"]

    r = client.post("/api/areas", json={"name": "   "}, headers=h)
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "name cannot be empty", "error": "EMPTY_FIELD"}

    r = client.post("/api/projects", json={"area_id": area["id"], "title": "T", "status": "Someday"}, headers=h)
    assert r.status_code == 400
    assert r.json()["error"] == "INVALID_ENUM"

    r = client.post("/api/events", json={"title": "E", "start_time": 10, "end_time": 10}, headers=h)
    assert r.status_code == 400
    assert r.json()["error"] == "INVALID_TIME_RANGE"

    # schema-level failures keep the same envelope
    r = client.post("/api/events", json={"title": "E"}, headers=h)
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "VALIDATION_ERROR"
    assert "start_time" in body["message"]


def test_other_accounts_get_not_found(client):
    owner = _auth(_signup(client)["token"])
    intruder = _auth(_signup(client, email="dave@example.com", name="Dave")["token"])
    area = client.post("/api/areas", json={"name": "Private"}, headers=owner).json()["area"]

    for method, kwargs in (
        ("get", {}),
        ("put", {"json": {"name": "Taken"}}),
        ("delete", {}),
    ):
        r = getattr(client, method)(f"/api/areas/{area['id']}", headers=intruder, **kwargs)
        assert r.status_code == 404
        assert r.json()["success"] is False

    missing = client.get("/api/areas/NOPE0000", headers=intruder).json()
    foreign = client.get(f"/api/areas/{area['id']}", headers=intruder).json()
    assert missing == foreign
    assert client.get(f"/api/areas/{area['id']}", headers=owner).json()["area"]["name"] == "Private"


def test_operation_log_is_scoped_and_redacted(client):
    h = _auth(_signup(client, password="very-secret")["token"])
    client.post("/api/areas", json={"name": "Logged"}, headers=h)
    client.post("/api/areas", json={"name": " "}, headers=h)

    body = client.get("/api/logs/search", headers=h).json()
    actions = [i["action"] for i in body["items"]]
    assert "SIGNUP" in actions
    assert actions.count("CREATE_AREA") == 2
    assert {i["result"] for i in body["items"] if i["action"] == "CREATE_AREA"} == {"OK", "ERROR"}

    signup = next(i for i in body["items"] if i["action"] == "SIGNUP")
    assert json.loads(signup["payload_json"])["password"] == "***"
    assert "very-secret" not in json.dumps(body)

    only = client.get("/api/logs/search", params={"action": "SIGNUP"}, headers=h).json()
    assert only["total"] == 1

    other = _auth(_signup(client, email="erin@example.com", name="Erin")["token"])
    items = client.get("/api/logs/search", headers=other).json()["items"]
    assert [i["action"] for i in items] == ["SIGNUP"]


def test_download_keeps_non_ascii_names(client):
    h = _auth(_signup(client)["token"])
    area = client.post("/api/areas", json={"name": "Work"}, headers=h).json()["area"]
    project = client.post("/api/projects", json={"area_id": area["id"], "title": "P", "status": "Inbox"}, headers=h).json()["project"]
    raw = b"memo"
    for name, ascii_name in (("Notes 📄", "Notes"), ('say "hi"', "say _hi_"), ("报告", "download")):
        resource = client.post(
            "/api/resources",
            json={"project_id": project["id"], "name": name, "file_data": base64.b64encode(raw).decode(), "file_type": "text/plain"},
            headers=h,
        ).json()["resource"]
        r = client.get(f"/api/resources/{resource['id']}/file", headers=h)
        assert r.status_code == 200
        assert r.content == raw
        disposition = r.headers["content-disposition"]
        assert f'filename="{ascii_name}"' in disposition
        assert "filename*=UTF-8''" + quote(name, safe="") in disposition


def test_log_search_paging_is_bounded(client):
    h = _auth(_signup(client)["token"])
    assert client.get("/api/logs/search", params={"size": -1}, headers=h).status_code == 422
    assert client.get("/api/logs/search", params={"page": 0}, headers=h).status_code == 422
    assert client.get("/api/logs/search", params={"size": 201}, headers=h).status_code == 422
    assert client.get("/api/logs/search", params={"size": 200}, headers=h).status_code == 200
