"""End-to-end tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from flowserver import config
from flowserver.main import app


@pytest.fixture
def client(wired_services, monkeypatch):
    """
    Create a test client against services wired to temporary storage.

    Startup events are not run; the wired_services fixture registers the
    engine, storage and namespace instead.
    """
    monkeypatch.setattr(config, "ADMIN_SECRET", "s3cret")
    return TestClient(app)


def register(client, name):
    response = client.post("/api/persona/name", json={"name": name}, headers={"X-Client-ID": "new"})
    assert response.status_code == 200
    return response.json()


def make_admin(client, name="Root"):
    admin = register(client, name)
    response = client.post(
        "/api/persona/admin", json={"secret": "s3cret"}, headers={"X-Client-ID": admin["id"]}
    )
    assert response.status_code == 200
    return admin


def upload(client, client_id, name="notes.txt", content=b"hello", is_public="false"):
    response = client.post(
        "/api/upload",
        files={"file": (name, content, "text/plain")},
        data={"is_public": is_public},
        headers={"X-Client-ID": client_id},
    )
    assert response.status_code == 200
    return response.json()


class TestHealthAndVersion:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "flowserver"}

    def test_version(self, client):
        response = client.get("/api/version")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_request_id_header(self, client):
        assert client.get("/health").headers.get("X-Request-ID")


class TestPersonaEndpoints:
    """Test persona naming, recovery and admin activation."""

    def test_anonymous_persona(self, client):
        response = client.get("/api/persona")
        assert response.status_code == 200
        body = response.json()
        assert body["persona"] == "client"
        assert body["name"] == ""
        assert body["recovery_code"] == ""

    def test_name_then_describe(self, client):
        created = register(client, "Ann")

        response = client.get("/api/persona", headers={"X-Client-ID": created["id"]})

        body = response.json()
        assert body["name"] == "Ann"
        assert body["recovery_code"] == created["recovery_code"]
        assert body["persona"] == "client"

    def test_name_requires_client_id(self, client):
        response = client.post("/api/persona/name", json={"name": "Ann"})
        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_CLIENT_ID"

    def test_recover(self, client):
        created = register(client, "Ann")

        response = client.post("/api/persona/recover", json={"code": created["recovery_code"]})

        assert response.status_code == 200
        assert response.json() == {"persona": "client", "id": created["id"], "name": "Ann"}

    def test_recover_unknown_code(self, client):
        response = client.post("/api/persona/recover", json={"code": "WRONG"})
        assert response.status_code == 404
        assert response.json()["code"] == "CLIENT_NOT_FOUND"

    def test_activate_admin(self, client):
        admin = make_admin(client)

        response = client.get("/api/persona", headers={"X-Client-ID": admin["id"]})

        assert response.json()["persona"] == "admin"

    def test_activate_admin_wrong_secret(self, client):
        created = register(client, "Ann")

        response = client.post(
            "/api/persona/admin", json={"secret": "guess"}, headers={"X-Client-ID": created["id"]}
        )

        assert response.status_code == 403
        assert response.json()["code"] == "INVALID_ADMIN_SECRET"


class TestFileEndpoints:
    """Test upload, listing, update, delete and download."""

    def test_upload_and_fetch_metadata(self, client):
        ann = register(client, "Ann")
        record = upload(client, ann["id"], name="a.txt", content=b"abc")

        response = client.get(f"/api/files/{record['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["original_name"] == "a.txt"
        assert body["size"] == 3
        assert body["owner_name"] == "Ann"

    def test_upload_requires_client_id(self, client):
        response = client.post("/api/upload", files={"file": ("a.txt", b"x", "text/plain")})
        assert response.status_code == 400

    def test_listing_visibility(self, client):
        ann = register(client, "Ann")
        bob = register(client, "Bob")
        upload(client, ann["id"], name="private.txt")
        upload(client, ann["id"], name="public.txt", is_public="true")

        response = client.get("/api/files", headers={"X-Client-ID": bob["id"]})

        body = response.json()
        assert body["total"] == 1
        assert [f["original_name"] for f in body["files"]] == ["public.txt"]

    def test_admin_listing_and_search(self, client):
        admin = make_admin(client)
        ann = register(client, "Ann")
        upload(client, ann["id"], name="Report.pdf")
        upload(client, ann["id"], name="photo.png")

        response = client.get(
            "/api/files", params={"search": "report"}, headers={"X-Client-ID": admin["id"]}
        )

        body = response.json()
        assert body["total"] == 1
        assert body["files"][0]["owner_name"] == "Ann"

    def test_listing_survives_corrupt_row(self, client, insert_raw_value):
        ann = register(client, "Ann")
        upload(client, ann["id"], name="a.txt")
        insert_raw_value(ann["id"], "flow", "file:bad", "{not json")

        response = client.get("/api/files", headers={"X-Client-ID": ann["id"]})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert client.get("/api/files/bad").status_code == 404

    def test_listing_requires_client_id(self, client):
        response = client.get("/api/files")
        assert response.status_code == 400

    def test_update_by_owner(self, client):
        ann = register(client, "Ann")
        record = upload(client, ann["id"])

        response = client.put(
            f"/api/files/{record['id']}",
            json={"original_name": "renamed.txt", "owner_id": ann["id"], "is_public": True},
            headers={"X-Client-ID": ann["id"]},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "success"}
        body = client.get(f"/api/files/{record['id']}").json()
        assert body["original_name"] == "renamed.txt"
        assert body["is_public"] is True

    def test_update_by_stranger_forbidden(self, client):
        ann = register(client, "Ann")
        bob = register(client, "Bob")
        record = upload(client, ann["id"])

        response = client.put(
            f"/api/files/{record['id']}",
            json={"original_name": "x.txt", "owner_id": bob["id"]},
            headers={"X-Client-ID": bob["id"]},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "UNAUTHORIZED_ACCESS"

    def test_admin_reassigns_to_system(self, client):
        admin = make_admin(client)
        ann = register(client, "Ann")
        record = upload(client, ann["id"])

        response = client.put(
            f"/api/files/{record['id']}",
            json={"original_name": "a.txt", "owner_id": ""},
            headers={"X-Client-ID": admin["id"]},
        )

        assert response.status_code == 200
        assert client.get(f"/api/files/{record['id']}").json()["owner_name"] == "Admin"

    def test_delete(self, client):
        ann = register(client, "Ann")
        record = upload(client, ann["id"])

        response = client.delete(f"/api/files/{record['id']}", headers={"X-Client-ID": ann["id"]})

        assert response.status_code == 200
        missing = client.get(f"/api/files/{record['id']}")
        assert missing.status_code == 404
        assert missing.json()["code"] == "FILE_NOT_FOUND"

    def test_download_by_id_and_link(self, client):
        ann = register(client, "Ann")
        record = upload(client, ann["id"], name="a.txt", content=b"payload")

        by_id = client.get(f"/api/download/{record['id']}")
        by_link = client.get(f"/api/download/{record['download_link']}")

        assert by_id.status_code == 200
        assert by_id.content == b"payload"
        assert by_link.content == b"payload"
        assert "a.txt" in by_id.headers["content-disposition"]

    def test_download_unknown(self, client):
        assert client.get("/api/download/nothing").status_code == 404


class TestClientEndpoints:
    """Test admin-only client management."""

    def test_requires_admin(self, client):
        ann = register(client, "Ann")
        response = client.get("/api/clients", headers={"X-Client-ID": ann["id"]})
        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_list_update_delete(self, client):
        admin = make_admin(client, "Root")
        ann = register(client, "Ann")
        headers = {"X-Client-ID": admin["id"]}

        names = [c["name"] for c in client.get("/api/clients", headers=headers).json()]
        assert names == ["Ann", "Root"]

        response = client.put(
            f"/api/clients/{ann['id']}",
            json={"name": "Annie", "recovery_code": ann["recovery_code"], "is_admin": False},
            headers=headers,
        )
        assert response.status_code == 200

        assert client.delete(f"/api/clients/{ann['id']}", headers=headers).status_code == 200
        names = [c["name"] for c in client.get("/api/clients", headers=headers).json()]
        assert names == ["Root"]

    def test_admin_cannot_delete_itself(self, client):
        admin = make_admin(client)

        response = client.delete(f"/api/clients/{admin['id']}", headers={"X-Client-ID": admin["id"]})

        assert response.status_code == 400
        assert response.json()["code"] == "SELF_MODIFICATION"

    def test_update_unknown_client(self, client):
        admin = make_admin(client)

        response = client.put(
            "/api/clients/ghost",
            json={"name": "x", "recovery_code": "y"},
            headers={"X-Client-ID": admin["id"]},
        )

        assert response.status_code == 404


class TestStoreEndpoints:
    """Test kanban and generic per-persona values."""

    def test_empty_kanban(self, client):
        response = client.get("/api/kanban", headers={"X-Client-ID": "u1"})
        assert response.json() == {"columns": []}

    def test_kanban_round_trip(self, client):
        board = {"columns": [{"title": "todo", "cards": ["a"]}]}
        assert client.post("/api/kanban", json=board, headers={"X-Client-ID": "u1"}).status_code == 200

        assert client.get("/api/kanban", headers={"X-Client-ID": "u1"}).json() == board
        assert client.get("/api/kanban", headers={"X-Client-ID": "u2"}).json() == {"columns": []}

    def test_generic_store(self, client):
        headers = {"X-Client-ID": "u1"}
        client.post("/api/store/theme", json={"dark": True}, headers=headers)

        assert client.get("/api/store/theme", headers=headers).json() == {"dark": True}
        assert client.get("/api/store/missing", headers=headers).json() is None

    def test_reserved_key_rejected(self, client):
        response = client.post("/api/store/file:abc", json=1, headers={"X-Client-ID": "u1"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_KEY"
