"""Tests for the file, persona, client admin and store services."""

import io
from pathlib import Path

import pytest

from flowserver.exceptions import (
    ClientNotFoundError,
    FileRecordNotFoundError,
    InvalidAdminSecretError,
    InvalidKeyError,
    MissingClientIdError,
    SelfModificationError,
    StorageError,
    UnauthorizedAccessError,
)
from flowserver.identity import derive_client_id
from flowserver.services.client_admin_service import ClientAdminService
from flowserver.services.file_service import FileService
from flowserver.services.persona_service import PersonaService, persona_label
from flowserver.services.store_service import StoreService


@pytest.fixture
def file_service(engine, blob_storage):
    return FileService(engine=engine, blob_storage=blob_storage)


@pytest.fixture
def persona_service(engine, namespace):
    return PersonaService(engine=engine, namespace=namespace, admin_secret="s3cret")


class TestFileService:
    """Test FileService operations."""

    def test_upload_stores_payload_and_record(self, file_service, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)

        record = file_service.upload_file(io.BytesIO(b"hello world"), "hello.txt", "u1", is_public=True)

        assert record.size == 11
        assert record.owner_name == "Ann"
        assert record.is_public is True
        assert record.download_link and record.download_link != record.id
        assert Path(record.stored_path).read_bytes() == b"hello world"
        assert file_service.get_file(record.id).original_name == "hello.txt"

    def test_upload_requires_owner(self, file_service):
        with pytest.raises(MissingClientIdError):
            file_service.upload_file(io.BytesIO(b"x"), "x.txt", "")

    def test_list_requires_client_for_non_admin(self, file_service):
        with pytest.raises(MissingClientIdError):
            file_service.list_files(client_id="", is_admin=False)

    def test_list_clamps_page_and_limit(self, file_service):
        for i in range(10):
            file_service.upload_file(io.BytesIO(b"x"), f"f{i}.txt", "u1")

        response = file_service.list_files(client_id="u1", is_admin=False, page=0, limit=0)

        assert len(response.files) == 8
        assert response.total == 10

    def test_admin_lists_everything(self, file_service):
        file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")
        file_service.upload_file(io.BytesIO(b"x"), "b.txt", "u2")

        assert file_service.list_files(client_id="", is_admin=True).total == 2
        assert file_service.list_files(client_id="u1", is_admin=False).total == 1

    def test_owner_can_rename_but_not_reassign(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")

        updated = file_service.update_file(record.id, "u1", False, "b.txt", "u2", True)

        assert updated.original_name == "b.txt"
        assert updated.owner_id == "u1"
        assert updated.is_public is True

    def test_admin_can_reassign(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")

        updated = file_service.update_file(record.id, "adm", True, "a.txt", "u2", False)

        assert updated.owner_id == "u2"
        assert file_service.get_file(record.id).owner_id == "u2"

    def test_stranger_cannot_update_or_delete(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")

        with pytest.raises(UnauthorizedAccessError):
            file_service.update_file(record.id, "u2", False, "b.txt", "u2", False)
        with pytest.raises(UnauthorizedAccessError):
            file_service.delete_file(record.id, "u2", False)

    def test_anonymous_cannot_touch_system_files(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")
        file_service.update_file(record.id, "adm", True, "a.txt", "", False)

        with pytest.raises(UnauthorizedAccessError):
            file_service.delete_file(record.id, "", False)

    def test_owner_deletes_file(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"x"), "a.txt", "u1")

        file_service.delete_file(record.id, "u1", False)

        assert not Path(record.stored_path).exists()
        with pytest.raises(FileRecordNotFoundError):
            file_service.get_file(record.id)

    def test_resolve_download_by_id_or_link(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"data"), "a.txt", "u1")

        by_id, path = file_service.resolve_download(record.id)
        by_link, _ = file_service.resolve_download(record.download_link)

        assert by_id.id == by_link.id == record.id
        assert path.read_bytes() == b"data"

    def test_resolve_download_unknown(self, file_service):
        with pytest.raises(FileRecordNotFoundError):
            file_service.resolve_download("nothing")

    def test_resolve_download_missing_payload(self, file_service):
        record = file_service.upload_file(io.BytesIO(b"data"), "a.txt", "u1")
        Path(record.stored_path).unlink()

        with pytest.raises(StorageError):
            file_service.resolve_download(record.id)


class TestPersonaService:
    """Test naming, recovery and admin activation."""

    def test_set_name_registers_new_client(self, persona_service, namespace):
        client = persona_service.set_name("", "Ann")

        assert len(client.recovery_code) == 8
        assert client.id == derive_client_id(namespace, client.recovery_code)
        assert persona_service.client_repo.get(client.id).name == "Ann"

    def test_set_name_keeps_recovery_code(self, persona_service):
        first = persona_service.set_name("", "Ann")

        second = persona_service.set_name(first.id, "Annie")

        assert second.id == first.id
        assert second.recovery_code == first.recovery_code
        assert second.name == "Annie"

    def test_recover(self, persona_service):
        client = persona_service.set_name("", "Ann")

        recovered, derived_id = persona_service.recover(client.recovery_code)

        assert recovered.name == "Ann"
        assert derived_id == client.id

    def test_recover_unknown_code(self, persona_service):
        with pytest.raises(ClientNotFoundError):
            persona_service.recover("WRONG")

    def test_get_active_client_touches_activity(self, persona_service, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)

        client = persona_service.get_active_client("u1")

        assert client.last_active > 1
        assert client_repo.get("u1").last_active == client.last_active

    def test_get_active_client_unknown(self, persona_service):
        assert persona_service.get_active_client("") is None
        assert persona_service.get_active_client("ghost") is None

    def test_activate_admin(self, persona_service, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)

        persona_service.activate_admin("u1", "s3cret")

        assert client_repo.is_admin("u1")

    def test_activate_admin_wrong_secret(self, persona_service, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)

        with pytest.raises(InvalidAdminSecretError):
            persona_service.activate_admin("u1", "guess")
        assert not client_repo.is_admin("u1")

    def test_activate_admin_disabled_without_secret(self, engine, namespace, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)
        service = PersonaService(engine=engine, namespace=namespace, admin_secret="")

        with pytest.raises(InvalidAdminSecretError):
            service.activate_admin("u1", "")

    def test_activate_admin_unknown_client(self, persona_service):
        with pytest.raises(ClientNotFoundError):
            persona_service.activate_admin("ghost", "s3cret")

    def test_persona_label(self):
        assert persona_label(True) == "admin"
        assert persona_label(False) == "client"


class TestClientAdminService:
    """Test admin operations on clients."""

    def test_update_and_delete_other_client(self, engine, client_repo):
        client_repo.upsert("u1", "Ann", "C1", 1)
        service = ClientAdminService(engine=engine)

        service.update_client("u1", "adm", "Bea", "C9", True)
        assert client_repo.get("u1").name == "Bea"

        service.delete_client("u1", "adm")
        assert service.list_clients() == []

    def test_admin_cannot_demote_itself(self, engine, client_repo):
        client_repo.upsert("adm", "Root", "C1", 1)
        with pytest.raises(SelfModificationError):
            ClientAdminService(engine=engine).update_client("adm", "adm", "Root", "C1", False)

    def test_admin_cannot_delete_itself(self, engine):
        with pytest.raises(SelfModificationError):
            ClientAdminService(engine=engine).delete_client("adm", "adm")


class TestStoreService:
    """Test free-form per-persona values."""

    def test_set_and_get(self, engine):
        service = StoreService(engine=engine)
        service.set_value("u1", "kanban", {"columns": [{"title": "todo"}]})

        assert service.get_value("u1", "kanban") == {"columns": [{"title": "todo"}]}
        assert service.get_value("u2", "kanban") is None

    @pytest.mark.parametrize("key", ["file:abc", "client:u1", ""])
    def test_rejects_reserved_or_empty_keys(self, engine, key):
        with pytest.raises(InvalidKeyError):
            StoreService(engine=engine).set_value("u1", key, 1)

    def test_requires_client(self, engine):
        with pytest.raises(MissingClientIdError):
            StoreService(engine=engine).get_value("", "kanban")
