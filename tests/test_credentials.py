"""
Tests for the credential repositories.
"""

import json
import os
import stat

import pytest

from galactavista.repositories.credentials import (
    FileCredentialRepository,
    InMemoryCredentialRepository,
    TOKEN_KEY,
    USER_KEY,
)
from galactavista.utils.exceptions import StorageError


class TestInMemoryCredentialRepository:

    @pytest.mark.asyncio
    async def test_get_set_remove(self):
        store = InMemoryCredentialRepository()

        await store.set_item("token", "T1")
        assert await store.get_item("token") == "T1"

        await store.remove_item("token")
        assert await store.get_item("token") is None

    @pytest.mark.asyncio
    async def test_remove_missing_key(self):
        store = InMemoryCredentialRepository()

        await store.remove_item("nothing")

        assert store.items == {}

    @pytest.mark.asyncio
    async def test_credential_helpers(self):
        store = InMemoryCredentialRepository()

        await store.save_credentials("T1", '{"id": 1}')
        assert await store.load_credentials() == ("T1", '{"id": 1}')

        await store.save_user('{"id": 2}')
        assert store.items == {TOKEN_KEY: "T1", USER_KEY: '{"id": 2}'}

        await store.clear_credentials()
        assert await store.load_credentials() == (None, None)


class TestFileCredentialRepository:
    """Test the JSON file store."""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path):
        path = tmp_path / "credentials.json"
        store = FileCredentialRepository(path)

        await store.save_credentials("T1", '{"id": 1}')

        assert json.loads(path.read_text()) == {"token": "T1", "user": '{"id": 1}'}
        reopened = FileCredentialRepository(path)
        assert await reopened.load_credentials() == ("T1", '{"id": 1}')

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = FileCredentialRepository(tmp_path / "missing.json")

        assert await store.load_credentials() == (None, None)

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "credentials.json"
        store = FileCredentialRepository(path)

        await store.set_item("token", "T1")

        assert path.exists()

    @pytest.mark.asyncio
    async def test_file_is_private(self, tmp_path):
        path = tmp_path / "credentials.json"
        store = FileCredentialRepository(path)

        await store.set_item("token", "T1")

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    @pytest.mark.asyncio
    async def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json")
        store = FileCredentialRepository(path)

        with pytest.raises(StorageError):
            await store.get_item("token")

    @pytest.mark.asyncio
    async def test_unexpected_layout_raises_storage_error(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps(["token", "T1"]))
        store = FileCredentialRepository(path)

        with pytest.raises(StorageError):
            await store.load_credentials()

    @pytest.mark.asyncio
    async def test_clear_resets_corrupt_file(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json")
        store = FileCredentialRepository(path)

        await store.clear_credentials()

        assert await store.load_credentials() == (None, None)

    @pytest.mark.asyncio
    async def test_remove_keeps_other_keys(self, tmp_path):
        store = FileCredentialRepository(tmp_path / "credentials.json")
        await store.save_credentials("T1", '{"id": 1}')

        await store.remove_item(TOKEN_KEY)

        assert await store.load_credentials() == (None, '{"id": 1}')

    @pytest.mark.asyncio
    async def test_non_utf8_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_bytes(b'{"token": "\xff\xfe"}')
        store = FileCredentialRepository(path)

        with pytest.raises(StorageError, match="UTF-8"):
            await store.load_credentials()

    @pytest.mark.asyncio
    async def test_clear_resets_non_utf8_file(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_bytes(b"\xff\xfe")
        store = FileCredentialRepository(path)

        await store.clear_credentials()

        assert json.loads(path.read_text()) == {}
        assert await store.load_credentials() == (None, None)
