"""
Integration tests for JSON file store adapters.
"""

import os
import stat
import pytest
from locker_auth.adapters.file_store import JsonFileRecordStore, JsonFileSessionStore
from locker_auth.errors import StorageError


class TestJsonFileRecordStore:
    """Test on-disk record storage."""

    def setup_method(self):
        """Setup test fixtures."""
        self.record = {"id": "alice", "provider": "local", "user": {"user_id": "u1"}}

    def test_put_get_delete(self, tmp_path):
        """Test record lifecycle."""
        store = JsonFileRecordStore(tmp_path)

        assert store.get("auth_users", "alice") is None

        store.put("auth_users", self.record)
        assert store.get("auth_users", "alice") == self.record
        assert (tmp_path / "auth_users.json").exists()

        store.delete("auth_users", "alice")
        assert store.get("auth_users", "alice") is None

    def test_persists_across_instances(self, tmp_path):
        """Test records survive a new store instance."""
        JsonFileRecordStore(tmp_path).put("auth_users", self.record)

        assert JsonFileRecordStore(tmp_path).get("auth_users", "alice") == self.record

    def test_collections_are_separate(self, tmp_path):
        """Test same key in two collections."""
        store = JsonFileRecordStore(tmp_path)
        store.put("auth_users", self.record)

        assert store.get("entries", "alice") is None

    def test_creates_missing_directory(self, tmp_path):
        """Test nested data directory is created on first write."""
        store = JsonFileRecordStore(tmp_path / "nested" / "dir")
        store.put("auth_users", self.record)

        assert store.get("auth_users", "alice") == self.record

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
    def test_owner_only_permissions(self, tmp_path):
        """Test data files are readable by the owner only."""
        store = JsonFileRecordStore(tmp_path)
        store.put("auth_users", self.record)

        mode = stat.S_IMODE((tmp_path / "auth_users.json").stat().st_mode)
        assert mode == 0o600

    def test_corrupt_file(self, tmp_path):
        """Test corrupt JSON raises StorageError."""
        (tmp_path / "auth_users.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileRecordStore(tmp_path).get("auth_users", "alice")

    def test_non_object_file(self, tmp_path):
        """Test a JSON array collection file raises StorageError."""
        (tmp_path / "auth_users.json").write_text("[]", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileRecordStore(tmp_path).get("auth_users", "alice")


class TestJsonFileSessionStore:
    """Test on-disk session slot."""

    def test_save_load_clear(self, tmp_path):
        """Test session slot lifecycle."""
        store = JsonFileSessionStore(tmp_path)

        assert store.load() is None

        store.save({"user": {"user_id": "u1"}, "expires_at": "2030-01-01T00:00:00+00:00"})
        assert store.path == tmp_path / "auth_session.json"
        assert store.load()["user"]["user_id"] == "u1"

        store.clear()
        assert store.load() is None

    def test_clear_missing(self, tmp_path):
        """Test clearing an empty slot does nothing."""
        JsonFileSessionStore(tmp_path).clear()

    def test_custom_slot(self, tmp_path):
        """Test slot name selects the file."""
        store = JsonFileSessionStore(tmp_path, slot="other_session")
        store.save({"a": 1})

        assert (tmp_path / "other_session.json").exists()
