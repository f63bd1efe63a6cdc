"""
JSON File Store Adapters - Local-disk record and session storage.

Default backend for the local-first application. Each collection is one
JSON document mapping record id to record; the session slot is its own
file. Files are written atomically (temp file + rename) and restricted to
the owner on POSIX systems.
"""

import os
import json
import stat
import logging
import tempfile
import threading
from pathlib import Path
from typing import Optional, Dict, Any, Union

from locker_auth.ports.record_store_port import RecordStorePort
from locker_auth.ports.session_store_port import SessionStorePort
from locker_auth.errors import StorageError

logger = logging.getLogger("locker.auth")


def _read_json(path: Path) -> Optional[Any]:
    """Read a JSON file; None if it does not exist."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise StorageError(f"Corrupt data file {path}") from e
    except OSError as e:
        raise StorageError(f"Failed to read {path}: {e}") from e


def _write_json(path: Path, data: Any) -> None:
    """Atomically replace a JSON file, owner read/write only."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            if os.name == "posix":
                os.chmod(tmp_path, stat.S_IRUSR | stat.S_IWUSR)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e


class JsonFileRecordStore(RecordStorePort):
    """
    Record storage as one JSON file per collection.

    The lock serialises access within one process only.
    """

    def __init__(self, data_dir: Union[str, Path]):
        """
        Args:
            data_dir: Directory holding the collection files
        """
        self._dir = Path(data_dir).expanduser()
        self._lock = threading.Lock()

    def _path(self, collection: str) -> Path:
        return self._dir / f"{collection}.json"

    def _load(self, collection: str) -> Dict[str, Dict[str, Any]]:
        data = _read_json(self._path(collection))
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"Collection file for {collection} is not an object")
        return data

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._load(collection).get(key)

    def put(self, collection: str, record: Dict[str, Any]) -> None:
        key = record["id"]
        with self._lock:
            records = self._load(collection)
            records[key] = record
            _write_json(self._path(collection), records)

    def delete(self, collection: str, key: str) -> None:
        with self._lock:
            records = self._load(collection)
            if records.pop(key, None) is not None:
                _write_json(self._path(collection), records)


class JsonFileSessionStore(SessionStorePort):
    """Session slot stored as a single JSON file."""

    def __init__(self, data_dir: Union[str, Path], slot: str = "auth_session"):
        """
        Args:
            data_dir: Directory holding the session file
            slot: Session slot name (file stem)
        """
        self._path = Path(data_dir).expanduser() / f"{slot}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Dict[str, Any]]:
        data = _read_json(self._path)
        if data is not None and not isinstance(data, dict):
            raise StorageError("Session file is not an object")
        return data

    def save(self, data: Dict[str, Any]) -> None:
        _write_json(self._path, data)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove {self._path}: {e}") from e
        logger.debug("Session file removed: %s", self._path)
