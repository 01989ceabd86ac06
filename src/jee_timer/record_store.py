from __future__ import annotations

"""RecordStore persists the profile, access key and study-record list.

Each entry is stored whole under a fixed key; the record list is rewritten in
full on every save (read, prepend, write). Errors from SQLite or from decoding
a stored payload are raised as ``StorageError`` so callers can report them.
"""

import json
import logging
import sqlite3
from typing import List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .database_manager import DatabaseManager
from .errors import DuplicateRecordError, StorageError
from .models import StudyRecord, UserData, check_study_type
from .repositories import get_value, remove_values, set_value

USER_DATA_KEY = "jee_timer_user_data"
STUDY_RECORDS_KEY = "jee_timer_study_records"
APP_KEY_KEY = "jee_timer_app_key"
STORAGE_KEYS = (USER_DATA_KEY, STUDY_RECORDS_KEY, APP_KEY_KEY)

_log = logging.getLogger(__name__)


class RecordStore(QObject):
    changed = pyqtSignal()

    def __init__(self, db: DatabaseManager):
        super().__init__()
        self._db = db

    # --- User data --------------------------------------------------------
    def save_user_data(self, user_data: UserData) -> None:
        self._write(USER_DATA_KEY, json.dumps(user_data.to_dict()))
        self.changed.emit()

    def get_user_data(self) -> Optional[UserData]:
        raw = self._read(USER_DATA_KEY)
        if raw is None:
            return None
        try:
            return UserData.from_dict(json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            raise StorageError(f"Stored user data is unreadable: {e}") from e

    # --- Study records ----------------------------------------------------
    def save_study_record(self, record: StudyRecord) -> None:
        existing = self.get_study_records()
        if any(r.id == record.id for r in existing):
            raise DuplicateRecordError(f"Study record {record.id} already saved")
        payload = [record.to_dict()] + [r.to_dict() for r in existing]
        self._write(STUDY_RECORDS_KEY, json.dumps(payload))
        _log.info(
            "study record saved",
            extra={"_json_type": record.type, "_json_duration": record.duration},
        )
        self.changed.emit()

    def get_study_records(self) -> List[StudyRecord]:
        raw = self._read(STUDY_RECORDS_KEY)
        if raw is None:
            return []
        try:
            return [StudyRecord.from_dict(item) for item in json.loads(raw)]
        except (ValueError, TypeError, KeyError) as e:
            raise StorageError(f"Stored study records are unreadable: {e}") from e

    def get_records_by_type(self, study_type: str) -> List[StudyRecord]:
        check_study_type(study_type)
        return [r for r in self.get_study_records() if r.type == study_type]

    # --- Access key -------------------------------------------------------
    def save_app_key(self, key: str) -> None:
        self._write(APP_KEY_KEY, key)
        self.changed.emit()

    def get_app_key(self) -> Optional[str]:
        return self._read(APP_KEY_KEY)

    # --- Reset ------------------------------------------------------------
    def clear_all_data(self) -> None:
        try:
            remove_values(self._db, STORAGE_KEYS)
        except sqlite3.Error as e:
            raise StorageError(f"Could not clear local data: {e}") from e
        _log.info("local data cleared")
        self.changed.emit()

    # --- Internal ---------------------------------------------------------
    def _read(self, key: str) -> Optional[str]:
        try:
            return get_value(self._db, key)
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {key}: {e}") from e

    def _write(self, key: str, value: str) -> None:
        try:
            set_value(self._db, key, value)
        except sqlite3.Error as e:
            raise StorageError(f"Could not write {key}: {e}") from e


__all__ = [
    "RecordStore",
    "USER_DATA_KEY",
    "STUDY_RECORDS_KEY",
    "APP_KEY_KEY",
    "STORAGE_KEYS",
]
