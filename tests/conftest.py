import os
from datetime import datetime, timedelta
from pathlib import Path
import sys
import uuid

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from jee_timer.database_manager import DBConfig, DatabaseManager
from jee_timer.models import StudyRecord
from jee_timer.record_store import RecordStore
from jee_timer.time_utils import format_date


class MemoryKeyring(KeyringBackend):
    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError("not stored")


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def memory_keyring():
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture()
def db(tmp_path: Path):
    config = DBConfig(path=tmp_path / "test.sqlite")
    manager = DatabaseManager(config)
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture()
def store(db, qapp):
    return RecordStore(db)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2025, 1, 1, 12, 0, 0))


@pytest.fixture()
def make_record():
    def factory(duration: int, study_type: str = "self-study", subject: str = "physics",
                start: datetime | None = None) -> StudyRecord:
        start = start or datetime(2025, 1, 1, 9, 0, 0)
        return StudyRecord(
            id=uuid.uuid4().hex,
            type=study_type,
            subject=subject,
            start_time=start,
            end_time=start + timedelta(seconds=duration),
            duration=duration,
            date=format_date(start),
        )

    return factory
