from __future__ import annotations

"""One-way sync of the local total study time to the backend.

The backend only ever sees the aggregate number of seconds, never the record
list. On login the larger of the local and remote totals wins and is written
back when the remote value was behind. Sync never modifies local data.

Only one sync per user key runs at a time; an overlapping call raises
``SyncInProgressError`` instead of issuing a second remote write.
"""

from contextlib import contextmanager
import logging
import threading
from typing import Callable, Iterator, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import StorageError, SupabaseError, SyncError, SyncInProgressError
from .record_store import RecordStore
from .stats import total_time
from .supabase_client import SupabaseClient
from .tasks import BackgroundTask

_log = logging.getLogger(__name__)


class StudySync:
    def __init__(self, store: RecordStore, client: SupabaseClient):
        self._store = store
        self._client = client
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()

    # --- Public API -----------------------------------------------------
    def local_total(self) -> int:
        return total_time(self._store.get_study_records())

    def is_syncing(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._in_flight

    def sync_to_database(self, user_id: str) -> int:
        """Push the local total; returns the pushed value."""
        with self._single_flight(user_id):
            local = self._read_local_total()
            self._call(lambda: self._client.update_total_study_time(user_id, local))
            _log.info("study time pushed", extra={"_json_total": local})
            return local

    def load_from_database(self, user_id: str) -> int:
        with self._single_flight(user_id):
            return self._call(lambda: self._client.get_total_study_time(user_id))

    def auto_sync_on_login(self, user_id: str) -> int:
        """Reconcile with ``max(local, remote)``; remote is updated only if behind."""
        with self._single_flight(user_id):
            local = self._read_local_total()
            remote = self._call(lambda: self._client.get_total_study_time(user_id))
            final = max(local, remote)
            if final != remote:
                self._call(lambda: self._client.update_total_study_time(user_id, final))
            _log.info(
                "login sync reconciled",
                extra={"_json_local": local, "_json_remote": remote, "_json_final": final},
            )
            return final

    # --- Internal -------------------------------------------------------
    @contextmanager
    def _single_flight(self, user_id: str) -> Iterator[None]:
        with self._lock:
            if user_id in self._in_flight:
                raise SyncInProgressError("A sync is already running for this account")
            self._in_flight.add(user_id)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(user_id)

    def _read_local_total(self) -> int:
        try:
            return self.local_total()
        except StorageError as e:
            raise SyncError(f"Could not read local records: {e}") from e

    @staticmethod
    def _call(fn: Callable):
        try:
            return fn()
        except SupabaseError as e:
            raise SyncError(f"Sync failed: {e}") from e


class SyncWorker(BackgroundTask):
    """Runs a sync operation on a daemon thread; ``finished`` carries the total seconds."""

    finished = pyqtSignal(int)

    def __init__(self, operation: Callable[[], int], parent: Optional[QObject] = None):
        super().__init__(operation, parent, name="study-sync")


__all__ = ["StudySync", "SyncWorker"]
