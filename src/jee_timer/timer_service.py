from __future__ import annotations

"""Stopwatch timer for one study type.

Design:
 - State machine: idle -> running -> idle. There is no paused state.
 - Elapsed time is recomputed from the clock on every tick rather than
   incremented, so a suspended event loop catches up on the next tick.
 - On stop the duration is the floor of the real elapsed time at the stop
   instant. The record's start is the start instant cut to whole seconds and
   its end is ``start + duration``, so ``end - start == duration`` exactly.
   The record is handed to the RecordStore, then the state resets (the
   selected subject is kept).
 - Emits Qt signals for UI binding.
"""

from datetime import datetime, timedelta
import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .models import DEFAULT_SUBJECT, StudyRecord, TimerState, check_study_type
from .record_store import RecordStore
from .time_utils import calculate_duration, format_date, generate_record_id, truncate_seconds

TimeProvider = Callable[[], datetime]

_log = logging.getLogger(__name__)


class TimerService(QObject):
    tick = pyqtSignal(int)  # elapsed seconds
    started = pyqtSignal()
    stopped = pyqtSignal(object)  # StudyRecord
    state_changed = pyqtSignal(str)
    subject_changed = pyqtSignal(str)

    def __init__(
        self,
        store: RecordStore,
        study_type: str,
        time_provider: Optional[TimeProvider] = None,
        subject: str = DEFAULT_SUBJECT,
    ) -> None:
        super().__init__()
        self._store = store
        self._study_type = check_study_type(study_type)
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._timer = QTimer(self)
        self._timer.setInterval(1000)
        self._timer.timeout.connect(self._on_tick)
        self._state = TimerState(current_subject=subject)
        # Untruncated start instant; durations are measured from here
        self._started_at: Optional[datetime] = None

    # --- Properties -----------------------------------------------------
    @property
    def study_type(self) -> str:
        return self._study_type

    @property
    def state(self) -> str:
        return "running" if self._state.is_running else "idle"

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def elapsed(self) -> int:
        return self._state.elapsed_time

    @property
    def current_subject(self) -> str:
        return self._state.current_subject

    def snapshot(self) -> TimerState:
        s = self._state
        return TimerState(s.is_running, s.start_time, s.elapsed_time, s.current_subject)

    # --- Public API -----------------------------------------------------
    def set_subject(self, subject: str) -> None:
        if self._state.is_running:
            raise RuntimeError("Subject cannot change while the timer is running")
        if subject != self._state.current_subject:
            self._state.current_subject = subject
            self.subject_changed.emit(subject)

    def start(self) -> None:
        if self._state.is_running:
            raise RuntimeError("Timer already running; stop it before starting again")
        self._started_at = self._time_provider()
        self._state.start_time = truncate_seconds(self._started_at)
        self._state.elapsed_time = 0
        self._state.is_running = True
        self._timer.start()
        self.state_changed.emit("running")
        self.started.emit()
        self.tick.emit(0)
        _log.info("timer started", extra={"_json_type": self._study_type})

    def stop(self) -> Optional[StudyRecord]:
        if not self._state.is_running or self._started_at is None:
            return None
        start_dt = self._state.start_time
        # Clamped at 0 when the wall clock moved backwards during the run
        duration = max(0, calculate_duration(self._started_at, self._time_provider()))
        record = StudyRecord(
            id=generate_record_id(),
            type=self._study_type,
            subject=self._state.current_subject,
            start_time=start_dt,
            end_time=start_dt + timedelta(seconds=duration),
            duration=duration,
            date=format_date(start_dt),
        )
        # Raises StorageError; the run stays active so the stop can be retried
        self._store.save_study_record(record)
        self._reset()
        self.stopped.emit(record)
        return record

    def discard(self) -> None:
        """End a running session without recording it (e.g. on logout)."""
        if not self._state.is_running:
            return
        _log.info("timer run discarded", extra={"_json_type": self._study_type, "_json_elapsed": self.elapsed})
        self._reset()

    # --- Internal -------------------------------------------------------
    def _reset(self) -> None:
        self._timer.stop()
        self._state.is_running = False
        self._state.start_time = None
        self._state.elapsed_time = 0
        self._started_at = None
        self.state_changed.emit("idle")
        self.tick.emit(0)

    def _on_tick(self) -> None:
        if not self._state.is_running or self._started_at is None:
            return
        self._state.elapsed_time = max(0, calculate_duration(self._started_at, self._time_provider()))
        self.tick.emit(self._state.elapsed_time)


__all__ = ["TimerService", "TimeProvider"]
