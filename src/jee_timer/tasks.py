from __future__ import annotations

"""Blocking backend calls run off the UI thread.

A ``BackgroundTask`` runs one callable on a daemon thread and reports back
through Qt signals; slots connected from the GUI thread receive them as
queued calls. Give it a parent widget so it stays alive until the result is
delivered; it deletes itself afterwards.
"""

import logging
import threading
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import JeeTimerError

_log = logging.getLogger(__name__)


class BackgroundTask(QObject):
    finished = pyqtSignal(object)
    failed = pyqtSignal(str)

    def __init__(self, operation: Callable[[], Any], parent: Optional[QObject] = None, name: str = "task"):
        super().__init__(parent)
        self._operation = operation
        self._name = name
        self._thread: threading.Thread | None = None
        self.finished.connect(self.deleteLater)
        self.failed.connect(self.deleteLater)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def run_blocking(self) -> None:
        self._run()

    def _run(self) -> None:
        try:
            result = self._operation()
        except JeeTimerError as e:
            _log.warning("%s failed: %s", self._name, e)
            self.failed.emit(str(e))
            return
        except Exception as e:
            _log.exception("%s crashed", self._name)
            self.failed.emit(f"Unexpected error: {e}")
            return
        self.finished.emit(result)


def run_in_background(
    parent: QObject,
    operation: Callable[[], Any],
    on_finished: Callable[[Any], None],
    on_failed: Callable[[str], None],
    name: str = "task",
) -> BackgroundTask:
    task = BackgroundTask(operation, parent, name)
    task.finished.connect(on_finished)
    task.failed.connect(on_failed)
    task.start()
    return task


__all__ = ["BackgroundTask", "run_in_background"]
