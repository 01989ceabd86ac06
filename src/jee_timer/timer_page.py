from __future__ import annotations

"""Timer UI: live stopwatch and subject selector for one study type."""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QComboBox,
)

from .errors import StorageError
from .models import STUDY_TYPE_LABELS, SUBJECTS, StudyRecord
from .time_utils import format_hhmmss
from .timer_service import TimerService
from .toast import show_error, show_toast


class TimerPage(QWidget):  # pragma: no cover UI
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self._timer_service = timer_service
        label = STUDY_TYPE_LABELS[timer_service.study_type]

        title = QLabel(f"{label} Timer")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = title.font()
        font.setPointSize(16)
        font.setBold(True)
        title.setFont(font)

        self.subject_combo = QComboBox()
        for value, text in SUBJECTS:
            self.subject_combo.addItem(text, value)
        idx = self.subject_combo.findData(timer_service.current_subject)
        if idx >= 0:
            self.subject_combo.setCurrentIndex(idx)

        self.timer_label = QLabel(format_hhmmss(0))
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = self.timer_label.font()
        font.setPointSize(36)
        self.timer_label.setFont(font)

        self.recording_label = QLabel("Recording...")
        self.recording_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.recording_label.setStyleSheet("color: #2a2; font-weight: bold;")
        self.recording_label.hide()

        self.btn_start = QPushButton("Start Timer")
        self.btn_stop = QPushButton("Stop Timer")
        self.btn_stop.setEnabled(False)
        btn_row = QHBoxLayout()
        btn_row.addWidget(self.btn_start)
        btn_row.addWidget(self.btn_stop)

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addWidget(self.timer_label)
        layout.addWidget(self.recording_label)
        layout.addWidget(QLabel("Select Subject:"))
        layout.addWidget(self.subject_combo)
        layout.addLayout(btn_row)
        layout.addStretch(1)

        self.btn_start.clicked.connect(self._on_start)
        self.btn_stop.clicked.connect(self._on_stop)
        self.subject_combo.currentIndexChanged.connect(self._on_subject_changed)
        self._timer_service.tick.connect(self._on_tick)
        self._timer_service.stopped.connect(self._on_stopped)
        self._timer_service.state_changed.connect(self._on_state_changed)

    # --- Button handlers ------------------------------------------------
    def _on_start(self) -> None:
        self._timer_service.start()
        show_toast(self, f"{STUDY_TYPE_LABELS[self._timer_service.study_type]} timer is now running")

    def _on_stop(self) -> None:
        try:
            self._timer_service.stop()
        except StorageError as e:
            show_error(self, f"Could not save session: {e}")

    def _on_subject_changed(self) -> None:
        self._timer_service.set_subject(self.subject_combo.currentData())

    # --- Timer service callbacks ---------------------------------------
    def _on_tick(self, elapsed: int) -> None:
        self.timer_label.setText(format_hhmmss(elapsed))

    def _on_stopped(self, record: StudyRecord) -> None:
        show_toast(
            self,
            f"Study Session Completed! Duration: {format_hhmmss(record.duration)} | Subject: {record.subject}",
        )

    def _on_state_changed(self, state: str) -> None:
        running = state == "running"
        self.btn_start.setEnabled(not running)
        self.btn_stop.setEnabled(running)
        # Subject is fixed for the duration of a run
        self.subject_combo.setEnabled(not running)
        self.recording_label.setVisible(running)
        self.timer_label.setStyleSheet("color: #2a2;" if running else "")


__all__ = ["TimerPage"]
