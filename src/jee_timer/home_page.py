from __future__ import annotations

"""Home page: per-type summaries, navigation shortcuts and manual sync."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton, QInputDialog
)

from .errors import StorageError
from .models import LECTURE_STUDY, SELF_STUDY, STUDY_TYPE_LABELS
from .session import AppSession
from .stats import stats_by_type
from .sync import SyncWorker
from .tasks import run_in_background
from .time_utils import format_hhmmss
from .toast import show_error, show_toast


class HomePage(QWidget):  # pragma: no cover UI
    navigate = pyqtSignal(str, str)  # page, study type

    def __init__(self, session: AppSession):
        super().__init__()
        self._session = session
        self._worker: SyncWorker | None = None

        self.greeting = QLabel("")
        font = self.greeting.font()
        font.setPointSize(16)
        self.greeting.setFont(font)
        self.username_label = QLabel("")
        self.btn_username = QPushButton("Set Leaderboard Username")

        grid = QGridLayout()
        self._summary_labels: dict[str, QLabel] = {}
        for col, study_type in enumerate((SELF_STUDY, LECTURE_STUDY)):
            label = STUDY_TYPE_LABELS[study_type]
            title = QLabel(label)
            title.setAlignment(Qt.AlignmentFlag.AlignCenter)
            summary = QLabel("")
            summary.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self._summary_labels[study_type] = summary
            grid.addWidget(title, 0, col)
            grid.addWidget(summary, 1, col)
            for row, (page, text) in enumerate(
                (("timer", f"{label} Timer"), ("records", f"{label} Records"), ("report", f"{label} Report")),
                start=2,
            ):
                btn = QPushButton(text)
                btn.clicked.connect(lambda _=False, p=page, t=study_type: self.navigate.emit(p, t))
                grid.addWidget(btn, row, col)

        self.total_label = QLabel("")
        self.btn_sync = QPushButton("Sync Study Time")
        self.btn_leaderboard = QPushButton("Leaderboard")
        bottom = QHBoxLayout()
        bottom.addWidget(self.btn_sync)
        bottom.addWidget(self.btn_leaderboard)

        layout = QVBoxLayout(self)
        layout.addWidget(self.greeting)
        user_row = QHBoxLayout()
        user_row.addWidget(self.username_label, 1)
        user_row.addWidget(self.btn_username)
        layout.addLayout(user_row)
        layout.addLayout(grid)
        layout.addWidget(self.total_label)
        layout.addLayout(bottom)
        layout.addStretch(1)

        self.btn_sync.clicked.connect(self._on_sync)
        self.btn_leaderboard.clicked.connect(lambda: self.navigate.emit("leaderboard", ""))
        self.btn_username.clicked.connect(self._on_set_username)
        self._session.store.changed.connect(self.refresh)
        self._session.changed.connect(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        user = self._session.user
        self.greeting.setText(f"Welcome back, {user.name}!" if user and user.name else "Welcome to JEE Timer")
        username = user.username if user else None
        self.username_label.setText(f"@{username}" if username else "No leaderboard username yet")
        self.btn_username.setVisible(self._session.is_authenticated and not username)
        self.btn_sync.setEnabled(self._session.is_authenticated)
        try:
            records = self._session.store.get_study_records()
        except StorageError as e:
            show_error(self, str(e))
            return
        by_type = stats_by_type(records)
        for study_type, label in self._summary_labels.items():
            s = by_type[study_type]
            label.setText(f"{s.sessions} sessions • {format_hhmmss(s.total_time)}")
        total = sum(s.total_time for s in by_type.values())
        self.total_label.setText(f"Total study time: {format_hhmmss(total)}")

    def start_login_sync(self) -> None:
        self._start_worker(self._session.auto_sync)

    def _on_sync(self) -> None:
        self._start_worker(self._session.push_sync)

    def _start_worker(self, operation) -> None:
        if not self._session.remote_user_id:
            return
        self.btn_sync.setEnabled(False)
        self._worker = SyncWorker(operation, self)
        self._worker.finished.connect(self._on_synced)
        self._worker.failed.connect(self._on_sync_failed)
        self._worker.start()

    def _on_synced(self, total: int) -> None:
        self.btn_sync.setEnabled(True)
        show_toast(self, f"Study time synced: {format_hhmmss(total)}")

    def _on_sync_failed(self, message: str) -> None:
        self.btn_sync.setEnabled(True)
        show_error(self, f"Sync failed: {message}")

    def _on_set_username(self) -> None:
        text, ok = QInputDialog.getText(self, "Choose Username", "Unique username (letters, numbers, _):")
        if not ok:
            return
        self.btn_username.setEnabled(False)
        run_in_background(
            self,
            lambda: self._session.set_username(text),
            self._on_username_set,
            self._on_username_failed,
            name="set-username",
        )

    def _on_username_set(self, username: str) -> None:
        self.btn_username.setEnabled(True)
        show_toast(self, f'Your username "{username}" is now active on the leaderboard.')

    def _on_username_failed(self, message: str) -> None:
        self.btn_username.setEnabled(True)
        show_error(self, f"Error Setting Username: {message}")


__all__ = ["HomePage"]
