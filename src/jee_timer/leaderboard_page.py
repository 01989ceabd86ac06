from __future__ import annotations

"""Leaderboard page: ranked users by total study time."""

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTableWidget, QTableWidgetItem
)

from .models import LeaderboardEntry
from .session import AppSession
from .sync import SyncWorker
from .tasks import BackgroundTask, run_in_background
from .time_utils import format_hhmmss
from .toast import show_error, show_toast

COLUMNS = ("Rank", "Username", "Name", "Class", "Study Time")
HIGHLIGHT = QColor("#dbe8ff")
EMPTY_TEXT = "Be the first to set a username and appear on the leaderboard!"
OFFLINE_TEXT = "The leaderboard needs a backend connection."


class LeaderboardPage(QWidget):  # pragma: no cover UI
    def __init__(self, session: AppSession):
        super().__init__()
        self._session = session
        self._worker: SyncWorker | None = None
        self._loader: BackgroundTask | None = None

        self.table = QTableWidget(0, len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.empty_label = QLabel(EMPTY_TEXT)
        self.btn_refresh = QPushButton("Refresh")
        self.btn_update = QPushButton("Update My Time")

        btn_row = QHBoxLayout()
        btn_row.addWidget(self.btn_refresh)
        btn_row.addWidget(self.btn_update)
        btn_row.addStretch(1)

        layout = QVBoxLayout(self)
        layout.addLayout(btn_row)
        layout.addWidget(self.table, 1)
        layout.addWidget(self.empty_label)

        self.btn_refresh.clicked.connect(self.refresh)
        self.btn_update.clicked.connect(self._on_update)

    def showEvent(self, event):  # noqa: N802
        super().showEvent(event)
        self.refresh()

    def refresh(self) -> None:
        if not self._session.client.configured:
            self.table.setRowCount(0)
            self.empty_label.setText(OFFLINE_TEXT)
            self.empty_label.setVisible(True)
            return
        if self._loader is not None:
            return
        self.btn_refresh.setEnabled(False)
        self._loader = run_in_background(
            self, self._session.client.get_leaderboard, self._on_loaded, self._on_load_failed, name="leaderboard"
        )

    def _on_loaded(self, entries: list[LeaderboardEntry]) -> None:
        self._loader = None
        self.btn_refresh.setEnabled(True)
        self._populate(entries)

    def _on_load_failed(self, message: str) -> None:
        self._loader = None
        self.btn_refresh.setEnabled(True)
        show_error(self, f"Error Loading Leaderboard: {message}")

    def _populate(self, entries: list[LeaderboardEntry]) -> None:
        me = self._session.user.username if self._session.user else None
        self.table.setRowCount(len(entries))
        for row, e in enumerate(entries):
            values = (str(row + 1), f"@{e.username}", e.name, e.class_name, format_hhmmss(e.total_study_time))
            for col, value in enumerate(values):
                item = QTableWidgetItem(value)
                if me and e.username == me:
                    item.setBackground(HIGHLIGHT)
                self.table.setItem(row, col, item)
        self.table.resizeColumnsToContents()
        self.empty_label.setText(EMPTY_TEXT)
        self.empty_label.setVisible(not entries)

    def _on_update(self) -> None:
        if not self._session.remote_user_id:
            show_error(self, "Sign in to update your study time.")
            return
        self.btn_update.setEnabled(False)
        self._worker = SyncWorker(self._session.push_sync, self)
        self._worker.finished.connect(self._on_synced)
        self._worker.failed.connect(self._on_sync_failed)
        self._worker.start()

    def _on_synced(self, total: int) -> None:
        self._worker = None
        self.btn_update.setEnabled(True)
        show_toast(self, f"Update Successful! Your study time is now {format_hhmmss(total)}")
        self.refresh()

    def _on_sync_failed(self, message: str) -> None:
        self._worker = None
        self.btn_update.setEnabled(True)
        show_error(self, f"Update Failed: {message}")


__all__ = ["LeaderboardPage"]
