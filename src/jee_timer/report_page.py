from __future__ import annotations

"""Report page: summary, subject breakdown and PDF export."""

from pathlib import Path

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QListWidget, QComboBox, QPushButton
)

from .errors import ReportError, StorageError
from .models import STUDY_TYPE_LABELS, STUDY_TYPES, subject_label
from .record_store import RecordStore
from .report import export_report
from .stats import study_stats, subject_breakdown
from .time_utils import format_hhmmss
from .toast import show_error, show_toast


class ReportPage(QWidget):  # pragma: no cover UI
    def __init__(self, store: RecordStore, reports_dir: Path):
        super().__init__()
        self._store = store
        self._reports_dir = reports_dir

        self.type_combo = QComboBox()
        for t in STUDY_TYPES:
            self.type_combo.addItem(STUDY_TYPE_LABELS[t], t)
        self.summary_label = QLabel("")
        self.breakdown_list = QListWidget()
        self.btn_generate = QPushButton("Generate PDF Report")
        self.empty_label = QLabel("No study sessions found. Complete some study sessions to generate a report.")
        self.empty_label.setWordWrap(True)

        top_row = QHBoxLayout()
        top_row.addWidget(QLabel("Report for:"))
        top_row.addWidget(self.type_combo)
        top_row.addStretch(1)

        layout = QVBoxLayout(self)
        layout.addLayout(top_row)
        layout.addWidget(self.summary_label)
        layout.addWidget(QLabel("Subject Breakdown"))
        layout.addWidget(self.breakdown_list, 1)
        layout.addWidget(self.btn_generate)
        layout.addWidget(self.empty_label)

        self.type_combo.currentIndexChanged.connect(self.refresh)
        self.btn_generate.clicked.connect(self._on_generate)
        self._store.changed.connect(self.refresh)
        self.refresh()

    def select_type(self, study_type: str) -> None:
        idx = self.type_combo.findData(study_type)
        if idx >= 0:
            self.type_combo.setCurrentIndex(idx)

    def refresh(self) -> None:
        try:
            records = self._store.get_records_by_type(self.type_combo.currentData())
        except StorageError as e:
            show_error(self, str(e))
            return
        stats = study_stats(records)
        self.summary_label.setText(f"{stats.sessions} Sessions • {format_hhmmss(stats.total_time)}")
        self.breakdown_list.clear()
        for share in subject_breakdown(records):
            self.breakdown_list.addItem(
                f"{subject_label(share.subject)}: {format_hhmmss(share.duration)} ({share.percentage}%)"
            )
        self.btn_generate.setEnabled(bool(records))
        self.empty_label.setVisible(not records)

    def _on_generate(self) -> None:
        study_type = self.type_combo.currentData()
        try:
            records = self._store.get_records_by_type(study_type)
            path = export_report(records, study_type, self._reports_dir)
        except (ReportError, StorageError) as e:
            show_error(self, f"Error Generating PDF: {e}")
            return
        show_toast(self, f"PDF Generated Successfully! Saved to {path}")
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(path)))


__all__ = ["ReportPage"]
