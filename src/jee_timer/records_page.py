from __future__ import annotations

"""Study records page.

Features:
 - Session list for the chosen study type, most recent first.
 - Session count + total time summary.
 - Subject distribution donut and per-day hours bar chart.

Figures are redrawn whenever the RecordStore reports a change.
"""

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QListWidget, QComboBox, QSizePolicy
)

from .errors import StorageError
from .models import STUDY_TYPE_LABELS, STUDY_TYPES, subject_label
from .record_store import RecordStore
from .stats import daily_totals, study_stats, subject_breakdown
from .time_utils import format_clock, format_hhmmss
from .toast import show_error

RECENT_DAYS_SHOWN = 7


class RecordsPage(QWidget):  # pragma: no cover heavy UI
    def __init__(self, store: RecordStore):
        super().__init__()
        self._store = store

        self.type_combo = QComboBox()
        for t in STUDY_TYPES:
            self.type_combo.addItem(STUDY_TYPE_LABELS[t], t)
        self.summary_label = QLabel("0 sessions • Total: 00:00:00")
        self.sessions_list = QListWidget()

        charts_layout = QHBoxLayout()
        self.subject_canvas = self._build_canvas()
        self.daily_canvas = self._build_canvas()
        charts_layout.addWidget(self.subject_canvas, 1)
        charts_layout.addWidget(self.daily_canvas, 1)

        top_row = QHBoxLayout()
        top_row.addWidget(self.type_combo)
        top_row.addWidget(self.summary_label, 1)

        layout = QVBoxLayout(self)
        layout.addLayout(top_row)
        layout.addWidget(self.sessions_list, 2)
        layout.addLayout(charts_layout, 1)

        self.type_combo.currentIndexChanged.connect(self.refresh)
        self._store.changed.connect(self.refresh)
        self.refresh()

    def select_type(self, study_type: str) -> None:
        idx = self.type_combo.findData(study_type)
        if idx >= 0:
            self.type_combo.setCurrentIndex(idx)

    # --- Helpers ------------------------------------------------------
    def _build_canvas(self):
        fig = Figure(figsize=(3, 3))
        canvas = FigureCanvas(fig)
        canvas.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        return canvas

    # --- Slots --------------------------------------------------------
    def refresh(self) -> None:
        study_type = self.type_combo.currentData()
        try:
            records = self._store.get_records_by_type(study_type)
        except StorageError as e:
            show_error(self, str(e))
            return
        stats = study_stats(records)
        self.summary_label.setText(f"{stats.sessions} sessions • Total: {format_hhmmss(stats.total_time)}")
        self.sessions_list.clear()
        for r in records:
            self.sessions_list.addItem(
                f"{r.date}  {format_clock(r.start_time)} - {format_clock(r.end_time)}  "
                f"{subject_label(r.subject)}  ({format_hhmmss(r.duration)})"
            )
        self._render_charts(records)

    def _render_charts(self, records) -> None:
        fig_subject: Figure = self.subject_canvas.figure
        fig_subject.clear()
        shares = [s for s in subject_breakdown(records) if s.duration > 0]
        if shares:
            ax = fig_subject.add_subplot(111)
            ax.pie(
                [s.duration for s in shares],
                labels=[f"{subject_label(s.subject)} {s.percentage}%" for s in shares],
                wedgeprops=dict(width=0.45),
            )
            ax.set_title("Subject Breakdown")
        fig_subject.tight_layout()
        self.subject_canvas.draw()

        fig_daily: Figure = self.daily_canvas.figure
        fig_daily.clear()
        days = daily_totals(records)[-RECENT_DAYS_SHOWN:]
        ax2 = fig_daily.add_subplot(111)
        ax2.bar([d[5:] for d, _ in days], [v / 3600 for _, v in days], color="#2277ff")
        ax2.set_title("Daily Hours")
        ax2.set_ylabel("Hours")
        fig_daily.tight_layout()
        self.daily_canvas.draw()


__all__ = ["RecordsPage"]
