from __future__ import annotations

"""Transient message overlay used to report the outcome of a user action."""

from PyQt6.QtCore import QTimer, Qt
from PyQt6.QtWidgets import QLabel, QWidget

INFO_STYLE = "background: rgba(40,40,40,0.88); color: #fff; padding: 6px 12px; border-radius: 6px;"
ERROR_STYLE = "background: rgba(170,40,40,0.92); color: #fff; padding: 6px 12px; border-radius: 6px;"


class Toast(QLabel):  # pragma: no cover - UI utility
    def __init__(self, parent: QWidget, message: str, timeout_ms: int = 2500, error: bool = False):
        super().__init__(parent)
        self.setText(message)
        self.setWordWrap(True)
        self.setMaximumWidth(max(200, parent.width() - 40))
        self.setStyleSheet(ERROR_STYLE if error else INFO_STYLE)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.adjustSize()
        w = parent.width()
        self.move(int((w - self.width()) / 2), 30)
        self.show()
        self.raise_()
        QTimer.singleShot(timeout_ms, self.close)


def show_toast(parent: QWidget, message: str, timeout_ms: int = 2500) -> None:  # pragma: no cover
    Toast(parent.window() or parent, message, timeout_ms)


def show_error(parent: QWidget, message: str, timeout_ms: int = 4000) -> None:  # pragma: no cover
    Toast(parent.window() or parent, message, timeout_ms, error=True)


__all__ = ["show_toast", "show_error"]
