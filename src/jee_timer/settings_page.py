from __future__ import annotations

"""Profile settings: leaderboard username, password, feedback and logout."""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QSpinBox, QTextEdit, QMessageBox
)

from .session import AppSession
from .tasks import run_in_background
from .validation import sanitize_username
from .toast import show_error, show_toast


class SettingsPage(QWidget):  # pragma: no cover UI heavy
    logout_started = pyqtSignal()

    def __init__(self, session: AppSession, on_logout):
        super().__init__()
        self._session = session
        self._on_logout = on_logout

        layout = QVBoxLayout(self)
        self.profile_label = QLabel("")
        layout.addWidget(self.profile_label)

        # Username
        layout.addWidget(QLabel("Leaderboard Username"))
        user_row = QHBoxLayout()
        self.username_edit = QLineEdit()
        self.username_edit.setPlaceholderText("Enter unique username")
        self.btn_username = QPushButton("Update Username")
        user_row.addWidget(self.username_edit, 1)
        user_row.addWidget(self.btn_username)
        layout.addLayout(user_row)

        # Password
        layout.addWidget(QLabel("Change Password"))
        pw_row = QHBoxLayout()
        self.password_edit = QLineEdit(); self.password_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.confirm_edit = QLineEdit(); self.confirm_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.password_edit.setPlaceholderText("New password")
        self.confirm_edit.setPlaceholderText("Confirm password")
        self.btn_password = QPushButton("Update Password")
        for w in (self.password_edit, self.confirm_edit, self.btn_password):
            pw_row.addWidget(w)
        layout.addLayout(pw_row)

        # Feedback
        layout.addWidget(QLabel("Feedback"))
        self.feedback_edit = QTextEdit()
        self.feedback_edit.setPlaceholderText("Tell us what you think...")
        fb_row = QHBoxLayout()
        self.rating_spin = QSpinBox(); self.rating_spin.setRange(1, 5); self.rating_spin.setValue(5)
        self.btn_feedback = QPushButton("Submit Feedback")
        fb_row.addWidget(QLabel("Rating:")); fb_row.addWidget(self.rating_spin)
        fb_row.addStretch(1); fb_row.addWidget(self.btn_feedback)
        layout.addWidget(self.feedback_edit)
        layout.addLayout(fb_row)

        self.btn_logout = QPushButton("Log Out")
        layout.addWidget(self.btn_logout)
        layout.addStretch(1)

        self.username_edit.textEdited.connect(self._on_username_edited)
        self.btn_username.clicked.connect(self._save_username)
        self.btn_password.clicked.connect(self._save_password)
        self.btn_feedback.clicked.connect(self._send_feedback)
        self.btn_logout.clicked.connect(self._logout)
        self._session.changed.connect(self._load)
        self._load()

    # --- Core ---------------------------------------------------------
    def _load(self) -> None:
        user = self._session.user
        if user is None:
            self.profile_label.setText("Not signed in")
            self.username_edit.clear()
            return
        self.profile_label.setText(f"{user.name} • {user.email} • Class {user.class_name} • {user.city}, {user.state}")
        self.username_edit.setText(user.username or "")

    def _on_username_edited(self, text: str) -> None:
        cleaned = sanitize_username(text)
        if cleaned != text:
            self.username_edit.setText(cleaned)

    def _run(self, button: QPushButton, operation, on_done, error_title: str, name: str) -> None:
        button.setEnabled(False)

        def finished(result) -> None:
            button.setEnabled(True)
            on_done(result)

        def failed(message: str) -> None:
            button.setEnabled(True)
            show_error(self, f"{error_title}: {message}")

        run_in_background(self, operation, finished, failed, name=name)

    def _save_username(self) -> None:
        raw = self.username_edit.text()
        self._run(
            self.btn_username,
            lambda: self._session.set_username(raw),
            lambda username: show_toast(self, f"Your username has been set to @{username}"),
            "Update Failed",
            "set-username",
        )

    def _save_password(self) -> None:
        new, confirm = self.password_edit.text(), self.confirm_edit.text()
        self._run(
            self.btn_password,
            lambda: self._session.change_password(new, confirm),
            self._on_password_saved,
            "Update Failed",
            "change-password",
        )

    def _on_password_saved(self, _result) -> None:
        self.password_edit.clear()
        self.confirm_edit.clear()
        show_toast(self, "Password updated")

    def _send_feedback(self) -> None:
        text, rating = self.feedback_edit.toPlainText(), self.rating_spin.value()
        self._run(
            self.btn_feedback,
            lambda: self._session.submit_feedback(text, rating),
            self._on_feedback_sent,
            "Feedback not sent",
            "feedback",
        )

    def _on_feedback_sent(self, _result) -> None:
        self.feedback_edit.clear()
        self.rating_spin.setValue(5)
        show_toast(self, "Feedback Submitted! Thank you for your valuable feedback.")

    def _logout(self) -> None:
        answer = QMessageBox.question(
            self, "Log Out", "Logging out removes your local study records from this device. Continue?"
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        # Running timers are dropped before the store is cleared
        self.logout_started.emit()
        self._run(self.btn_logout, self._session.logout, lambda _: self._on_logout(), "Logout failed", "logout")


__all__ = ["SettingsPage"]
