from __future__ import annotations

"""Sign-in / sign-up dialog shown until the session is authenticated."""

from PyQt6.QtWidgets import (
    QDialog, QFormLayout, QLabel, QLineEdit, QPushButton, QTabWidget, QVBoxLayout, QWidget, QMessageBox
)

from .errors import ValidationError
from .models import UserData
from .session import AppSession
from .tasks import run_in_background
from .validation import validate_email, validate_password, validate_profile


class LoginDialog(QDialog):  # pragma: no cover UI
    def __init__(self, session: AppSession, parent=None):
        super().__init__(parent)
        self._session = session
        self.setWindowTitle("JEE Timer - Sign In")
        self.resize(420, 420)

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_login_tab(), "Login")
        self.tabs.addTab(self._build_signup_tab(), "Create Account")
        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #a33;")
        self.error_label.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.addWidget(self.tabs)
        layout.addWidget(self.error_label)

    # --- Tabs -----------------------------------------------------------
    def _build_login_tab(self) -> QWidget:
        w = QWidget()
        form = QFormLayout(w)
        self.login_email = QLineEdit()
        self.login_password = QLineEdit(); self.login_password.setEchoMode(QLineEdit.EchoMode.Password)
        self.btn_login = QPushButton("Sign In")
        form.addRow("Email", self.login_email)
        form.addRow("Password", self.login_password)
        form.addRow(self.btn_login)
        self.btn_login.clicked.connect(self._on_login)
        return w

    def _build_signup_tab(self) -> QWidget:
        w = QWidget()
        form = QFormLayout(w)
        self.su_name = QLineEdit()
        self.su_class = QLineEdit()
        self.su_state = QLineEdit()
        self.su_city = QLineEdit()
        self.su_phone = QLineEdit(); self.su_phone.setMaxLength(10)
        self.su_email = QLineEdit()
        self.su_password = QLineEdit(); self.su_password.setEchoMode(QLineEdit.EchoMode.Password)
        self.su_confirm = QLineEdit(); self.su_confirm.setEchoMode(QLineEdit.EchoMode.Password)
        for label, widget in (
            ("Name", self.su_name),
            ("Class", self.su_class),
            ("State", self.su_state),
            ("City", self.su_city),
            ("Phone", self.su_phone),
            ("Email", self.su_email),
            ("Password", self.su_password),
            ("Confirm", self.su_confirm),
        ):
            form.addRow(label, widget)
        self.btn_signup = QPushButton("Create Account")
        form.addRow(self.btn_signup)
        self.btn_signup.clicked.connect(self._on_signup)
        return w

    # --- Handlers -------------------------------------------------------
    def _on_login(self) -> None:
        email, password = self.login_email.text(), self.login_password.text()
        try:
            validate_email(email)
        except ValidationError as e:
            self.error_label.setText(e.message)
            return
        self._begin()
        run_in_background(
            self,
            lambda: self._session.login(email, password),
            lambda _user: self.accept(),
            lambda message: self._fail(f"Login failed: {message}"),
            name="login",
        )

    def _on_signup(self) -> None:
        profile = UserData(
            name=self.su_name.text().strip(),
            class_name=self.su_class.text().strip(),
            state=self.su_state.text().strip(),
            city=self.su_city.text().strip(),
            phone=self.su_phone.text().strip(),
            email=self.su_email.text().strip(),
        )
        email, password, confirm = self.su_email.text(), self.su_password.text(), self.su_confirm.text()
        # Local checks first so field errors show without a round trip
        try:
            validate_email(email)
            validate_profile(profile)
            validate_password(password, confirm)
        except ValidationError as e:
            self.error_label.setText(e.message)
            return
        self._begin()
        run_in_background(
            self,
            lambda: self._session.signup(email, password, confirm, profile),
            lambda signed_in: self._on_signed_up(signed_in, profile.email),
            lambda message: self._fail(f"Sign up failed: {message}"),
            name="signup",
        )

    def _on_signed_up(self, signed_in: bool, email: str) -> None:
        self._set_busy(False)
        if signed_in:
            self.accept()
            return
        QMessageBox.information(
            self, "Check your email", "Please confirm your email address, then sign in."
        )
        self.tabs.setCurrentIndex(0)
        self.login_email.setText(email)

    def _begin(self) -> None:
        self.error_label.setText("")
        self._set_busy(True)

    def _fail(self, message: str) -> None:
        self._set_busy(False)
        self.error_label.setText(message)

    def _set_busy(self, busy: bool) -> None:
        self.btn_login.setEnabled(not busy)
        self.btn_signup.setEnabled(not busy)


__all__ = ["LoginDialog"]
