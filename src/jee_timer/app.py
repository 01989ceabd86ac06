from __future__ import annotations

import sys
import logging
from dataclasses import dataclass
from typing import Optional

from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QListWidget,
    QWidget,
    QStackedWidget,
    QHBoxLayout,
    QDialog,
)

from .config import AppConfig
from .database_manager import DBConfig, DatabaseManager
from .home_page import HomePage
from .leaderboard_page import LeaderboardPage
from .logging_setup import configure_logging
from .login_dialog import LoginDialog
from .models import LECTURE_STUDY, SELF_STUDY
from .record_store import RecordStore
from .records_page import RecordsPage
from .report_page import ReportPage
from .session import AppSession
from .settings_page import SettingsPage
from .supabase_client import SupabaseClient, SupabaseConfig
from .sync import StudySync
from .tasks import BackgroundTask
from .timer_page import TimerPage
from .timer_service import TimerService


APP_NAME = "JEE Timer"


@dataclass(slots=True)
class AppState:
    config: AppConfig
    db: DatabaseManager
    store: RecordStore
    session: AppSession
    timers: dict[str, TimerService]


def get_app_state(config: AppConfig | None = None) -> AppState:
    config = config or AppConfig.from_env()
    config.data_dir.mkdir(parents=True, exist_ok=True)
    # Logging first
    configure_logging(config.data_dir, config.log_level)
    db = DatabaseManager(DBConfig(path=config.db_path))
    db.init_db()
    store = RecordStore(db)
    client = SupabaseClient(
        SupabaseConfig(
            url=config.supabase_url,
            anon_key=config.supabase_anon_key,
            user_id_column=config.supabase_user_column,
        )
    )
    session = AppSession(store, client, StudySync(store, client))
    # Cached profile only; MainWindow.start restores the auth session off the UI thread
    session.load_local_user()
    timers = {t: TimerService(store, t) for t in (SELF_STUDY, LECTURE_STUDY)}
    logging.getLogger(__name__).info(
        "app_state_created",
        extra={"_json_backend": config.backend_configured, "_json_db": str(config.db_path)},
    )
    return AppState(config=config, db=db, store=store, session=session, timers=timers)


class Sidebar(QListWidget):
    PAGES = ["Home", "Self Study Timer", "Lecture Study Timer", "Records", "Reports", "Leaderboard", "Settings"]

    def __init__(self) -> None:
        super().__init__()
        self.addItems(self.PAGES)
        self.setFixedWidth(170)
        self.setCurrentRow(0)


class MainWindow(QMainWindow):  # pragma: no cover UI
    def __init__(self, state: AppState) -> None:  # noqa: D401
        super().__init__()
        self.state = state
        self._restore: BackgroundTask | None = None
        self.setWindowTitle(APP_NAME)
        self.resize(1000, 680)

        self.sidebar = Sidebar()
        self.pages = QStackedWidget()
        self.home_page = HomePage(state.session)
        self.records_page = RecordsPage(state.store)
        self.report_page = ReportPage(state.store, state.config.reports_dir)
        for page in Sidebar.PAGES:
            if page == "Home":
                self.pages.addWidget(self.home_page)
            elif page == "Self Study Timer":
                self.pages.addWidget(TimerPage(state.timers[SELF_STUDY]))
            elif page == "Lecture Study Timer":
                self.pages.addWidget(TimerPage(state.timers[LECTURE_STUDY]))
            elif page == "Records":
                self.pages.addWidget(self.records_page)
            elif page == "Reports":
                self.pages.addWidget(self.report_page)
            elif page == "Leaderboard":
                self.pages.addWidget(LeaderboardPage(state.session))
            elif page == "Settings":
                settings = SettingsPage(state.session, self._on_logged_out)
                settings.logout_started.connect(self._discard_timers)
                self.pages.addWidget(settings)

        container = QWidget()
        container_layout = QHBoxLayout(container)
        container_layout.addWidget(self.sidebar)
        container_layout.addWidget(self.pages, 1)
        self.setCentralWidget(container)
        self.sidebar.currentRowChanged.connect(self.pages.setCurrentIndex)
        self.home_page.navigate.connect(self._navigate)

    def _navigate(self, page: str, study_type: str) -> None:
        if page == "timer":
            row = Sidebar.PAGES.index("Self Study Timer" if study_type == SELF_STUDY else "Lecture Study Timer")
        elif page == "records":
            self.records_page.select_type(study_type)
            row = Sidebar.PAGES.index("Records")
        elif page == "report":
            self.report_page.select_type(study_type)
            row = Sidebar.PAGES.index("Reports")
        elif page == "leaderboard":
            row = Sidebar.PAGES.index("Leaderboard")
        else:
            row = 0
        self.sidebar.setCurrentRow(row)

    def ensure_signed_in(self) -> bool:
        session = self.state.session
        if session.is_authenticated or not session.client.configured:
            return True
        dialog = LoginDialog(session, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return False
        self.home_page.start_login_sync()
        return True

    def start(self) -> None:
        """Show the window and restore the saved auth session in the background."""
        self.show()
        self._restore = BackgroundTask(self.state.session.restore, self, name="session-restore")
        self._restore.finished.connect(self._on_restored)
        self._restore.failed.connect(lambda _message: self._on_restored(False))
        self._restore.start()

    def _on_restored(self, authenticated: bool) -> None:
        self._restore = None
        if authenticated:
            self.home_page.start_login_sync()
        elif not self.ensure_signed_in():
            self.close()

    def _discard_timers(self) -> None:
        for timer in self.state.timers.values():
            timer.discard()

    def _on_logged_out(self) -> None:
        self.sidebar.setCurrentRow(0)
        if not self.ensure_signed_in():
            self.close()


def run(argv: Optional[list[str]] = None) -> int:  # pragma: no cover
    if argv is None:
        argv = sys.argv
    app = QApplication(argv)
    state = get_app_state()
    window = MainWindow(state)
    window.start()
    return app.exec()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
