from PyQt6.QtWidgets import QMessageBox

from jee_timer.models import UserData
from jee_timer.session import AppSession
from jee_timer.settings_page import SettingsPage
from jee_timer.supabase_client import SupabaseClient, SupabaseConfig
from jee_timer.timer_service import TimerService


def test_logout_discards_running_timer(store, clock, qtbot, monkeypatch):
    store.save_user_data(UserData("Asha", "12", "Bihar", "Patna", "9876543210", "asha@example.com"))
    session = AppSession(store, SupabaseClient(SupabaseConfig(url="", anon_key="")))
    session.load_local_user()
    service = TimerService(store, "self-study", time_provider=clock)
    logged_out: list[bool] = []
    page = SettingsPage(session, lambda: logged_out.append(True))
    qtbot.addWidget(page)
    page.logout_started.connect(service.discard)
    monkeypatch.setattr(QMessageBox, "question", lambda *args, **kwargs: QMessageBox.StandardButton.Yes)

    service.start()
    clock.advance(30)
    with qtbot.waitSignal(page.logout_started):
        page.btn_logout.click()

    # Dropped before the store is cleared, so a later Stop has nothing to save
    assert not service.is_running
    assert service.stop() is None
    qtbot.waitUntil(lambda: logged_out == [True], timeout=5000)
    assert session.user is None
    assert store.get_user_data() is None
    assert store.get_study_records() == []


def test_logout_cancelled_keeps_timer(store, clock, qtbot, monkeypatch):
    session = AppSession(store, SupabaseClient(SupabaseConfig(url="", anon_key="")))
    service = TimerService(store, "lecture-study", time_provider=clock)
    page = SettingsPage(session, lambda: None)
    qtbot.addWidget(page)
    page.logout_started.connect(service.discard)
    monkeypatch.setattr(QMessageBox, "question", lambda *args, **kwargs: QMessageBox.StandardButton.No)

    service.start()
    page.btn_logout.click()

    assert service.is_running
