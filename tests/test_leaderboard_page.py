import httpx

from jee_timer.leaderboard_page import OFFLINE_TEXT, LeaderboardPage
from jee_timer.session import AppSession
from jee_timer.supabase_client import SupabaseClient, SupabaseConfig

ROWS = [
    {"id": 1, "username": "asha", "total_study_time": 7200, "name": "Asha", "class": "12"},
    {"id": 2, "username": "ravi", "total_study_time": 3600, "name": "Ravi", "class": "11"},
]


def _page(store, qtbot, client: SupabaseClient) -> LeaderboardPage:
    page = LeaderboardPage(AppSession(store, client))
    qtbot.addWidget(page)
    return page


def test_unconfigured_backend_skips_fetch(store, qtbot, monkeypatch):
    requests: list[httpx.Request] = []
    client = SupabaseClient(
        SupabaseConfig(url="", anon_key=""),
        transport=httpx.MockTransport(lambda r: requests.append(r) or httpx.Response(200, json=[])),
    )
    errors: list[str] = []
    monkeypatch.setattr("jee_timer.leaderboard_page.show_error", lambda parent, message: errors.append(message))
    page = _page(store, qtbot, client)

    page.refresh()

    assert requests == []
    assert errors == []
    assert page.table.rowCount() == 0
    assert page.empty_label.text() == OFFLINE_TEXT


def test_rows_load_in_background(store, qtbot):
    client = SupabaseClient(
        SupabaseConfig(url="https://example.supabase.co", anon_key="anon"),
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json=ROWS)),
    )
    page = _page(store, qtbot, client)

    page.refresh()
    assert not page.btn_refresh.isEnabled()

    qtbot.waitUntil(lambda: page.table.rowCount() == 2, timeout=5000)
    assert page.table.item(0, 1).text() == "@asha"
    assert page.table.item(1, 4).text() == "01:00:00"
    assert page.btn_refresh.isEnabled()


def test_load_failure_reports_error(store, qtbot, monkeypatch):
    client = SupabaseClient(
        SupabaseConfig(url="https://example.supabase.co", anon_key="anon"),
        transport=httpx.MockTransport(lambda r: httpx.Response(500, json={"message": "database unavailable"})),
    )
    errors: list[str] = []
    monkeypatch.setattr("jee_timer.leaderboard_page.show_error", lambda parent, message: errors.append(message))
    page = _page(store, qtbot, client)

    page.refresh()

    qtbot.waitUntil(lambda: bool(errors), timeout=5000)
    assert errors[0].startswith("Error Loading Leaderboard:")
    assert page.btn_refresh.isEnabled()
