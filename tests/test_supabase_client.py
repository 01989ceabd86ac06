import json

import httpx
import pytest

from jee_timer.errors import AuthError, SupabaseError
from jee_timer.models import UserData
from jee_timer.supabase_client import SupabaseClient, SupabaseConfig

BASE = "https://example.supabase.co"


def make_client(handler, **config) -> SupabaseClient:
    return SupabaseClient(SupabaseConfig(url=BASE, anon_key="anon", **config), transport=httpx.MockTransport(handler))


def test_get_total_study_time_filters_by_user_column():
    seen = {}

    def handler(request: httpx.Request):
        seen["request"] = request
        return httpx.Response(200, json=[{"total_study_time": 800}])

    client = make_client(handler)
    assert client.get_total_study_time("user-1") == 800
    request = seen["request"]
    assert request.url.path == "/rest/v1/users"
    assert request.url.params["auth_user_id"] == "eq.user-1"
    assert request.headers["apikey"] == "anon"
    assert request.headers["Authorization"] == "Bearer anon"


def test_access_key_column_and_missing_row():
    def handler(request: httpx.Request):
        assert request.url.params["access_key"] == "eq.JEE-KEY"
        return httpx.Response(200, json=[])

    client = make_client(handler, user_id_column="access_key")
    with pytest.raises(SupabaseError) as exc:
        client.get_total_study_time("JEE-KEY")
    assert exc.value.status_code == 404


def test_update_total_sends_patch_with_timestamp():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(204)

    client = make_client(handler)
    client.update_total_study_time("user-1", 900, updated_at="2025-01-01T00:00:00+00:00")
    assert seen["method"] == "PATCH"
    assert seen["body"] == {"total_study_time": 900, "updated_at": "2025-01-01T00:00:00+00:00"}


def test_leaderboard_query_and_parsing():
    def handler(request: httpx.Request):
        params = request.url.params
        assert params["username"] == "not.is.null"
        assert params["order"] == "total_study_time.desc"
        assert params["limit"] == "50"
        return httpx.Response(
            200,
            json=[
                {"id": 1, "username": "top", "total_study_time": 7200, "name": "A", "class": "12"},
                {"id": 2, "username": "next", "total_study_time": None, "name": None, "class": None},
            ],
        )

    entries = make_client(handler).get_leaderboard()
    assert [e.username for e in entries] == ["top", "next"]
    assert entries[0].class_name == "12"
    assert entries[1].total_study_time == 0


def test_http_error_carries_status_and_message():
    client = make_client(lambda request: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(SupabaseError) as exc:
        client.get_leaderboard()
    assert exc.value.status_code == 500
    assert "boom" in str(exc.value)


def test_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(SupabaseError, match="Network error"):
        make_client(handler).username_exists("abc")


def test_unconfigured_client_refuses_requests():
    client = SupabaseClient(SupabaseConfig(url="", anon_key=""))
    assert not client.configured
    with pytest.raises(SupabaseError, match="not configured"):
        client.get_leaderboard()


def test_sign_in_sets_bearer_token():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        if request.url.path == "/auth/v1/token":
            assert request.url.params["grant_type"] == "password"
            return httpx.Response(
                200,
                json={
                    "access_token": "at",
                    "refresh_token": "rt",
                    "expires_at": 123,
                    "user": {"id": "u1", "email": "a@b.co", "user_metadata": {"name": "Asha"}},
                },
            )
        return httpx.Response(200, json=[{"username": "taken"}])

    client = make_client(handler)
    session = client.sign_in_with_password("a@b.co", "secret1")
    assert session.user_id == "u1"
    assert session.user_metadata == {"name": "Asha"}
    assert client.username_exists("taken") is True
    assert calls[-1].headers["Authorization"] == "Bearer at"


def test_bad_credentials_raise_auth_error():
    client = make_client(lambda r: httpx.Response(400, json={"error_description": "Invalid login credentials"}))
    with pytest.raises(AuthError, match="Invalid login credentials"):
        client.sign_in_with_password("a@b.co", "wrong")


def test_sign_up_pending_confirmation_returns_none():
    client = make_client(lambda r: httpx.Response(200, json={"id": "u1", "email": "a@b.co"}))
    assert client.sign_up("a@b.co", "secret1", {"name": "Asha"}) is None


def test_create_profile_row():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    user = UserData(name="Asha", class_name="12", state="Bihar", city="Patna", phone="9876543210",
                    email="a@b.co", key="JEE-K", auth_user_id="u1")
    make_client(handler).create_profile(user)
    body = seen["body"]
    assert body["class"] == "12"
    assert body["access_key"] == "JEE-K"
    assert body["auth_user_id"] == "u1"
    assert body["total_study_time"] == 0
    assert body["username"] is None


def test_update_password_requires_session():
    client = make_client(lambda r: httpx.Response(200, json={}))
    with pytest.raises(AuthError):
        client.update_password("secret1")


def test_sign_out_clears_token_even_on_error():
    client = make_client(lambda r: httpx.Response(500))
    client.set_access_token("at")
    with pytest.raises(AuthError):
        client.sign_out()
    client.sign_out()  # no token left, nothing sent
