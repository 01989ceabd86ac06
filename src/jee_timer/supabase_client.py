from __future__ import annotations

"""Supabase REST client (PostgREST tables + GoTrue auth).

Only the calls the app needs are wrapped: the ``users`` row of the signed-in
student (total study time, username, profile), the leaderboard query, the
``feedback`` table and email/password auth. Calls are made once; any HTTP
status >= 400 or transport failure raises ``SupabaseError``.

Tests mock the HTTP transport.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Any, Optional

import httpx

from .errors import AuthError, SupabaseError
from .models import AuthSession, LeaderboardEntry, UserData

logger = logging.getLogger(__name__)

LEADERBOARD_LIMIT = 50
LEADERBOARD_COLUMNS = "id,username,total_study_time,name,class,updated_at"


@dataclass(slots=True)
class SupabaseConfig:
    url: str
    anon_key: str
    timeout: float = 10.0
    # "auth_user_id" for auth-backed accounts, "access_key" for key-based ones
    user_id_column: str = "auth_user_id"

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseClient:
    def __init__(self, config: SupabaseConfig, transport: httpx.BaseTransport | None = None):
        self._config = config
        self._client = httpx.Client(
            base_url=config.url.rstrip("/"),
            timeout=config.timeout,
            transport=transport,
            headers={"apikey": config.anon_key},
        )
        self._access_token: Optional[str] = None

    def close(self):  # pragma: no cover simple
        self._client.close()

    @property
    def configured(self) -> bool:
        return self._config.configured

    @property
    def user_id_column(self) -> str:
        return self._config.user_id_column

    def set_access_token(self, token: Optional[str]) -> None:
        self._access_token = token

    # --- Transport ----------------------------------------------------------
    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._access_token or self._config.anon_key}"}
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        error_cls: type[SupabaseError] = SupabaseError,
    ) -> Any:
        if not self._config.configured:
            raise SupabaseError("Supabase not configured")
        try:
            resp = self._client.request(method, path, params=params, json=json, headers=self._headers(headers))
        except httpx.HTTPError as e:
            logger.warning("supabase request failed: %s %s: %s", method, path, e)
            raise error_cls(f"Network error: {e}") from e
        if resp.status_code >= 400:
            logger.warning("supabase %s %s -> HTTP %s", method, path, resp.status_code)
            raise error_cls(_error_message(resp), status_code=resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise error_cls(f"Invalid JSON from Supabase: {e}", status_code=resp.status_code) from e

    def _user_filter(self, user_id: str) -> dict[str, str]:
        return {self._config.user_id_column: f"eq.{user_id}"}

    # --- users table ----------------------------------------------------------
    def get_total_study_time(self, user_id: str) -> int:
        rows = self._request(
            "GET",
            "/rest/v1/users",
            params={"select": "total_study_time", **self._user_filter(user_id)},
        )
        if not rows:
            raise SupabaseError("User row not found", status_code=404)
        return int(rows[0].get("total_study_time") or 0)

    def update_total_study_time(self, user_id: str, total_seconds: int, updated_at: str | None = None) -> None:
        self._request(
            "PATCH",
            "/rest/v1/users",
            params=self._user_filter(user_id),
            json={"total_study_time": int(total_seconds), "updated_at": updated_at or _utc_now_iso()},
            headers={"Prefer": "return=minimal"},
        )

    def get_leaderboard(self, limit: int = LEADERBOARD_LIMIT) -> list[LeaderboardEntry]:
        rows = self._request(
            "GET",
            "/rest/v1/users",
            params={
                "select": LEADERBOARD_COLUMNS,
                "username": "not.is.null",
                "order": "total_study_time.desc",
                "limit": str(limit),
            },
        )
        return [
            LeaderboardEntry(
                id=str(r.get("id")),
                username=r.get("username") or "",
                total_study_time=int(r.get("total_study_time") or 0),
                name=r.get("name") or "",
                class_name=r.get("class") or "",
                updated_at=r.get("updated_at"),
            )
            for r in rows or []
        ]

    def username_exists(self, username: str) -> bool:
        rows = self._request(
            "GET",
            "/rest/v1/users",
            params={"select": "username", "username": f"eq.{username}", "limit": "1"},
        )
        return bool(rows)

    def update_username(self, user_id: str, username: str) -> None:
        self._request(
            "PATCH",
            "/rest/v1/users",
            params=self._user_filter(user_id),
            json={"username": username, "updated_at": _utc_now_iso()},
            headers={"Prefer": "return=minimal"},
        )

    def get_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        rows = self._request(
            "GET",
            "/rest/v1/users",
            params={"select": "*", **self._user_filter(user_id)},
        )
        return rows[0] if rows else None

    def create_profile(self, user: UserData) -> None:
        row = {
            "name": user.name,
            "class": user.class_name,
            "state": user.state,
            "city": user.city,
            "phone": user.phone,
            "email": user.email,
            "access_key": user.key or None,
            "auth_user_id": user.auth_user_id,
            "username": None,
            "total_study_time": 0,
            "created_at": _utc_now_iso(),
        }
        self._request("POST", "/rest/v1/users", json=row, headers={"Prefer": "return=minimal"})

    # --- feedback table ---------------------------------------------------------
    def submit_feedback(self, user_id: str, profile: dict[str, Any], text: str, rating: int) -> None:
        self._request(
            "POST",
            "/rest/v1/feedback",
            json={
                "user_id": user_id,
                "username": profile.get("username"),
                "name": profile.get("name"),
                "email": profile.get("email"),
                "phone": profile.get("phone"),
                "state": profile.get("state"),
                "city": profile.get("city"),
                "feedback_text": text,
                "rating": rating,
            },
            headers={"Prefer": "return=minimal"},
        )

    # --- auth -----------------------------------------------------------------
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            error_cls=AuthError,
        )
        session = _parse_session(data)
        self._access_token = session.access_token
        return session

    def refresh_session(self, refresh_token: str) -> AuthSession:
        data = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            error_cls=AuthError,
        )
        session = _parse_session(data)
        self._access_token = session.access_token
        return session

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> Optional[AuthSession]:
        """Create an auth user; returns a session unless email confirmation is pending."""
        data = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata},
            error_cls=AuthError,
        )
        if data and data.get("access_token"):
            session = _parse_session(data)
            self._access_token = session.access_token
            return session
        return None

    def update_password(self, new_password: str) -> None:
        if not self._access_token:
            raise AuthError("Not signed in")
        self._request("PUT", "/auth/v1/user", json={"password": new_password}, error_cls=AuthError)

    def sign_out(self) -> None:
        if not self._access_token:
            return
        try:
            self._request("POST", "/auth/v1/logout", error_cls=AuthError)
        finally:
            self._access_token = None


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}: {resp.text[:200]}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {resp.status_code}"


def _parse_session(data: Any) -> AuthSession:
    if not isinstance(data, dict) or "access_token" not in data:
        raise AuthError("Malformed auth response")
    user = data.get("user") or {}
    return AuthSession(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token", ""),
        user_id=str(user.get("id", "")),
        email=user.get("email", ""),
        expires_at=data.get("expires_at"),
        user_metadata=user.get("user_metadata") or {},
    )


__all__ = [
    "SupabaseClient",
    "SupabaseConfig",
    "LEADERBOARD_LIMIT",
]
