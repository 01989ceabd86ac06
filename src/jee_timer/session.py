from __future__ import annotations

"""AppSession owns the signed-in user for the lifetime of the window.

Lifecycle:
 - ``load_local_user()`` on start (no network), then ``restore()`` off the UI
   thread: auth session from the keyring refresh token.
 - ``login()`` / ``signup()``: auth against Supabase, mirror the profile into
   the RecordStore. The caller then runs ``auto_sync()`` (off the UI thread).
 - ``logout()``: sign out remotely, forget the refresh token, clear the
   RecordStore and the in-memory state.

Pages receive the session object instead of reading global state.
"""

import logging
from typing import Any, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import AuthError, JeeTimerError, SupabaseError, ValidationError
from .keys import clear_refresh_token, load_refresh_token, redact, save_refresh_token
from .models import AuthSession, UserData
from .record_store import RecordStore
from .supabase_client import SupabaseClient
from .sync import StudySync
from .time_utils import generate_access_key
from .validation import (
    sanitize_username,
    validate_email,
    validate_feedback,
    validate_password,
    validate_profile,
    validate_username,
)

_log = logging.getLogger(__name__)


class AppSession(QObject):
    changed = pyqtSignal()

    def __init__(self, store: RecordStore, client: SupabaseClient, sync: StudySync | None = None):
        super().__init__()
        self._store = store
        self._client = client
        self._sync = sync or StudySync(store, client)
        self._auth: Optional[AuthSession] = None
        self._user: Optional[UserData] = None

    # --- Properties -----------------------------------------------------
    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def client(self) -> SupabaseClient:
        return self._client

    @property
    def sync(self) -> StudySync:
        return self._sync

    @property
    def user(self) -> Optional[UserData]:
        return self._user

    @property
    def auth(self) -> Optional[AuthSession]:
        return self._auth

    @property
    def is_authenticated(self) -> bool:
        return self._auth is not None

    @property
    def remote_user_id(self) -> Optional[str]:
        """Key of this user's backend row (auth user id or access key)."""
        if self._client.user_id_column == "access_key":
            return self._store.get_app_key()
        return self._auth.user_id if self._auth else None

    # --- Lifecycle ------------------------------------------------------
    def load_local_user(self) -> Optional[UserData]:
        """Cached profile only; the auth session is restored by ``restore()``."""
        self._user = self._store.get_user_data()
        self.changed.emit()
        return self._user

    def restore(self) -> bool:
        self._user = self._store.get_user_data()
        token = load_refresh_token()
        if token and self._client.configured:
            try:
                self._set_auth(self._client.refresh_session(token))
            except SupabaseError as e:
                _log.warning("session restore failed: %s", e)
                clear_refresh_token()
        _log.info(
            "session restored",
            extra={"_json_authenticated": self.is_authenticated, "_json_token": redact(token)},
        )
        self.changed.emit()
        return self.is_authenticated

    def login(self, email: str, password: str) -> UserData:
        email = validate_email(email)
        if not password:
            raise ValidationError("password", "Please enter your password.")
        auth = self._client.sign_in_with_password(email, password)
        # Signed in only once the profile is loaded and saved locally
        try:
            profile = self._client.get_profile(auth.user_id)
            if profile is None:
                user = self._user_from_metadata(auth)
                self._client.create_profile(user)
            else:
                user = self._user_from_profile(profile, auth)
            self._store.save_user_data(user)
        except JeeTimerError:
            self._client.set_access_token(None)
            raise
        self._set_auth(auth)
        self._user = user
        self.changed.emit()
        _log.info("logged in", extra={"_json_user": redact(auth.user_id)})
        return user

    def signup(self, email: str, password: str, confirm: str, profile: UserData) -> bool:
        """Register an account; returns False while email confirmation is pending."""
        profile.email = validate_email(email)
        validate_profile(profile)
        validate_password(password, confirm)
        auth = self._client.sign_up(profile.email, password, _metadata(profile))
        try:
            profile.key = generate_access_key()
            self._store.save_app_key(profile.key)
            if auth is not None:
                profile.auth_user_id = auth.user_id
                profile.is_verified = True
                self._client.create_profile(profile)
            self._store.save_user_data(profile)
        except JeeTimerError:
            self._client.set_access_token(None)
            raise
        if auth is not None:
            self._set_auth(auth)
        self._user = profile
        self.changed.emit()
        return auth is not None

    def auto_sync(self) -> int:
        return self._sync.auto_sync_on_login(self._require_remote_id())

    def push_sync(self) -> int:
        return self._sync.sync_to_database(self._require_remote_id())

    def logout(self) -> None:
        try:
            self._client.sign_out()
        except SupabaseError as e:
            _log.warning("remote sign-out failed: %s", e)
        clear_refresh_token()
        self._store.clear_all_data()
        self._auth = None
        self._user = None
        self._client.set_access_token(None)
        _log.info("logged out")
        self.changed.emit()

    # --- Profile actions ------------------------------------------------
    def set_username(self, raw: str) -> str:
        username = validate_username(sanitize_username(raw))
        user = self._require_user()
        remote_id = self._require_remote_id()
        if username != user.username and self._client.username_exists(username):
            raise ValidationError("username", "This username is already taken. Please choose another.")
        self._client.update_username(remote_id, username)
        user.username = username
        self._save_user(user)
        return username

    def change_password(self, new_password: str, confirm: str) -> None:
        validate_password(new_password, confirm)
        if not self.is_authenticated:
            raise AuthError("Not signed in")
        self._client.update_password(new_password)

    def submit_feedback(self, text: str, rating: int) -> None:
        text, rating = validate_feedback(text, rating)
        remote_id = self._require_remote_id()
        user = self._require_user()
        profile = self._client.get_profile(remote_id) or user.to_dict()
        self._client.submit_feedback(remote_id, profile, text, rating)

    # --- Internal -------------------------------------------------------
    def _set_auth(self, auth: AuthSession) -> None:
        self._auth = auth
        self._client.set_access_token(auth.access_token)
        if auth.refresh_token:
            save_refresh_token(auth.refresh_token)

    def _save_user(self, user: UserData) -> None:
        self._store.save_user_data(user)
        self._user = user
        self.changed.emit()

    def _require_user(self) -> UserData:
        if self._user is None:
            raise AuthError("No profile loaded")
        return self._user

    def _require_remote_id(self) -> str:
        remote_id = self.remote_user_id
        if not remote_id:
            raise AuthError("Not signed in")
        return remote_id

    def _user_from_profile(self, profile: dict[str, Any], auth: AuthSession) -> UserData:
        local = self._store.get_user_data()
        return UserData(
            name=profile.get("name") or "",
            class_name=profile.get("class") or "",
            state=profile.get("state") or "",
            city=profile.get("city") or "",
            phone=profile.get("phone") or "",
            email=profile.get("email") or auth.email,
            is_verified=True,
            key=profile.get("access_key") or (local.key if local else ""),
            username=profile.get("username"),
            auth_user_id=auth.user_id,
        )

    def _user_from_metadata(self, auth: AuthSession) -> UserData:
        meta = auth.user_metadata
        return UserData(
            name=meta.get("name", ""),
            class_name=meta.get("class", ""),
            state=meta.get("state", ""),
            city=meta.get("city", ""),
            phone=meta.get("phone", ""),
            email=auth.email,
            is_verified=True,
            key=self._store.get_app_key() or "",
            auth_user_id=auth.user_id,
        )


def _metadata(profile: UserData) -> dict[str, Any]:
    return {
        "name": profile.name,
        "class": profile.class_name,
        "state": profile.state,
        "city": profile.city,
        "phone": profile.phone,
    }


__all__ = ["AppSession"]
