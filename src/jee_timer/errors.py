from __future__ import annotations

"""Exception hierarchy shared by the store, adapters and session."""


class JeeTimerError(Exception):
    pass


class StorageError(JeeTimerError):
    """Local durable store could not be read or written."""


class DuplicateRecordError(StorageError):
    pass


class SupabaseError(JeeTimerError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(SupabaseError):
    pass


class SyncError(JeeTimerError):
    pass


class SyncInProgressError(SyncError):
    pass


class ValidationError(JeeTimerError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ReportError(JeeTimerError):
    pass


__all__ = [
    "JeeTimerError",
    "StorageError",
    "DuplicateRecordError",
    "SupabaseError",
    "AuthError",
    "SyncError",
    "SyncInProgressError",
    "ValidationError",
    "ReportError",
]
