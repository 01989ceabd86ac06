from __future__ import annotations

"""Formatting helpers for durations, dates and generated identifiers."""

import math
import random
import string
import time
import uuid
from datetime import datetime


def format_hhmmss(seconds: int) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_date(dt: datetime) -> str:
    """Display date used for grouping records, e.g. ``18/10/2026``."""
    return dt.strftime("%d/%m/%Y")


def format_clock(dt: datetime) -> str:
    return dt.strftime("%I:%M:%S %p")


def format_datetime(dt: datetime) -> str:
    return f"{format_date(dt)}, {format_clock(dt)}"


def calculate_duration(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants (floored)."""
    return math.floor((end - start).total_seconds())


def truncate_seconds(dt: datetime) -> datetime:
    return dt.replace(microsecond=0)


def generate_record_id() -> str:
    return uuid.uuid4().hex


def _base36(value: int) -> str:
    chars = string.digits + string.ascii_lowercase
    out = ""
    while value:
        value, rem = divmod(value, 36)
        out = chars[rem] + out
    return out or "0"


def generate_access_key() -> str:
    """Opaque key of the form ``JEE-<ms timestamp b36>-<random>``, upper-cased."""
    timestamp = _base36(int(time.time() * 1000))
    rand = "".join(random.choices(string.ascii_lowercase + string.digits, k=13))
    return f"JEE-{timestamp}-{rand}".upper()


__all__ = [
    "format_hhmmss",
    "format_date",
    "format_clock",
    "format_datetime",
    "calculate_duration",
    "truncate_seconds",
    "generate_record_id",
    "generate_access_key",
]
