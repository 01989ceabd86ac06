from __future__ import annotations

"""Dataclass models for study records, the timer and the local profile."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Optional

SELF_STUDY = "self-study"
LECTURE_STUDY = "lecture-study"
STUDY_TYPES: tuple[str, ...] = (SELF_STUDY, LECTURE_STUDY)

STUDY_TYPE_LABELS = {
    SELF_STUDY: "Self Study",
    LECTURE_STUDY: "Lecture Study",
}

# (value, display label); order is the selector order
SUBJECTS: tuple[tuple[str, str], ...] = (
    ("all", "All Subjects"),
    ("physics", "Physics"),
    ("chemistry", "Chemistry"),
    ("maths", "Mathematics"),
    ("computer-science", "Computer Science"),
    ("english", "English"),
    ("hindi", "Hindi"),
    ("social-studies", "Social Studies"),
    ("mixed", "Mixed"),
)
DEFAULT_SUBJECT = "all"


def check_study_type(study_type: str) -> str:
    if study_type not in STUDY_TYPES:
        raise ValueError(f"Unknown study type: {study_type!r}")
    return study_type


def subject_label(subject: str) -> str:
    return subject[:1].upper() + subject[1:]


@dataclass(frozen=True, slots=True)
class StudyRecord:
    id: str
    type: str
    subject: str
    start_time: datetime
    end_time: datetime
    duration: int  # seconds, end_time - start_time
    date: str  # display grouping only

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "subject": self.subject,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "duration": self.duration,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StudyRecord":
        return cls(
            id=str(data["id"]),
            type=data["type"],
            subject=data["subject"],
            start_time=_parse_dt(data["startTime"]),
            end_time=_parse_dt(data["endTime"]),
            duration=int(data["duration"]),
            date=data["date"],
        )


def _parse_dt(value: str) -> datetime:
    # Records written by older clients carry a trailing "Z"
    if value.endswith("Z"):
        value = value[:-1]
    return datetime.fromisoformat(value)


@dataclass(slots=True)
class TimerState:
    is_running: bool = False
    start_time: Optional[datetime] = None
    elapsed_time: int = 0
    current_subject: str = DEFAULT_SUBJECT


@dataclass(slots=True)
class UserData:
    name: str
    class_name: str
    state: str
    city: str
    phone: str
    email: str
    is_verified: bool = False
    key: str = ""
    username: Optional[str] = None
    auth_user_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["class"] = data.pop("class_name")
        data["isVerified"] = data.pop("is_verified")
        data["authUserId"] = data.pop("auth_user_id")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserData":
        return cls(
            name=data.get("name", ""),
            class_name=data.get("class", ""),
            state=data.get("state", ""),
            city=data.get("city", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            is_verified=bool(data.get("isVerified", False)),
            key=data.get("key", ""),
            username=data.get("username"),
            auth_user_id=data.get("authUserId"),
        )


@dataclass(slots=True)
class LeaderboardEntry:
    id: str
    username: str
    total_study_time: int
    name: str
    class_name: str
    updated_at: Optional[str] = None


@dataclass(slots=True)
class AuthSession:
    access_token: str
    refresh_token: str
    user_id: str
    email: str
    expires_at: Optional[int] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "SELF_STUDY",
    "LECTURE_STUDY",
    "STUDY_TYPES",
    "STUDY_TYPE_LABELS",
    "SUBJECTS",
    "DEFAULT_SUBJECT",
    "check_study_type",
    "subject_label",
    "StudyRecord",
    "TimerState",
    "UserData",
    "LeaderboardEntry",
    "AuthSession",
]
