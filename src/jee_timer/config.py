from __future__ import annotations

"""Runtime configuration read from the environment."""

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_DATA_DIR = Path.home() / ".jee_timer"
DB_FILENAME = "jee_timer.sqlite"
REPORTS_DIRNAME = "reports"


@dataclass(slots=True)
class AppConfig:
    data_dir: Path
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_user_column: str = "auth_user_id"
    log_level: int = logging.INFO

    @property
    def db_path(self) -> Path:
        return self.data_dir / DB_FILENAME

    @property
    def reports_dir(self) -> Path:
        return self.data_dir / REPORTS_DIRNAME

    @property
    def backend_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        data_dir = env.get("JEE_TIMER_DATA_DIR")
        level_name = env.get("JEE_TIMER_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.INFO
        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            supabase_url=env.get("SUPABASE_URL", "").strip(),
            supabase_anon_key=env.get("SUPABASE_ANON_KEY", "").strip(),
            supabase_user_column=env.get("JEE_TIMER_USER_COLUMN", "auth_user_id"),
            log_level=level,
        )


__all__ = ["AppConfig", "DEFAULT_DATA_DIR"]
