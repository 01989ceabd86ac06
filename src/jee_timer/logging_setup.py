from __future__ import annotations

"""Logging for the timer app.

Records go to ``<data_dir>/logs/jee_timer.log`` as one JSON object per line;
keys passed as ``extra={"_json_<name>": value}`` land in the object as
``<name>``. The console only gets level and message.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "jee_timer.log"
EXTRA_PREFIX = "_json_"
# HTTP and plotting libraries log every request / font lookup at INFO or DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "matplotlib", "PIL")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k.startswith(EXTRA_PREFIX):
                payload[k[len(EXTRA_PREFIX):]] = v
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(base_dir: Path, level: int = logging.INFO) -> Path:
    """Install the file and console handlers on the root logger; returns the log path."""
    log_dir = Path(base_dir) / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE_BASENAME

    root = logging.getLogger()
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    file_handler = RotatingFileHandler(logfile, maxBytes=512_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(JsonFormatter())
    root.addHandler(file_handler)
    console = logging.StreamHandler()
    console.setLevel(max(level, logging.INFO))
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(console)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(
        "logging configured", extra={"_json_file": str(logfile), "_json_level": logging.getLevelName(level)}
    )
    return logfile


__all__ = ["configure_logging", "JsonFormatter"]
