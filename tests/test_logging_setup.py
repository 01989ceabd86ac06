import json
import logging

import pytest

from jee_timer.logging_setup import JsonFormatter, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_formatter_promotes_json_extras():
    record = logging.LogRecord("jee_timer.sync", logging.INFO, __file__, 1, "login sync %s", ("done",), None)
    record._json_final = 900
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "login sync done"
    assert payload["final"] == 900
    assert payload["logger"] == "jee_timer.sync"


def test_configure_logging_writes_json_lines(tmp_path, restore_root_logger):
    logfile = configure_logging(tmp_path, logging.DEBUG)
    logging.getLogger("jee_timer.test").info("hello", extra={"_json_total": 5})
    for h in logging.getLogger().handlers:
        h.flush()
    lines = [json.loads(line) for line in logfile.read_text(encoding="utf-8").splitlines()]
    assert logfile == tmp_path / "logs" / "jee_timer.log"
    assert lines[-1]["msg"] == "hello"
    assert lines[-1]["total"] == 5
    assert logging.getLogger("httpx").level == logging.WARNING
