from jee_timer.errors import SupabaseError
from jee_timer.tasks import BackgroundTask, run_in_background


def test_result_and_errors_are_signalled(qtbot):
    ok = BackgroundTask(lambda: {"rows": 2})
    with qtbot.waitSignal(ok.finished) as blocker:
        ok.run_blocking()
    assert blocker.args == [{"rows": 2}]

    def offline():
        raise SupabaseError("Network error: offline")

    bad = BackgroundTask(offline)
    with qtbot.waitSignal(bad.failed) as blocker:
        bad.run_blocking()
    assert blocker.args == ["Network error: offline"]


def test_unexpected_exception_becomes_failure(qtbot):
    def broken():
        raise KeyError("total_study_time")

    task = BackgroundTask(broken, name="broken")
    with qtbot.waitSignal(task.failed) as blocker:
        task.run_blocking()
    assert blocker.args[0].startswith("Unexpected error:")


def test_run_in_background_calls_back_on_ui_thread(qtbot):
    results: list = []
    failures: list[str] = []
    task = run_in_background(None, lambda: 41 + 1, results.append, failures.append, name="answer")
    qtbot.waitUntil(lambda: results == [42], timeout=5000)
    assert failures == []
