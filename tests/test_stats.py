from datetime import datetime

from jee_timer.stats import (
    StudyStats,
    daily_totals,
    session_count,
    stats_by_type,
    study_stats,
    subject_breakdown,
    total_time,
)


def test_two_self_study_records(make_record):
    records = [make_record(600), make_record(300)]
    assert session_count(records) == 2
    assert total_time(records) == 900
    assert study_stats(records) == StudyStats(sessions=2, total_time=900)


def test_empty_list():
    assert total_time([]) == 0
    assert study_stats([]) == StudyStats(0, 0)
    assert subject_breakdown([]) == []


def test_stats_by_type_always_has_both(make_record):
    result = stats_by_type([make_record(120, "lecture-study")])
    assert result["self-study"] == StudyStats(0, 0)
    assert result["lecture-study"] == StudyStats(1, 120)


def test_subject_breakdown_percentages(make_record):
    records = [make_record(100, subject="physics"), make_record(300, subject="chemistry")]
    shares = {s.subject: s for s in subject_breakdown(records)}
    assert shares["physics"].percentage == 25
    assert shares["chemistry"].percentage == 75
    assert shares["chemistry"].duration == 300


def test_subject_breakdown_groups_and_keeps_first_seen_order(make_record):
    records = [
        make_record(50, subject="maths"),
        make_record(50, subject="physics"),
        make_record(100, subject="maths"),
    ]
    shares = subject_breakdown(records)
    assert [s.subject for s in shares] == ["maths", "physics"]
    assert [s.duration for s in shares] == [150, 50]
    assert [s.percentage for s in shares] == [75, 25]


def test_percentage_rounds_half_up(make_record):
    # 1/8 = 12.5% -> 13, 7/8 = 87.5% -> 88
    shares = subject_breakdown([make_record(1, subject="a"), make_record(7, subject="b")])
    assert [s.percentage for s in shares] == [13, 88]


def test_zero_total_gives_zero_percent(make_record):
    shares = subject_breakdown([make_record(0, subject="physics")])
    assert shares[0].percentage == 0


def test_daily_totals_sorted(make_record):
    records = [
        make_record(60, start=datetime(2025, 1, 3, 9)),
        make_record(30, start=datetime(2025, 1, 1, 9)),
        make_record(90, start=datetime(2025, 1, 3, 18)),
    ]
    assert daily_totals(records) == [("2025-01-01", 30), ("2025-01-03", 150)]
