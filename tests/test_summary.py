from datetime import datetime, timedelta, timezone

from models.schedule import ScheduleEntry, ScheduleStatus
from utils.summary import (
    aggregate,
    completion_percent,
    performance_series,
    quiz_progress,
    summarize_quizzes,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _completed(entry_id, day, score, quiz_id=1, quiz_set_id=None):
    return ScheduleEntry(
        id=entry_id,
        quiz_id=quiz_id,
        quiz_set_id=quiz_set_id or entry_id,
        scheduled_date=day,
        completed_date=day,
        score=score,
        status=ScheduleStatus.COMPLETED,
    )


def _pending(entry_id, day, quiz_id=1):
    return ScheduleEntry(id=entry_id, quiz_id=quiz_id, quiz_set_id=entry_id, scheduled_date=day)


def test_scenario_one_completed_one_future():
    entries = [
        _completed(1, datetime(2024, 1, 1, tzinfo=timezone.utc), 80),
        _pending(2, datetime(2030, 1, 1, tzinfo=timezone.utc)),
    ]
    summary = aggregate(entries, NOW, {1: 1, 2: 2})
    assert summary.total == 2
    assert summary.completed == 1
    assert summary.ready == 0
    assert summary.upcoming == 1
    assert summary.completion_percent == 50
    assert len(summary.performance_series) == 1
    point = summary.performance_series[0]
    assert point.date == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert point.score == 80
    assert point.index == 1
    assert point.quiz_set == 1
    assert point.label == "Q1"


def test_empty_collection_yields_zero_summary():
    summary = aggregate([], NOW)
    assert summary.total == 0
    assert summary.completed == 0
    assert summary.ready == 0
    assert summary.performance_series == []
    assert summary.completion_percent == 0


def test_completion_percent_rounds_and_guards_zero():
    assert completion_percent(0, 0) == 0
    assert completion_percent(1, 3) == 33
    assert completion_percent(2, 3) == 67
    assert completion_percent(1, 8) == 13
    assert completion_percent(3, 3) == 100


def test_counts_stay_within_total():
    entries = [
        _pending(1, NOW - timedelta(days=1)),
        _pending(2, NOW),
        _pending(3, NOW + timedelta(days=1)),
        _completed(4, NOW - timedelta(days=2), 55),
    ]
    summary = aggregate(entries, NOW)
    assert summary.total == len(entries)
    assert summary.completed <= summary.total
    assert summary.ready == 2
    assert summary.completed + summary.ready + summary.upcoming == summary.total


def test_series_sorted_by_completion_date_with_stable_ties():
    same_day = datetime(2024, 3, 1, tzinfo=timezone.utc)
    entries = [
        _completed(1, datetime(2024, 5, 1, tzinfo=timezone.utc), 90),
        _completed(2, same_day, 40),
        _completed(3, same_day, 70),
        _completed(4, datetime(2024, 2, 1, tzinfo=timezone.utc), 60),
    ]
    series = performance_series(entries)
    assert [point.score for point in series] == [60, 40, 70, 90]
    assert [point.index for point in series] == [1, 2, 3, 4]
    assert [point.label for point in series] == ["Q1", "Q2", "Q3", "Q4"]
    dates = [point.date for point in series]
    assert dates == sorted(dates)


def test_unknown_quiz_set_maps_to_zero():
    series = performance_series([_completed(1, NOW, 50, quiz_set_id=99)], {1: 3})
    assert series[0].quiz_set == 0
    assert series[0].display_name == "Quiz 1 - Set 0"


def test_incomplete_completed_entries_are_skipped_from_series():
    missing_score = ScheduleEntry(
        id=5, quiz_id=1, quiz_set_id=5, scheduled_date=NOW,
        completed_date=NOW, status=ScheduleStatus.COMPLETED,
    )
    missing_date = ScheduleEntry(
        id=6, quiz_id=1, quiz_set_id=6, scheduled_date=NOW,
        score=70, status=ScheduleStatus.COMPLETED,
    )
    summary = aggregate([missing_score, missing_date, _completed(7, NOW, 88)], NOW)
    assert summary.completed == 3
    assert [point.score for point in summary.performance_series] == [88]


def test_series_index_recomputed_per_call():
    entries = [_completed(1, NOW, 10), _completed(2, NOW + timedelta(days=1), 20)]
    assert [p.index for p in performance_series(entries[1:])] == [1]
    assert [p.index for p in performance_series(entries)] == [1, 2]


def test_quiz_progress_and_summaries():
    entries = [
        _completed(1, NOW - timedelta(days=1), 80, quiz_id=1),
        _pending(2, NOW + timedelta(days=5), quiz_id=1),
        _pending(3, NOW + timedelta(days=1), quiz_id=1),
        _completed(4, NOW, 90, quiz_id=2),
    ]
    completed, total, next_date = quiz_progress(entries[:3])
    assert (completed, total) == (1, 3)
    assert next_date == NOW + timedelta(days=1)
    assert quiz_progress([])[2] is None

    counts = summarize_quizzes([1, 2, 3], entries)
    assert counts == {"total_quizzes": 3, "active_quizzes": 2, "completed_quizzes": 1}
