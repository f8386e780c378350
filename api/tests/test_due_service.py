from datetime import date, datetime

from studycore.services.due_service import StudyStats, due_items, get_due_items, study_stats
from studycore.services.review_item_service import create_review_item
from studycore.services.srs_service import SchedulingState, apply_review

NOW = datetime(2025, 3, 10, 15, 30, 0)


def _state(**kwargs):
    defaults = {"next_review_date": date(2025, 3, 10)}
    defaults.update(kwargs)
    return SchedulingState(**defaults)


def test_due_items_includes_today_and_overdue():
    overdue = _state(next_review_date=date(2025, 3, 1))
    today = _state(next_review_date=date(2025, 3, 10))
    tomorrow = _state(next_review_date=date(2025, 3, 11))

    assert due_items([overdue, today, tomorrow], NOW) == [overdue, today]


def test_due_items_is_idempotent():
    items = [_state(next_review_date=date(2025, 3, d)) for d in (8, 10, 12)]
    once = due_items(items, NOW)
    assert due_items(once, NOW) == once


def test_empty_stats():
    assert study_stats([], NOW) == StudyStats(
        total_items=0,
        due_today=0,
        reviewed_today=0,
        average_easiness=2.5,
        mastered_items=0,
    )


def test_stats_counts():
    items = [
        _state(repetition_count=5, easiness_factor=2.8, next_review_date=date(2025, 4, 1),
               last_reviewed_at=datetime(2025, 3, 10, 8, 0)),
        _state(repetition_count=1, easiness_factor=2.2, next_review_date=date(2025, 3, 10),
               last_reviewed_at=datetime(2025, 3, 9, 23, 59)),
        _state(repetition_count=0, easiness_factor=2.5, next_review_date=date(2025, 3, 2)),
    ]

    stats = study_stats(items, NOW)

    assert stats.total_items == 3
    assert stats.due_today == 2
    assert stats.reviewed_today == 1
    assert stats.average_easiness == 2.5
    assert stats.mastered_items == 1


def test_average_easiness_rounded_to_two_places():
    items = [_state(easiness_factor=2.5), _state(easiness_factor=2.6), _state(easiness_factor=1.3)]
    assert study_stats(items, NOW).average_easiness == 2.13


def test_get_due_items_scoped_to_owner(session, clock):
    mine = create_review_item(session, owner_id="learner-1", now=clock.now())
    reviewed = create_review_item(session, owner_id="learner-1", now=clock.now())
    create_review_item(session, owner_id="learner-2", now=clock.now())
    apply_review(session, reviewed.id, 5, clock)

    due = get_due_items(session, "learner-1", clock.now())

    assert [item.id for item in due] == [mine.id]


def test_reviews_on_other_days_do_not_count_as_today():
    items = [
        _state(last_reviewed_at=datetime(2025, 3, 10, 0, 0)),
        _state(last_reviewed_at=datetime(2025, 3, 11, 9, 0)),
        _state(last_reviewed_at=datetime(2025, 3, 11, 0, 0)),
    ]

    assert study_stats(items, datetime(2025, 3, 10, 12, 0)).reviewed_today == 1
