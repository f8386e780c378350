"""
Due-set selection and study statistics over a learner's review items.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, TypeVar

from sqlmodel import Session, select

from studycore.models.models import ReviewItem
from studycore.services.srs_service import DEFAULT_EASINESS

logger = logging.getLogger(__name__)

# Items reviewed successfully this many times in a row count as mastered
MASTERED_REPETITIONS = 5

T = TypeVar("T")


@dataclass(frozen=True)
class StudyStats:
    total_items: int
    due_today: int
    reviewed_today: int
    average_easiness: float
    mastered_items: int


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_due(item, now: datetime) -> bool:
    """An item is due once its review date has arrived (same day counts)."""
    return _as_date(item.next_review_date) <= now.date()


def due_items(items: Iterable[T], now: datetime) -> List[T]:
    """Return the items due for review at `now`, preserving input order."""
    return [item for item in items if is_due(item, now)]


def _reviewed_on(item, day_start: datetime) -> bool:
    last_reviewed_at: Optional[datetime] = item.last_reviewed_at
    return last_reviewed_at is not None and day_start <= last_reviewed_at < day_start + timedelta(days=1)


def study_stats(items: Sequence, now: datetime) -> StudyStats:
    """
    Summarize a collection of review items.

    reviewed_today counts reviews on the local calendar day of `now`. The average
    easiness of an empty collection is 2.5, matching a fresh item.
    """
    items = list(items)
    day_start = datetime.combine(now.date(), time.min)

    if items:
        average = sum(item.easiness_factor for item in items) / len(items)
    else:
        average = DEFAULT_EASINESS

    return StudyStats(
        total_items=len(items),
        due_today=sum(1 for item in items if is_due(item, now)),
        reviewed_today=sum(1 for item in items if _reviewed_on(item, day_start)),
        average_easiness=round(average, 2),
        mastered_items=sum(1 for item in items if item.repetition_count >= MASTERED_REPETITIONS),
    )


def get_owner_items(session: Session, owner_id: str) -> List[ReviewItem]:
    """Load every review item belonging to a learner."""
    return list(session.exec(
        select(ReviewItem)
        .where(ReviewItem.owner_id == owner_id)
        .order_by(ReviewItem.next_review_date, ReviewItem.id)  # type: ignore
    ).all())


def get_due_items(session: Session, owner_id: str, now: datetime) -> List[ReviewItem]:
    items = get_owner_items(session, owner_id)
    due = due_items(items, now)
    logger.debug(f"Owner {owner_id}: {len(due)} of {len(items)} items due")
    return due


def get_study_stats(session: Session, owner_id: str, now: datetime) -> StudyStats:
    return study_stats(get_owner_items(session, owner_id), now)
