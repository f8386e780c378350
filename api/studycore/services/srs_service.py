"""
SRS (Spaced Repetition System) service implementing the SM-2 algorithm.

Quality ratings:
    5 - Perfect response
    4 - Correct response after hesitation
    3 - Correct response with difficulty
    2 - Incorrect response; correct answer seemed easy to recall
    1 - Incorrect response; correct answer seemed familiar
    0 - Complete blackout

review() is pure and total over clamped input; apply_review() is the thin
persistence wrapper used by the review endpoint.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlmodel import Session

from studycore.core.clock import ReviewClock
from studycore.core.exceptions import ReviewItemNotFound
from studycore.models.models import ReviewItem, ReviewLog

logger = logging.getLogger(__name__)


MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
MIN_EASINESS = 1.3
DEFAULT_EASINESS = 2.5

# Fixed intervals for the first two successful repetitions (learning steps)
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6

# Points a session answer earns per quality rating
QUALITY_POINTS = {5: 100, 4: 75, 3: 50}


@dataclass(frozen=True)
class SchedulingState:
    """Scheduling fields of a review item."""
    repetition_count: int = 0
    easiness_factor: float = DEFAULT_EASINESS
    interval_days: int = 0
    next_review_date: Optional[date] = None
    last_reviewed_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: ReviewItem) -> "SchedulingState":
        return cls(
            repetition_count=item.repetition_count,
            easiness_factor=item.easiness_factor,
            interval_days=item.interval_days,
            next_review_date=item.next_review_date,
            last_reviewed_at=item.last_reviewed_at,
        )


def clamp_quality(quality) -> int:
    """
    Clamp a quality rating into [0, 5].

    Out-of-range values are clamped rather than rejected; fractional values
    are truncated toward zero first.
    """
    return max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_easiness(easiness_factor: float, quality: int) -> float:
    """EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))"""
    penalty = MAX_QUALITY - quality
    return max(MIN_EASINESS, easiness_factor + (0.1 - penalty * (0.08 + penalty * 0.02)))


def review(quality, state: SchedulingState, now: datetime) -> SchedulingState:
    """
    Compute the next scheduling state after one review.

    Args:
        quality: Recall rating, clamped to 0-5
        state: Current scheduling state of the item
        now: Time of the review

    Returns:
        New SchedulingState; the input state is not modified
    """
    q = clamp_quality(quality)
    easiness_factor = calculate_easiness(state.easiness_factor, q)

    if q < PASSING_QUALITY:
        # Failed recall restarts the learning phase
        repetition_count = 0
        interval_days = FIRST_INTERVAL_DAYS
    else:
        repetition_count = state.repetition_count + 1
        if repetition_count == 1:
            interval_days = FIRST_INTERVAL_DAYS
        elif repetition_count == 2:
            interval_days = SECOND_INTERVAL_DAYS
        else:
            interval_days = round_half_up(state.interval_days * easiness_factor)

    return SchedulingState(
        repetition_count=repetition_count,
        easiness_factor=easiness_factor,
        interval_days=interval_days,
        next_review_date=now.date() + timedelta(days=interval_days),
        last_reviewed_at=now,
    )


def points_for_quality(quality) -> int:
    """Score delta a practice-session answer earns for a quality rating."""
    return QUALITY_POINTS.get(clamp_quality(quality), 0)


def apply_review(
    session: Session,
    review_item_id: int,
    quality,
    clock: ReviewClock,
) -> ReviewItem:
    """
    Review a persisted item: run the scheduler, store the new state and log the event.

    Raises:
        ReviewItemNotFound: If the item does not exist
    """
    item = session.get(ReviewItem, review_item_id)
    if not item:
        raise ReviewItemNotFound(f"Review item with id {review_item_id} not found")

    now = clock.now()
    q = clamp_quality(quality)
    new_state = review(q, SchedulingState.from_item(item), now)

    item.repetition_count = new_state.repetition_count
    item.easiness_factor = new_state.easiness_factor
    item.interval_days = new_state.interval_days
    item.next_review_date = new_state.next_review_date
    item.last_reviewed_at = new_state.last_reviewed_at

    session.add(item)
    session.add(ReviewLog(
        review_item_id=item.id,
        owner_id=item.owner_id,
        quality=q,
        interval_days=new_state.interval_days,
        easiness_factor=new_state.easiness_factor,
        reviewed_at=now,
    ))
    try:
        session.commit()
    except Exception:
        session.rollback()
        logger.error(f"Failed to save review for item {review_item_id}", exc_info=True)
        raise
    session.refresh(item)

    logger.info(
        f"Reviewed item {item.id} (owner {item.owner_id}) with quality {q}: "
        f"interval={item.interval_days}d, ef={item.easiness_factor:.2f}, next={item.next_review_date}"
    )
    return item
