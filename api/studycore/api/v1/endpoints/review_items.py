"""
Review item endpoints: registration, SM-2 reviews, due set and stats.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
import logging

from studycore.api.deps import get_clock, get_feedback_cues
from studycore.core.clock import ReviewClock
from studycore.core.database import get_session
from studycore.schemas.review import (
    ReviewItemCreateRequest,
    ReviewItemResponse,
    ReviewRequest,
    ReviewResultResponse,
    StudyStatsResponse,
)
from studycore.services.due_service import get_due_items, get_study_stats
from studycore.services.feedback_service import FeedbackCues
from studycore.services.review_item_service import create_review_item, delete_review_item
from studycore.services.srs_service import apply_review

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/review-items", tags=["review-items"])


@router.get("/due", response_model=List[ReviewItemResponse])
async def list_due_items(
    owner_id: str,
    session: Session = Depends(get_session),
    clock: ReviewClock = Depends(get_clock),
):
    """
    Items whose next review date is today or earlier.

    Ordered by next review date, oldest first.
    """
    return get_due_items(session, owner_id, clock.now())


@router.get("/stats", response_model=StudyStatsResponse)
async def study_stats(
    owner_id: str,
    session: Session = Depends(get_session),
    clock: ReviewClock = Depends(get_clock),
):
    stats = get_study_stats(session, owner_id, clock.now())
    return StudyStatsResponse(
        total_items=stats.total_items,
        due_today=stats.due_today,
        reviewed_today=stats.reviewed_today,
        average_easiness=stats.average_easiness,
        mastered_items=stats.mastered_items,
    )


@router.post("", response_model=ReviewItemResponse, status_code=status.HTTP_201_CREATED)
async def register_review_item(
    request: ReviewItemCreateRequest,
    session: Session = Depends(get_session),
    clock: ReviewClock = Depends(get_clock),
):
    """Register a review item for a flashcard or question. New items are due immediately."""
    return create_review_item(
        session,
        owner_id=request.owner_id,
        now=clock.now(),
        item_type=request.item_type,
        content_id=request.content_id,
    )


@router.delete("/{review_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_review_item(
    review_item_id: int,
    session: Session = Depends(get_session),
):
    delete_review_item(session, review_item_id)
    return None


@router.post("/{review_item_id}/review", response_model=ReviewResultResponse)
async def review_item(
    review_item_id: int,
    request: ReviewRequest,
    session: Session = Depends(get_session),
    clock: ReviewClock = Depends(get_clock),
    cues: FeedbackCues = Depends(get_feedback_cues),
):
    """
    Record one review of an item and reschedule it with SM-2.

    Quality outside 0-5 is clamped, not rejected.

    Returns:
        The item's new scheduling state plus the feedback cue to play
    """
    item = apply_review(session, review_item_id, request.quality, clock)
    return ReviewResultResponse(
        repetition_count=item.repetition_count,
        easiness_factor=item.easiness_factor,
        interval_days=item.interval_days,
        next_review_date=item.next_review_date,
        last_reviewed_at=item.last_reviewed_at,
        cue=cues.for_quality(request.quality),
    )
