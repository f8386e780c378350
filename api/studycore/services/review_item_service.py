"""
Review item registration and removal.

Items are created alongside their flashcard/question by the content layer
and removed when that content is deleted.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session

from studycore.core.exceptions import ReviewItemNotFound
from studycore.models.models import ItemType, ReviewItem

logger = logging.getLogger(__name__)


def create_review_item(
    session: Session,
    owner_id: str,
    now: datetime,
    item_type: str = ItemType.FLASHCARD.value,
    content_id: Optional[str] = None,
) -> ReviewItem:
    """Register a fresh item; it is due immediately."""
    item = ReviewItem(
        owner_id=owner_id,
        item_type=item_type,
        content_id=content_id,
        next_review_date=now.date(),
        created_at=now,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"Created review item {item.id} ({item_type}) for owner {owner_id}")
    return item


def delete_review_item(session: Session, review_item_id: int) -> None:
    """Delete an item together with its review log."""
    item = session.get(ReviewItem, review_item_id)
    if not item:
        raise ReviewItemNotFound(f"Review item with id {review_item_id} not found")
    session.delete(item)
    session.commit()
    logger.info(f"Deleted review item {review_item_id}")
