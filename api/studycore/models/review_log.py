"""
ReviewLog model.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from studycore.models.review_item import ReviewItem


class ReviewLog(SQLModel, table=True):
    """ReviewLog table - one row per solo review event."""
    __tablename__ = "review_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    review_item_id: int = Field(foreign_key="review_item.id", index=True)
    owner_id: str = Field(index=True)
    quality: int  # Clamped quality actually applied
    interval_days: int  # Interval chosen by the scheduler
    easiness_factor: float  # Easiness factor after the review
    reviewed_at: datetime = Field(sa_type=DateTime())

    # Relationships
    review_item: "ReviewItem" = Relationship(back_populates="review_logs")
