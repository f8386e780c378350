"""
ReviewItem model.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import date, datetime

if TYPE_CHECKING:
    from studycore.models.review_log import ReviewLog


class ReviewItem(SQLModel, table=True):
    """ReviewItem table - SM-2 scheduling state for one flashcard or question."""
    __tablename__ = "review_item"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(index=True)  # Opaque learner id from the auth layer
    item_type: str = Field(default="flashcard")  # 'flashcard' or 'question'
    content_id: Optional[str] = Field(default=None, index=True)  # Parent flashcard/question id
    repetition_count: int = Field(default=0, ge=0)
    easiness_factor: float = Field(default=2.5, ge=1.3)
    interval_days: int = Field(default=0, ge=0)
    next_review_date: date = Field(default_factory=date.today, index=True)
    last_reviewed_at: Optional[datetime] = Field(default=None, sa_type=DateTime())
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())

    # Relationships
    review_logs: List["ReviewLog"] = Relationship(
        back_populates="review_item",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
