"""
Review item and scheduling schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class ReviewItemCreateRequest(BaseModel):
    """Register a review item for a newly created flashcard or question."""
    owner_id: str = Field(..., min_length=1, description="Learner who owns the item")
    item_type: str = Field("flashcard", pattern="^(flashcard|question)$", description="'flashcard' or 'question'")
    content_id: Optional[str] = Field(None, description="Id of the parent flashcard/question")

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "user-123",
                "item_type": "flashcard",
                "content_id": "flashcard-42"
            }
        }


class ReviewRequest(BaseModel):
    """One review event. Quality is clamped to 0-5 rather than rejected."""
    quality: int = Field(..., description="Recall quality 0-5 (UI presets: 0, 3, 4, 5)")

    class Config:
        json_schema_extra = {
            "example": {
                "quality": 4
            }
        }


class ReviewItemResponse(BaseModel):
    """Review item with its scheduling state."""
    id: int
    owner_id: str
    item_type: str
    content_id: Optional[str] = None
    repetition_count: int
    easiness_factor: float
    interval_days: int
    next_review_date: date
    last_reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewResultResponse(BaseModel):
    """Scheduling state after a review."""
    repetition_count: int
    easiness_factor: float
    interval_days: int
    next_review_date: date
    last_reviewed_at: datetime
    cue: Optional[str] = Field(None, description="Feedback cue for the client to play")


class StudyStatsResponse(BaseModel):
    """Summary statistics over a learner's review items."""
    total_items: int
    due_today: int
    reviewed_today: int
    average_easiness: float
    mastered_items: int
