"""
SessionResponse model.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from studycore.models.practice_session import PracticeSession


class SessionResponse(SQLModel, table=True):
    """SessionResponse table - answers recorded during a practice session."""
    __tablename__ = "practice_session_response"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="practice_session.id", ondelete="CASCADE", index=True)
    participant_id: int = Field(index=True)  # Kept after the participant leaves
    item_id: Optional[str] = None
    item_type: Optional[str] = None
    quality: Optional[int] = None
    score_delta: int = Field(default=0)
    response_time_ms: int = Field(default=0, ge=0)
    answered_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())

    # Relationships
    session: "PracticeSession" = Relationship(back_populates="responses")
