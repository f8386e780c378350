"""
Participant model.
"""
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from studycore.models.practice_session import PracticeSession


class Participant(SQLModel, table=True):
    """Participant table - a user's seat and live score in a practice session."""
    __tablename__ = "practice_participant"
    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="uq_practice_participant_session_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="practice_session.id", ondelete="CASCADE", index=True)
    user_id: str = Field(index=True)
    display_name: str = Field(max_length=80)
    score: int = Field(default=0)
    joined_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())
    last_active_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())

    # Relationships
    session: "PracticeSession" = Relationship(back_populates="participants")
