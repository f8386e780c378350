"""
PracticeSession model.
"""
from sqlalchemy import DateTime, Index, text
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from studycore.models.participant import Participant
    from studycore.models.session_response import SessionResponse


class PracticeSession(SQLModel, table=True):
    """PracticeSession table - a collaborative session joined by code."""
    __tablename__ = "practice_session"
    __table_args__ = (
        # Codes only need to be unique while the session is active
        Index(
            "uq_practice_session_active_code",
            "session_code",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    session_code: str = Field(max_length=6, index=True)  # Canonical uppercase form
    host_user_id: str = Field(index=True)
    session_name: Optional[str] = Field(default=None, max_length=120)
    session_type: str = Field(default="flashcards")  # 'flashcards' or 'questions'
    document_id: Optional[str] = None  # Restricts items to one document when set
    is_active: bool = Field(default=True)
    max_participants: int = Field(default=10, gt=0)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())
    ended_at: Optional[datetime] = Field(default=None, sa_type=DateTime())

    # Relationships
    participants: List["Participant"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    responses: List["SessionResponse"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
