"""
Practice session schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class CreateSessionRequest(BaseModel):
    """Request to create a practice session."""
    max_participants: Optional[int] = Field(None, ge=1, description="Participant cap (defaults to server setting)")
    session_name: Optional[str] = Field(None, max_length=120, description="Name shown to participants")
    session_type: str = Field("flashcards", pattern="^(flashcards|questions)$", description="'flashcards' or 'questions'")
    document_id: Optional[str] = Field(None, description="Limit items to one document")
    host_display_name: Optional[str] = Field(None, max_length=80, description="Host's name on the leaderboard")
    join_as_host: bool = Field(True, description="Seat the host as the first participant")

    class Config:
        json_schema_extra = {
            "example": {
                "max_participants": 10,
                "session_name": "Biology midterm cram",
                "session_type": "flashcards",
                "document_id": None,
                "host_display_name": "Sam",
                "join_as_host": True
            }
        }


class JoinSessionRequest(BaseModel):
    """Request to join a session by its code."""
    session_code: str = Field(..., description="6-character code, case-insensitive")
    display_name: Optional[str] = Field(None, max_length=80, description="Name shown on the leaderboard")

    @field_validator("session_code")
    @classmethod
    def normalize_session_code(cls, v: str) -> str:
        return v.strip().upper()

    class Config:
        json_schema_extra = {
            "example": {
                "session_code": "k3x9qa",
                "display_name": "Alex"
            }
        }


class RecordAnswerRequest(BaseModel):
    """An answer given during a session. Supply delta, quality, or both."""
    delta: Optional[int] = Field(None, description="Score change; derived from quality when omitted")
    quality: Optional[int] = Field(None, description="Recall quality 0-5")
    item_id: Optional[str] = Field(None, description="Flashcard/question answered")
    item_type: Optional[str] = Field(None, pattern="^(flashcard|question)$")
    response_time_ms: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "quality": 5,
                "item_id": "flashcard-42",
                "item_type": "flashcard",
                "response_time_ms": 3200
            }
        }


class SessionResponse(BaseModel):
    """Practice session details."""
    session_id: int
    session_code: str
    host_user_id: str
    session_name: Optional[str] = None
    session_type: str
    document_id: Optional[str] = None
    is_active: bool
    max_participants: int
    participant_count: int
    created_at: datetime
    ended_at: Optional[datetime] = None


class ParticipantResponse(BaseModel):
    """A participant's seat in a session."""
    participant_id: int
    session_id: int
    user_id: str
    display_name: str
    score: int
    joined_at: datetime
    last_active_at: datetime


class RecordAnswerResponse(BaseModel):
    """Score after an answer was recorded."""
    participant_id: int
    score: int
    score_delta: int
    cue: Optional[str] = None


class LeaderboardEntry(BaseModel):
    """One leaderboard row; is_active is derived from last_active_at."""
    rank: int
    participant_id: int
    user_id: str
    display_name: str
    score: int
    joined_at: datetime
    is_active: bool


class LeaderboardResponse(BaseModel):
    session_id: int
    is_session_active: bool
    participants: List[LeaderboardEntry]
