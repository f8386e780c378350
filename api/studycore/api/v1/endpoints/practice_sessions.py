"""
Practice session endpoints.

The caller's identity arrives as the user_id query parameter, set by the
auth layer in front of this API.
"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from studycore.api.deps import get_coordinator, get_feedback_cues, get_score_tracker
from studycore.core.config import settings
from studycore.core.exceptions import ValidationError
from studycore.models.models import Participant, PracticeSession
from studycore.schemas.practice import (
    CreateSessionRequest,
    JoinSessionRequest,
    LeaderboardEntry,
    LeaderboardResponse,
    ParticipantResponse,
    RecordAnswerRequest,
    RecordAnswerResponse,
    SessionResponse,
)
from studycore.services.feedback_service import FeedbackCues
from studycore.services.practice_session_service import PracticeSessionCoordinator
from studycore.services.score_service import ParticipantScoreTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice-sessions", tags=["practice-sessions"])


def _session_response(coordinator: PracticeSessionCoordinator, practice_session: PracticeSession) -> SessionResponse:
    return SessionResponse(
        session_id=practice_session.id,
        session_code=practice_session.session_code,
        host_user_id=practice_session.host_user_id,
        session_name=practice_session.session_name,
        session_type=practice_session.session_type,
        document_id=practice_session.document_id,
        is_active=practice_session.is_active,
        max_participants=practice_session.max_participants,
        participant_count=coordinator.participant_count(practice_session.id),
        created_at=practice_session.created_at,
        ended_at=practice_session.ended_at,
    )


def _participant_response(participant: Participant) -> ParticipantResponse:
    return ParticipantResponse(
        participant_id=participant.id,
        session_id=participant.session_id,
        user_id=participant.user_id,
        display_name=participant.display_name,
        score=participant.score,
        joined_at=participant.joined_at,
        last_active_at=participant.last_active_at,
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_practice_session(
    user_id: str,
    request: CreateSessionRequest,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    """
    Create a practice session hosted by the caller.

    The response carries the 6-character join code to share with participants.
    """
    max_participants = request.max_participants or settings.default_max_participants
    if max_participants > settings.max_participants_limit:
        raise ValidationError(f"max_participants cannot exceed {settings.max_participants_limit}")

    practice_session = coordinator.create_session(
        host_user_id=user_id,
        max_participants=max_participants,
        session_name=request.session_name,
        session_type=request.session_type,
        document_id=request.document_id,
        host_display_name=request.host_display_name,
        join_as_host=request.join_as_host,
    )
    return _session_response(coordinator, practice_session)


@router.get("", response_model=List[SessionResponse])
async def list_hosted_sessions(
    host_user_id: str,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    """Sessions hosted by a user, newest first (active and ended)."""
    return [_session_response(coordinator, s) for s in coordinator.list_hosted_sessions(host_user_id)]


@router.get("/code/{session_code}", response_model=SessionResponse)
async def get_session_by_code(
    session_code: str,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    return _session_response(coordinator, coordinator.get_session_by_code(session_code))


@router.post("/join", response_model=ParticipantResponse)
async def join_practice_session(
    user_id: str,
    request: JoinSessionRequest,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    """
    Join an active session by code.

    Joining a session the caller is already in returns the existing seat.
    """
    participant = coordinator.join_session(request.session_code, user_id, request.display_name)
    return _participant_response(participant)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_practice_session(
    session_id: int,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    return _session_response(coordinator, coordinator.get_session(session_id))


@router.post("/{session_id}/leave")
async def leave_practice_session(
    session_id: int,
    user_id: str,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    left = coordinator.leave_session(session_id, user_id)
    return {"session_id": session_id, "left": left}


@router.post("/{session_id}/end", response_model=SessionResponse)
async def end_practice_session(
    session_id: int,
    user_id: str,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    """End a session (host only). Scores stay readable on the leaderboard."""
    practice_session = coordinator.end_session(session_id, user_id)
    return _session_response(coordinator, practice_session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_practice_session(
    session_id: int,
    user_id: str,
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    coordinator.delete_session(session_id, user_id)
    return None


@router.post("/{session_id}/answers", response_model=RecordAnswerResponse)
async def record_answer(
    session_id: int,
    user_id: str,
    request: RecordAnswerRequest,
    tracker: ParticipantScoreTracker = Depends(get_score_tracker),
    cues: FeedbackCues = Depends(get_feedback_cues),
):
    """
    Record an answer and update the caller's live score.

    When delta is omitted the points come from the quality rating.
    """
    response = tracker.record_answer(
        session_id,
        user_id,
        delta=request.delta,
        quality=request.quality,
        item_id=request.item_id,
        item_type=request.item_type,
        response_time_ms=request.response_time_ms,
    )
    participant = tracker.session.get(Participant, response.participant_id)
    if request.quality is not None:
        cue = cues.for_quality(request.quality)
    else:
        cue = cues.for_delta(response.score_delta)
    return RecordAnswerResponse(
        participant_id=participant.id,
        score=participant.score,
        score_delta=response.score_delta,
        cue=cue,
    )


@router.post("/{session_id}/heartbeat", response_model=ParticipantResponse)
async def heartbeat(
    session_id: int,
    user_id: str,
    tracker: ParticipantScoreTracker = Depends(get_score_tracker),
):
    return _participant_response(tracker.touch(session_id, user_id))


@router.get("/{session_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    session_id: int,
    tracker: ParticipantScoreTracker = Depends(get_score_tracker),
    coordinator: PracticeSessionCoordinator = Depends(get_coordinator),
):
    """Participants ranked by score; ties go to whoever joined first."""
    participants = tracker.leaderboard(session_id)
    practice_session = coordinator.get_session(session_id)
    return LeaderboardResponse(
        session_id=session_id,
        is_session_active=practice_session.is_active,
        participants=[
            LeaderboardEntry(
                rank=rank,
                participant_id=p.id,
                user_id=p.user_id,
                display_name=p.display_name,
                score=p.score,
                joined_at=p.joined_at,
                is_active=tracker.is_active(p),
            )
            for rank, p in enumerate(participants, start=1)
        ],
    )
