"""
Shared FastAPI dependencies.

Process-wide collaborators (clock, change bus, feedback cues) live on
app.state and are built once in main.py; tests swap them through
dependency_overrides.
"""
from fastapi import Depends, Request
from sqlmodel import Session

from studycore.core.clock import ReviewClock
from studycore.core.config import settings
from studycore.core.database import get_session
from studycore.services.feedback_service import FeedbackCues
from studycore.services.practice_session_service import PracticeSessionCoordinator
from studycore.services.realtime_service import RealtimeChangeBus
from studycore.services.score_service import ParticipantScoreTracker


def get_clock(request: Request) -> ReviewClock:
    return request.app.state.clock


def get_change_bus(request: Request) -> RealtimeChangeBus:
    return request.app.state.change_bus


def get_feedback_cues(request: Request) -> FeedbackCues:
    return request.app.state.feedback_cues


def get_coordinator(
    session: Session = Depends(get_session),
    bus: RealtimeChangeBus = Depends(get_change_bus),
    clock: ReviewClock = Depends(get_clock),
) -> PracticeSessionCoordinator:
    return PracticeSessionCoordinator(
        session, bus, clock, max_code_attempts=settings.code_allocation_max_attempts
    )


def get_score_tracker(
    session: Session = Depends(get_session),
    bus: RealtimeChangeBus = Depends(get_change_bus),
    clock: ReviewClock = Depends(get_clock),
) -> ParticipantScoreTracker:
    return ParticipantScoreTracker(
        session, bus, clock, presence_window_seconds=settings.presence_window_seconds
    )
