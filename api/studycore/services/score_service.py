"""
Live scoring and leaderboard for practice sessions.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from studycore.core.clock import ReviewClock
from studycore.core.exceptions import ParticipantNotFound, SessionNotFound, ValidationError
from studycore.models.models import ChangeAction, Participant, PracticeSession, SessionResponse
from studycore.services.realtime_service import PARTICIPANT_TABLE, RealtimeChangeBus, publish_change
from studycore.services.srs_service import clamp_quality, points_for_quality

logger = logging.getLogger(__name__)

DEFAULT_PRESENCE_WINDOW_SECONDS = 30


def is_participant_active(
    last_active_at: datetime,
    now: datetime,
    window_seconds: int = DEFAULT_PRESENCE_WINDOW_SECONDS,
) -> bool:
    """Presence is derived at read time: active iff seen within the window."""
    return now - last_active_at < timedelta(seconds=window_seconds)


class ParticipantScoreTracker:
    """Applies score deltas and reads the leaderboard for practice sessions."""

    def __init__(
        self,
        session: Session,
        bus: RealtimeChangeBus,
        clock: ReviewClock,
        presence_window_seconds: int = DEFAULT_PRESENCE_WINDOW_SECONDS,
    ):
        self.session = session
        self.bus = bus
        self.clock = clock
        self.presence_window_seconds = presence_window_seconds

    def _get_participant(self, session_id: int, user_id: str) -> Participant:
        participant = self.session.exec(
            select(Participant).where(
                Participant.session_id == session_id,
                Participant.user_id == user_id,
            )
        ).first()
        if not participant:
            raise ParticipantNotFound(f"User {user_id} has not joined session {session_id}")
        return participant

    def _increment(self, participant: Participant, delta: int, now: datetime) -> None:
        # Single UPDATE so concurrent answers never overwrite each other's points
        self.session.exec(
            update(Participant)
            .where(Participant.id == participant.id)
            .values(score=Participant.score + delta, last_active_at=now)
        )

    def _commit_and_publish(self, participant: Participant, now: datetime) -> Participant:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error(f"Failed to update participant {participant.id}", exc_info=True)
            raise
        self.session.refresh(participant)
        publish_change(self.bus, PARTICIPANT_TABLE, ChangeAction.UPDATE, participant.session_id, participant, now)
        return participant

    def apply_answer(self, session_id: int, user_id: str, delta: int) -> Participant:
        """
        Add delta to the participant's score and mark them active.

        Raises:
            ParticipantNotFound: If the user has not joined the session
        """
        participant = self._get_participant(session_id, user_id)
        now = self.clock.now()
        self._increment(participant, delta, now)
        participant = self._commit_and_publish(participant, now)
        logger.info(f"Participant {participant.id} in session {session_id}: {delta:+d} -> {participant.score}")
        return participant

    def record_answer(
        self,
        session_id: int,
        user_id: str,
        delta: Optional[int] = None,
        quality: Optional[int] = None,
        item_id: Optional[str] = None,
        item_type: Optional[str] = None,
        response_time_ms: int = 0,
    ) -> SessionResponse:
        """
        Log an answer and apply its score delta in one transaction.

        When delta is omitted it is derived from the quality rating
        (5 -> 100, 4 -> 75, 3 -> 50, otherwise 0).

        Raises:
            ValidationError: If neither delta nor quality is given
            SessionNotFound: If the session does not exist or has ended
            ParticipantNotFound: If the user has not joined the session
        """
        if delta is None and quality is None:
            raise ValidationError("An answer needs a score delta or a quality rating")

        practice_session = self.session.get(PracticeSession, session_id)
        if not practice_session or not practice_session.is_active:
            raise SessionNotFound("Session not found or has ended")

        participant = self._get_participant(session_id, user_id)
        q = clamp_quality(quality) if quality is not None else None
        if delta is None:
            delta = points_for_quality(q)

        now = self.clock.now()
        response = SessionResponse(
            session_id=session_id,
            participant_id=participant.id,
            item_id=item_id,
            item_type=item_type,
            quality=q,
            score_delta=delta,
            response_time_ms=response_time_ms,
            answered_at=now,
        )
        self.session.add(response)
        self._increment(participant, delta, now)
        self._commit_and_publish(participant, now)
        self.session.refresh(response)
        logger.info(
            f"Recorded answer for participant {participant.id} in session {session_id}: "
            f"quality={q}, delta={delta:+d}, score={participant.score}"
        )
        return response

    def touch(self, session_id: int, user_id: str) -> Participant:
        """Heartbeat: refresh last_active_at without changing the score."""
        participant = self._get_participant(session_id, user_id)
        now = self.clock.now()
        self._increment(participant, 0, now)
        return self._commit_and_publish(participant, now)

    def leaderboard(self, session_id: int) -> List[Participant]:
        """
        Participants by score descending; ties go to whoever joined first.

        Ended sessions still have a leaderboard for post-session display.

        Raises:
            SessionNotFound: If the session does not exist
        """
        if not self.session.get(PracticeSession, session_id):
            raise SessionNotFound(f"Practice session with id {session_id} not found")
        return list(self.session.exec(
            select(Participant)
            .where(Participant.session_id == session_id)
            .order_by(
                Participant.score.desc(),  # type: ignore
                Participant.joined_at.asc(),  # type: ignore
                Participant.id.asc(),  # type: ignore
            )
        ).all())

    def is_active(self, participant: Participant) -> bool:
        return is_participant_active(participant.last_active_at, self.clock.now(), self.presence_window_seconds)
