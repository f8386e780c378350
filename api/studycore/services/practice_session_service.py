"""
Practice session lifecycle: create, join, leave, end, and cleanup.

A session is active from creation until the host ends it (or an operator
sweep ends it after inactivity). No lock is held across requests: duplicate
joins are resolved by the (session_id, user_id) unique constraint and the
participant cap is a soft cap checked before insert.
"""
import logging
from datetime import timedelta
from typing import List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, func

from studycore.core.clock import ReviewClock
from studycore.core.exceptions import (
    CodeSpaceExhausted,
    SessionFull,
    SessionNotFound,
    Unauthorized,
    ValidationError,
)
from studycore.models.models import ChangeAction, Participant, PracticeSession, SessionType
from studycore.services import session_code_service
from studycore.services.realtime_service import (
    PARTICIPANT_TABLE,
    SESSION_TABLE,
    RealtimeChangeBus,
    publish_change,
    row_to_record,
)

logger = logging.getLogger(__name__)

# Attempts at inserting a session when a concurrent create grabbed the same code
CREATE_RETRIES = 3
DEFAULT_DISPLAY_NAME = "Anonymous"
HOST_DISPLAY_NAME = "Host"


class PracticeSessionCoordinator:
    """Owns practice session and participant rows for one unit of work."""

    def __init__(
        self,
        session: Session,
        bus: RealtimeChangeBus,
        clock: ReviewClock,
        max_code_attempts: int = session_code_service.DEFAULT_MAX_ATTEMPTS,
    ):
        self.session = session
        self.bus = bus
        self.clock = clock
        self.max_code_attempts = max_code_attempts

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def active_codes(self) -> Set[str]:
        codes = self.session.exec(
            select(PracticeSession.session_code).where(PracticeSession.is_active == True)  # noqa: E712
        ).all()
        return set(codes)

    def get_session(self, session_id: int) -> PracticeSession:
        practice_session = self.session.get(PracticeSession, session_id)
        if not practice_session:
            raise SessionNotFound(f"Practice session with id {session_id} not found")
        return practice_session

    def get_active_session_by_code(self, code: str) -> PracticeSession:
        code = session_code_service.normalize_code(code)
        if not session_code_service.is_valid_code(code):
            raise SessionNotFound("Session not found or has ended")
        practice_session = self.session.exec(
            select(PracticeSession).where(
                PracticeSession.session_code == code,
                PracticeSession.is_active == True,  # noqa: E712
            )
        ).first()
        if not practice_session:
            # Never existed and already ended look the same to a joiner
            raise SessionNotFound("Session not found or has ended")
        return practice_session

    def get_session_by_code(self, code: str) -> PracticeSession:
        """
        Find a session by code for display, including ended ones.

        An active session wins over ended sessions that used the same code;
        among ended sessions the newest wins.
        """
        practice_session = self.session.exec(
            select(PracticeSession)
            .where(PracticeSession.session_code == session_code_service.normalize_code(code))
            .order_by(PracticeSession.is_active.desc(), PracticeSession.created_at.desc())  # type: ignore
        ).first()
        if not practice_session:
            raise SessionNotFound("Session not found")
        return practice_session

    def find_participant(self, session_id: int, user_id: str) -> Optional[Participant]:
        return self.session.exec(
            select(Participant).where(
                Participant.session_id == session_id,
                Participant.user_id == user_id,
            )
        ).first()

    def participant_count(self, session_id: int) -> int:
        return self.session.exec(
            select(func.count()).select_from(Participant).where(Participant.session_id == session_id)
        ).one()

    def list_hosted_sessions(self, host_user_id: str) -> List[PracticeSession]:
        return list(self.session.exec(
            select(PracticeSession)
            .where(PracticeSession.host_user_id == host_user_id)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())  # type: ignore
        ).all())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_session(
        self,
        host_user_id: str,
        max_participants: int,
        session_name: Optional[str] = None,
        session_type: str = SessionType.FLASHCARDS.value,
        document_id: Optional[str] = None,
        host_display_name: Optional[str] = None,
        join_as_host: bool = True,
    ) -> PracticeSession:
        """
        Create an active session under a freshly allocated join code.

        The host is seated as the first participant unless join_as_host is False.

        Raises:
            ValidationError: If max_participants is not positive
            CodeSpaceExhausted: If no free code could be allocated
        """
        if max_participants < 1:
            raise ValidationError("max_participants must be a positive integer")

        practice_session = None
        for attempt in range(1, CREATE_RETRIES + 1):
            code = session_code_service.allocate(self.active_codes(), self.max_code_attempts)
            candidate = PracticeSession(
                session_code=code,
                host_user_id=host_user_id,
                session_name=session_name,
                session_type=session_type,
                document_id=document_id,
                is_active=True,
                max_participants=max_participants,
                created_at=self.clock.now(),
            )
            self.session.add(candidate)
            try:
                self.session.commit()
            except IntegrityError:
                # Another create took this code between allocation and insert
                self.session.rollback()
                logger.warning(f"Session code collision on insert (attempt {attempt}/{CREATE_RETRIES})")
                continue
            practice_session = candidate
            break

        if practice_session is None:
            raise CodeSpaceExhausted("Could not reserve a session code")

        self.session.refresh(practice_session)
        logger.info(
            f"Created practice session {practice_session.id} ({practice_session.session_code}) "
            f"for host {host_user_id}, max {max_participants} participants"
        )
        publish_change(self.bus, SESSION_TABLE, ChangeAction.INSERT, practice_session.id, practice_session, self.clock.now())

        if join_as_host:
            self._insert_participant(practice_session, host_user_id, host_display_name or HOST_DISPLAY_NAME)
            self.session.refresh(practice_session)
        return practice_session

    def join_session(self, code: str, user_id: str, display_name: Optional[str] = None) -> Participant:
        """
        Seat a user in the active session with the given code.

        Joining again returns the existing participant unchanged.

        Raises:
            SessionNotFound: If no active session has this code
            SessionFull: If the session already holds max_participants
        """
        practice_session = self.get_active_session_by_code(code)

        existing = self.find_participant(practice_session.id, user_id)
        if existing:
            logger.info(f"User {user_id} rejoined session {practice_session.id}")
            return existing

        count = self.participant_count(practice_session.id)
        if count >= practice_session.max_participants:
            logger.info(f"User {user_id} refused: session {practice_session.id} is full ({count})")
            raise SessionFull("Session is full")

        return self._insert_participant(practice_session, user_id, display_name)

    def leave_session(self, session_id: int, user_id: str) -> bool:
        """Remove the user's participant row. Returns False when there was none."""
        participant = self.find_participant(session_id, user_id)
        if not participant:
            return False

        record = row_to_record(participant)
        self.session.delete(participant)
        self.session.commit()
        logger.info(f"User {user_id} left session {session_id}")
        publish_change(self.bus, PARTICIPANT_TABLE, ChangeAction.DELETE, session_id, record, self.clock.now())
        return True

    def end_session(self, session_id: int, host_user_id: str) -> PracticeSession:
        """
        End a session. Participant rows are kept for post-session review.

        Raises:
            SessionNotFound: If the session does not exist
            Unauthorized: If the caller is not the host
        """
        practice_session = self.get_session(session_id)
        if practice_session.host_user_id != host_user_id:
            raise Unauthorized("Only the host can end this session")
        if not practice_session.is_active:
            return practice_session
        return self._deactivate(practice_session)

    def delete_session(self, session_id: int, host_user_id: str) -> None:
        """Permanently delete a session with its participants and responses (host only)."""
        practice_session = self.get_session(session_id)
        if practice_session.host_user_id != host_user_id:
            raise Unauthorized("Only the host can delete this session")

        record = row_to_record(practice_session)
        self.session.delete(practice_session)
        self.session.commit()
        logger.info(f"Deleted practice session {session_id}")
        publish_change(self.bus, SESSION_TABLE, ChangeAction.DELETE, session_id, record, self.clock.now())

    def sweep_abandoned_sessions(self, idle_minutes: int) -> List[int]:
        """
        End active sessions with no participant activity for idle_minutes.

        A session without participants is measured from its creation time.

        Returns:
            Ids of the sessions that were ended
        """
        cutoff = self.clock.now() - timedelta(minutes=idle_minutes)
        rows = self.session.exec(
            select(PracticeSession, func.max(Participant.last_active_at))
            .outerjoin(Participant, Participant.session_id == PracticeSession.id)
            .where(PracticeSession.is_active == True)  # noqa: E712
            .group_by(PracticeSession.id)
        ).all()

        ended = []
        for practice_session, last_activity in rows:
            latest = max(filter(None, [practice_session.created_at, last_activity]))
            if latest < cutoff:
                self._deactivate(practice_session)
                ended.append(practice_session.id)

        logger.info(f"Abandoned-session sweep ended {len(ended)} session(s) idle since before {cutoff}")
        return ended

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _deactivate(self, practice_session: PracticeSession) -> PracticeSession:
        practice_session.is_active = False
        practice_session.ended_at = self.clock.now()
        self.session.add(practice_session)
        self.session.commit()
        self.session.refresh(practice_session)
        logger.info(f"Ended practice session {practice_session.id} ({practice_session.session_code})")
        publish_change(
            self.bus, SESSION_TABLE, ChangeAction.UPDATE, practice_session.id, practice_session, self.clock.now()
        )
        return practice_session

    def _insert_participant(
        self,
        practice_session: PracticeSession,
        user_id: str,
        display_name: Optional[str],
    ) -> Participant:
        session_id = practice_session.id
        now = self.clock.now()
        participant = Participant(
            session_id=session_id,
            user_id=user_id,
            display_name=(display_name or "").strip() or DEFAULT_DISPLAY_NAME,
            score=0,
            joined_at=now,
            last_active_at=now,
        )
        self.session.add(participant)
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent join for the same user won the insert
            self.session.rollback()
            existing = self.find_participant(session_id, user_id)
            if existing is None:
                raise
            logger.info(f"Concurrent join for user {user_id} in session {session_id} resolved to existing row")
            return existing

        self.session.refresh(participant)
        logger.info(f"User {user_id} joined session {session_id} as participant {participant.id}")
        publish_change(self.bus, PARTICIPANT_TABLE, ChangeAction.INSERT, session_id, participant, now)
        return participant
