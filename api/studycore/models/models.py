"""
Models module - re-exports all table models.

Importing this module registers every table on SQLModel.metadata, which
init_db() and Alembic rely on.
"""
from studycore.models.enums import ItemType, SessionType, QualityPreset, ChangeAction
from studycore.models.review_item import ReviewItem
from studycore.models.review_log import ReviewLog
from studycore.models.practice_session import PracticeSession
from studycore.models.participant import Participant
from studycore.models.session_response import SessionResponse

__all__ = [
    'ItemType',
    'SessionType',
    'QualityPreset',
    'ChangeAction',
    'ReviewItem',
    'ReviewLog',
    'PracticeSession',
    'Participant',
    'SessionResponse',
]
