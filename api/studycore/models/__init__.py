"""
Models package.
"""
from studycore.models.models import (
    ItemType,
    SessionType,
    QualityPreset,
    ChangeAction,
    ReviewItem,
    ReviewLog,
    PracticeSession,
    Participant,
    SessionResponse,
)

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
