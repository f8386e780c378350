"""
Model enums.
"""
from enum import Enum


class ItemType(str, Enum):
    """Kind of study content a review item schedules."""
    FLASHCARD = "flashcard"
    QUESTION = "question"


class SessionType(str, Enum):
    """Content a practice session draws its items from."""
    FLASHCARDS = "flashcards"
    QUESTIONS = "questions"


class QualityPreset(int, Enum):
    """Quality ratings offered by the study UI."""
    AGAIN = 0
    HARD = 3
    GOOD = 4
    PERFECT = 5


class ChangeAction(str, Enum):
    """Row-level change kinds broadcast on the realtime bus."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
