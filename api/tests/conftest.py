import os
from datetime import datetime

import pytest

# Settings refuse to load without a database URL
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlmodel import Session

from studycore.api.deps import get_change_bus, get_clock, get_feedback_cues
from studycore.core.clock import FixedClock
from studycore.core.database import build_engine, get_session, init_db
from studycore.main import app
from studycore.services.feedback_service import FeedbackCues
from studycore.services.practice_session_service import PracticeSessionCoordinator
from studycore.services.realtime_service import BlinkerChangeBus
from studycore.services.score_service import ParticipantScoreTracker

START = datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def bus():
    return BlinkerChangeBus()


@pytest.fixture
def coordinator(session, bus, clock):
    return PracticeSessionCoordinator(session, bus, clock)


@pytest.fixture
def tracker(session, bus, clock):
    return ParticipantScoreTracker(session, bus, clock)


@pytest.fixture
def client(engine, clock, bus):
    def _get_session():
        with Session(engine) as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_change_bus] = lambda: bus
    app.dependency_overrides[get_feedback_cues] = lambda: FeedbackCues()
    yield TestClient(app)
    app.dependency_overrides.clear()
