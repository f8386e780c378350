#!/usr/bin/env python3
"""
End practice sessions that nobody has touched for a while.

A session counts as abandoned when neither its creation nor any
participant activity falls within the idle window. Ended sessions keep
their participants and scores. No live change events reach connected
clients from this process.

Usage:
  python api/scripts/sweep_abandoned_sessions.py --idle-minutes 45
"""
import argparse
import logging
import sys

from sqlmodel import Session

from studycore.core.clock import ReviewClock
from studycore.core.config import settings
from studycore.core.database import engine
from studycore.services.practice_session_service import PracticeSessionCoordinator
from studycore.services.realtime_service import BlinkerChangeBus

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def sweep(idle_minutes: int):
    with Session(engine) as session:
        # The in-process bus has no subscribers here; API clients see the ended
        # sessions on their next read, not as live change events
        coordinator = PracticeSessionCoordinator(session, BlinkerChangeBus(), ReviewClock())
        return coordinator.sweep_abandoned_sessions(idle_minutes)


def main():
    parser = argparse.ArgumentParser(description="End abandoned practice sessions")
    parser.add_argument(
        "--idle-minutes",
        type=int,
        default=settings.session_idle_timeout_minutes,
        help=f"Minutes without activity before a session is ended (default: {settings.session_idle_timeout_minutes})"
    )
    args = parser.parse_args()

    if args.idle_minutes < 1:
        parser.error("--idle-minutes must be at least 1")

    logger.info(f"Sweeping sessions idle for more than {args.idle_minutes} minutes...")
    try:
        ended = sweep(args.idle_minutes)
    except Exception as e:
        logger.error("Error during session sweep: %s", e, exc_info=True)
        sys.exit(1)

    if ended:
        logger.info(f"Ended sessions: {', '.join(str(session_id) for session_id in ended)}")
    logger.info("Successfully completed!")


if __name__ == "__main__":
    main()
