"""
Realtime change bus for practice sessions.

Session and participant mutations are published as row-level change events
keyed by session id; UIs (through whatever gateway fronts them) subscribe
per session and re-render on every event. The in-process implementation is
built on a blinker signal whose sender is the session id.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict

from blinker import Namespace
from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect as sa_inspect

from studycore.models.enums import ChangeAction

logger = logging.getLogger(__name__)

SESSION_TABLE = "practice_session"
PARTICIPANT_TABLE = "practice_participant"


@dataclass(frozen=True)
class ChangeEvent:
    """One inserted, updated or deleted row belonging to a session."""
    table: str
    action: ChangeAction
    session_id: int
    record: Dict[str, Any]
    occurred_at: datetime = field(default_factory=datetime.now)


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by subscribe(); unsubscribe() may be called any number of times."""

    def __init__(self, bus: "RealtimeChangeBus", session_id: int, receiver):
        self.bus = bus
        self.session_id = session_id
        self._receiver = receiver
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self.bus._remove(self.session_id, self._receiver)


class RealtimeChangeBus(ABC):
    """Publish/subscribe channel keyed by session id."""

    @abstractmethod
    def publish(self, session_id: int, event: ChangeEvent) -> None:
        ...

    @abstractmethod
    def subscribe(self, session_id: int, callback: ChangeCallback) -> Subscription:
        ...

    @abstractmethod
    def _remove(self, session_id: int, receiver) -> None:
        ...


class BlinkerChangeBus(RealtimeChangeBus):
    """In-process bus. Each instance owns its own signal namespace."""

    def __init__(self):
        self._signals = Namespace()
        self._changes = self._signals.signal("session-changes")

    def publish(self, session_id: int, event: ChangeEvent) -> None:
        self._changes.send(session_id, event=event)

    def subscribe(self, session_id: int, callback: ChangeCallback) -> Subscription:
        def receiver(sender, event: ChangeEvent):
            try:
                callback(event)
            except Exception:
                # One broken subscriber must not starve the others
                logger.warning(
                    f"Change subscriber for session {sender} failed on {event.table} {event.action.value}",
                    exc_info=True,
                )

        self._changes.connect(receiver, sender=session_id, weak=False)
        return Subscription(self, session_id, receiver)

    def subscriber_count(self, session_id: int) -> int:
        return sum(1 for _ in self._changes.receivers_for(session_id))

    def _remove(self, session_id: int, receiver) -> None:
        self._changes.disconnect(receiver, sender=session_id)


def row_to_record(row) -> Dict[str, Any]:
    """JSON-ready dict of a table row's column values (loads expired attributes)."""
    if isinstance(row, dict):
        return jsonable_encoder(row)
    mapper = sa_inspect(row).mapper
    return jsonable_encoder({attr.key: getattr(row, attr.key) for attr in mapper.column_attrs})


def publish_change(bus: RealtimeChangeBus, table: str, action: ChangeAction, session_id: int, row, now: datetime) -> None:
    """Serialize a row (or an already captured record) and publish it as a change event."""
    bus.publish(session_id, ChangeEvent(
        table=table,
        action=action,
        session_id=session_id,
        record=row_to_record(row),
        occurred_at=now,
    ))
