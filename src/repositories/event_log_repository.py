"""Persistence of the raw event log as one JSON blob per storage key."""

from __future__ import annotations

import json
import logging

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db import create_session_factory, ensure_schema
from domain.config import DEFAULT_STORAGE_KEY
from domain.errors import FormatError
from domain.events import EventLog, events_from_dicts, events_to_dicts
from models import EventLogBlob

logger = logging.getLogger(__name__)


def serialize_log(log: EventLog) -> bytes:
    return json.dumps(events_to_dicts(log), ensure_ascii=False).encode("utf-8")


def deserialize_log(data: bytes | str) -> EventLog:
    try:
        entries = json.loads(data)
    except (ValueError, RecursionError) as exc:
        raise FormatError(f"Stored event log is not valid JSON: {exc}") from exc
    if not isinstance(entries, list):
        raise FormatError(f"Stored event log must be a JSON array, got {type(entries).__name__}")
    return events_from_dicts(entries)


class EventLogRepository:
    """Key/blob store implementing the session's ``load``/``save`` contract."""

    def __init__(
        self,
        engine: Engine,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        session_factory: sessionmaker[Session] | None = None,
    ) -> None:
        self.engine = engine
        self.storage_key = storage_key
        self.session_factory = session_factory or create_session_factory(engine)
        ensure_schema(engine)

    def load(self) -> EventLog:
        with self.session_factory() as session:
            payload = session.execute(
                select(EventLogBlob.payload).where(EventLogBlob.storage_key == self.storage_key)
            ).scalar_one_or_none()

        if payload is None:
            logger.debug("No stored event log for key=%s", self.storage_key)
            return ()
        return deserialize_log(payload)

    def save(self, log: EventLog) -> None:
        payload = serialize_log(log).decode("utf-8")
        with self.session_factory() as session:
            with session.begin():
                row = session.get(EventLogBlob, self.storage_key)
                if row is None:
                    session.add(
                        EventLogBlob(
                            storage_key=self.storage_key,
                            payload=payload,
                            event_count=len(log),
                        )
                    )
                else:
                    row.payload = payload
                    row.event_count = len(log)
        logger.debug("Saved %d events under key=%s", len(log), self.storage_key)


__all__ = [
    "EventLogRepository",
    "deserialize_log",
    "serialize_log",
]
