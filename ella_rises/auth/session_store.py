"""Database-backed storage for login sessions."""

import asyncio
import json
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from ella_rises.models.session import SessionRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # Stored naive so SQLite and Postgres ``TIMESTAMP`` compare the same way.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class ServerSession(dict):
    """Session data for one request.

    Tracks whether it was written to so the middleware only persists sessions
    that changed, and whether it was destroyed (logout).
    """

    def __init__(self, data=None, sid: str | None = None):
        super().__init__(data or {})
        self.sid = sid
        self.previous_sid: str | None = None
        self.modified = False
        self.destroyed = False

    def __setitem__(self, key, value):
        self.modified = True
        super().__setitem__(key, value)

    def __delitem__(self, key):
        self.modified = True
        super().__delitem__(key)

    def pop(self, key, *default):
        self.modified = True
        return super().pop(key, *default)

    def update(self, *args, **kwargs):
        self.modified = True
        super().update(*args, **kwargs)

    def clear(self):
        self.modified = True
        super().clear()

    def destroy(self) -> None:
        super().clear()
        self.destroyed = True

    def regenerate(self) -> None:
        """Move the data to a fresh id; the old row is dropped when the response is sent."""
        if self.sid is not None:
            self.previous_sid = self.sid
        self.sid = None
        self.modified = True


class SessionStore:
    """Reads and writes rows of the ``sessions`` table."""

    def __init__(self, session_factory: sessionmaker, ttl: timedelta = timedelta(hours=24)):
        self.session_factory = session_factory
        self.ttl = ttl

    def load(self, sid: str) -> dict | None:
        db = self.session_factory()
        try:
            record = db.get(SessionRecord, sid)
            if record is None:
                return None
            if record.expired <= _utcnow():
                db.delete(record)
                db.commit()
                return None
            return json.loads(record.sess)
        finally:
            db.close()

    def save(self, sid: str, data: dict) -> None:
        db = self.session_factory()
        try:
            record = db.get(SessionRecord, sid)
            if record is None:
                record = SessionRecord(sid=sid)
                db.add(record)
            record.sess = json.dumps(data)
            record.expired = _utcnow() + self.ttl
            db.commit()
        finally:
            db.close()

    def destroy(self, sid: str) -> None:
        db = self.session_factory()
        try:
            db.execute(delete(SessionRecord).where(SessionRecord.sid == sid))
            db.commit()
        finally:
            db.close()

    def clear_expired(self) -> int:
        db = self.session_factory()
        try:
            result = db.execute(delete(SessionRecord).where(SessionRecord.expired <= _utcnow()))
            purged = result.rowcount
            db.commit()
        finally:
            db.close()
        if purged:
            logger.info("Purged %d expired sessions", purged)
        return purged


async def purge_expired_periodically(store: SessionStore, interval_seconds: float) -> None:
    """Drop abandoned sessions every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(store.clear_expired)
        except SQLAlchemyError:
            logger.exception("Purging expired sessions failed")
