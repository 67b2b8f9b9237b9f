import asyncio
import time
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from ella_rises.auth.session_store import ServerSession, SessionStore, purge_expired_periodically
from ella_rises.core.config import load_settings
from ella_rises.database import ensure_schema
from ella_rises.main import create_app
from ella_rises.models.session import SessionRecord


@pytest.fixture
def store(app):
    return SessionStore(app.state.session_factory)


def test_saved_session_is_loaded_back(store) -> None:
    store.save('sid-1', {'user': {'id': 1, 'email': 'admin@test.com', 'role': 'manager'}})

    assert store.load('sid-1') == {'user': {'id': 1, 'email': 'admin@test.com', 'role': 'manager'}}


def test_unknown_session_loads_as_none(store) -> None:
    assert store.load('missing') is None


def test_expired_session_is_dropped_on_load(app, db) -> None:
    store = SessionStore(app.state.session_factory, ttl=timedelta(seconds=-1))
    store.save('old', {'user': {'id': 1, 'email': 'a@b.c', 'role': 'manager'}})

    assert store.load('old') is None
    assert db.get(SessionRecord, 'old') is None


def test_destroy_removes_session(store) -> None:
    store.save('sid-2', {'user': {'id': 1, 'email': 'a@b.c', 'role': 'manager'}})

    store.destroy('sid-2')

    assert store.load('sid-2') is None


def test_clear_expired_only_removes_expired_rows(app, store) -> None:
    expired_store = SessionStore(app.state.session_factory, ttl=timedelta(seconds=-1))
    expired_store.save('stale', {'n': 1})
    store.save('fresh', {'n': 2})

    assert store.clear_expired() == 1
    assert store.load('fresh') == {'n': 2}


def test_server_session_tracks_writes_and_destroy() -> None:
    session = ServerSession({'user': {'id': 1}}, sid='abc')
    assert not session.modified

    session['flash'] = 'saved'
    assert session.modified

    session.destroy()
    assert session.destroyed
    assert dict(session) == {}


def test_regenerate_keeps_data_under_a_new_id() -> None:
    session = ServerSession({'user': {'id': 2}}, sid='old')

    session.regenerate()

    assert session.sid is None
    assert session.previous_sid == 'old'
    assert session.modified
    assert session['user'] == {'id': 2}


class _FlakyStore:
    def __init__(self):
        self.calls = 0

    def clear_expired(self):
        self.calls += 1
        if self.calls == 1:
            raise OperationalError('DELETE FROM sessions', {}, Exception('database is locked'))
        return 0


def test_purge_loop_runs_repeatedly_and_survives_database_errors() -> None:
    store = _FlakyStore()

    async def run_for_a_while():
        task = asyncio.create_task(purge_expired_periodically(store, 0.01))
        await asyncio.sleep(0.2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run_for_a_while())

    assert store.calls >= 3


def test_running_app_purges_abandoned_sessions(tmp_path) -> None:
    settings = load_settings({
        'DATABASE_URL': f'sqlite:///{tmp_path / "sessions.db"}',
        'SESSION_SECRET': 'test-secret',
        'SESSION_PURGE_INTERVAL_SECONDS': '0.05',
    })
    app = create_app(settings)
    ensure_schema(app.state.engine)
    expired_store = SessionStore(app.state.session_factory, ttl=timedelta(seconds=-1))

    with TestClient(app) as client:
        for number in range(5):
            expired_store.save(f'abandoned-{number}', {'user': {'id': number}})
        client.post('/login', data={'email': 'admin@test.com', 'password': 'pass'}, follow_redirects=False)

        deadline = time.monotonic() + 5
        while time.monotonic() < deadline and _stored_session_count(app) != 1:
            time.sleep(0.05)

    assert _stored_session_count(app) == 1


def _stored_session_count(app) -> int:
    db = app.state.session_factory()
    try:
        return db.query(SessionRecord).count()
    finally:
        db.close()
