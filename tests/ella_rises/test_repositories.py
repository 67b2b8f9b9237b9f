import pytest
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash

from ella_rises import repositories
from ella_rises.database import build_engine, build_session_factory


def test_insert_then_list_returns_row(db) -> None:
    repositories.participants.insert(db, {'first_name': 'Maria', 'last_name': 'Lopez', 'city': 'Provo'})

    rows = repositories.participants.list_all(db)

    assert len(rows) == 1
    assert rows[0]['first_name'] == 'Maria'
    assert rows[0]['city'] == 'Provo'


def test_update_overwrites_submitted_columns(db) -> None:
    repositories.events.insert(db, {'name': 'STEAM Summit', 'location': 'Orem'})
    event_id = repositories.events.list_all(db)[0]['id']

    updated = repositories.events.update(db, event_id, {'location': 'Salt Lake City'})

    assert updated == 1
    assert repositories.events.get(db, event_id)['location'] == 'Salt Lake City'
    assert repositories.events.get(db, event_id)['name'] == 'STEAM Summit'


def test_get_missing_row_returns_none(db) -> None:
    assert repositories.donations.get(db, 404) is None


def test_list_where_filters_milestones_by_participant(db) -> None:
    repositories.milestones.insert(db, {'participant_id': 1, 'title': 'First robot'})
    repositories.milestones.insert(db, {'participant_id': 2, 'title': 'Science fair'})

    rows = repositories.milestones.list_where(db, participant_id=1)

    assert [row['title'] for row in rows] == ['First robot']


def test_list_swallows_database_errors() -> None:
    # No schema: the select fails with "no such table".
    session = build_session_factory(build_engine('sqlite://'))()
    try:
        assert repositories.surveys.list_all(session) == []
    finally:
        session.close()


def test_insert_with_unknown_column_raises(db) -> None:
    with pytest.raises(SQLAlchemyError):
        repositories.donations.insert(db, {'donor_name': 'Ana', 'not_a_column': 'x'})


def test_user_passwords_are_hashed(db) -> None:
    repositories.users.insert(db, {'email': 'staff@test.com', 'password': 'hunter2', 'role': 'staff'})

    user = repositories.users.get(db, 1)

    assert user['password'] != 'hunter2'
    assert check_password_hash(user['password'], 'hunter2')


def test_blank_password_on_user_update_keeps_existing_hash(db) -> None:
    repositories.users.insert(db, {'email': 'staff@test.com', 'password': 'hunter2', 'role': 'staff'})
    user = repositories.users.get(db, 1)

    repositories.users.update(db, user['id'], {'role': 'manager', 'password': ''})

    updated = repositories.users.get(db, user['id'])
    assert updated['role'] == 'manager'
    assert updated['password'] == user['password']


def test_user_listing_leaves_out_password_column(db) -> None:
    repositories.users.insert(db, {'email': 'staff@test.com', 'password': 'hunter2', 'role': 'staff'})

    rows = repositories.users.list_all(db)

    assert rows == [{'id': 1, 'email': 'staff@test.com', 'role': 'staff'}]
    assert 'password' not in repositories.users.columns
