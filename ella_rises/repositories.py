"""Per-table select/insert/update helpers used by the route layer."""

import logging
from typing import Any, Mapping

from sqlalchemy import Table, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from ella_rises.models.donation import Donation
from ella_rises.models.event import Event
from ella_rises.models.milestone import Milestone
from ella_rises.models.participant import Participant
from ella_rises.models.survey import Survey
from ella_rises.models.user import User

logger = logging.getLogger(__name__)


class TableRepository:
    """Thin pass-through to one table.

    Values are written exactly as submitted; unknown columns make SQLAlchemy
    raise and that error is left to propagate.
    """

    hidden_columns: frozenset[str] = frozenset()

    def __init__(self, model):
        self.model = model
        self.table: Table = model.__table__

    @property
    def name(self) -> str:
        return self.table.name

    @property
    def form_fields(self) -> list[str]:
        return [column.name for column in self.table.columns if not column.primary_key]

    @property
    def columns(self) -> list[str]:
        return [column.name for column in self.table.columns if column.name not in self.hidden_columns]

    def list_all(self, db: Session) -> list[dict]:
        return self.list_where(db)

    def list_where(self, db: Session, **filters: Any) -> list[dict]:
        statement = select(*(self.table.c[name] for name in self.columns)).order_by(self.table.c.id)
        for column, value in filters.items():
            statement = statement.where(self.table.c[column] == value)
        try:
            return [dict(row) for row in db.execute(statement).mappings().all()]
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Listing %s failed; returning no rows", self.name, exc_info=True)
            return []

    def get(self, db: Session, row_id: int) -> dict | None:
        row = db.execute(select(self.table).where(self.table.c.id == row_id)).mappings().first()
        return dict(row) if row is not None else None

    def insert(self, db: Session, values: Mapping[str, Any]) -> None:
        db.execute(insert(self.table).values(**self.prepare(values)))
        db.commit()

    def update(self, db: Session, row_id: int, values: Mapping[str, Any]) -> int:
        values = self.prepare(values)
        if not values:
            return 0
        result = db.execute(update(self.table).where(self.table.c.id == row_id).values(**values))
        updated = result.rowcount
        db.commit()
        return updated

    def prepare(self, values: Mapping[str, Any]) -> dict:
        return dict(values)


class UserRepository(TableRepository):
    # Password hashes never leave the database through listings.
    hidden_columns = frozenset({"password"})

    def __init__(self):
        super().__init__(User)

    def prepare(self, values: Mapping[str, Any]) -> dict:
        values = dict(values)
        password = values.pop("password", None)
        if password:
            values["password"] = generate_password_hash(password)
        return values


users = UserRepository()
participants = TableRepository(Participant)
events = TableRepository(Event)
surveys = TableRepository(Survey)
milestones = TableRepository(Milestone)
donations = TableRepository(Donation)
