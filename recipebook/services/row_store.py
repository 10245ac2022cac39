"""Row store adapter.

The recipe tables are written one statement at a time: every ``insert``,
``update`` and ``delete`` here commits on its own, and nothing spans tables.
Multi-row flows (create, edit, delete of a recipe aggregate) are therefore
ordered so that each step only depends on ids produced by earlier steps, and
every insert can be replayed safely through ``insert_if_absent``.
"""

import logging
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from recipebook.errors import DuplicateRow, PersistenceFailure

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


class RowStore:
    """Single-statement writes against the recipe tables."""

    def __init__(self, db: Session):
        self.db = db

    def first(self, query: Query) -> Any:
        """Run a lookup, returning its first row or None."""
        try:
            return query.first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e

    def all(self, query: Query) -> list[Any]:
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e

    def insert(self, row: RowT) -> RowT:
        """Insert one row and return it with its generated key."""
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateRow(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e
        self.db.refresh(row)
        return row

    def insert_if_absent(self, row: RowT, **key: Any) -> RowT:
        """Insert a row unless one with the same key columns already exists."""
        model = type(row)
        existing = self.first(self.db.query(model).filter_by(**key))
        if existing is not None:
            return existing
        try:
            return self.insert(row)
        except DuplicateRow:
            # Lost a race with a concurrent writer: the row is there now.
            existing = self.first(self.db.query(model).filter_by(**key))
            if existing is None:
                raise
            return existing

    def update(self, row: RowT, **fields: Any) -> RowT:
        """Set fields on a persisted row."""
        for name, value in fields.items():
            setattr(row, name, value)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e
        self.db.refresh(row)
        return row

    def delete(self, query: Query) -> int:
        """Delete every row matched by a query, returning the count."""
        try:
            count = query.delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e
        return count

    def delete_row(self, row: Any) -> None:
        """Delete a single loaded row."""
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e
