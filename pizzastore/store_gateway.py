"""
Record store gateway: the only place that talks to the SQLAlchemy session.

Statements are SQLAlchemy Core/ORM constructs or text() with bound
parameters. Plain strings are wrapped in text(); values always travel as
parameters, never inside the SQL.
"""
import enum
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Union

from sqlalchemy import Sequence, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from .errors import IntegrityViolation, StoreError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


class RecordStore:
    """Parameterized reads/writes plus a transaction boundary over one session"""

    def __init__(self, session: Session):
        self.session = session

    def _execute(self, statement: Statement, params: Optional[Mapping[str, Any]] = None):
        if isinstance(statement, str):
            statement = text(statement)
        try:
            if params:
                return self.session.execute(statement, params)
            return self.session.execute(statement)
        except IntegrityError as e:
            self.session.rollback()
            raise IntegrityViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            # A failed statement (or a lost connection) leaves the session
            # unusable until it is rolled back
            self.session.rollback()
            logger.error(f"Statement failed: {e}")
            raise StoreError(str(e)) from e

    def execute_update(self, statement: Statement,
                       params: Optional[Mapping[str, Any]] = None) -> int:
        """Run an INSERT/UPDATE/DELETE and return the number of rows affected"""
        return self._execute(statement, params).rowcount

    def execute_query(self, statement: Statement,
                      params: Optional[Mapping[str, Any]] = None) -> int:
        """Run a SELECT and return how many rows it produced"""
        return len(self._execute(statement, params).fetchall())

    def execute_query_with_rows(self, statement: Statement,
                                params: Optional[Mapping[str, Any]] = None
                                ) -> List[List[Optional[str]]]:
        """Run a SELECT and return every row as a list of strings"""
        result = self._execute(statement, params)
        return [[_to_text(value) for value in row] for row in result]

    def column_names(self, statement: Statement,
                     params: Optional[Mapping[str, Any]] = None) -> List[str]:
        return list(self._execute(statement, params).keys())

    # ORM helpers used by the CRUD modules

    def fetch_one(self, statement: Executable,
                  params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._execute(statement, params).scalars().first()

    def fetch_all(self, statement: Executable,
                  params: Optional[Mapping[str, Any]] = None) -> List[Any]:
        return list(self._execute(statement, params).scalars().all())

    def add(self, instance: Any) -> None:
        self.session.add(instance)

    def flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise IntegrityViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(str(e)) from e

    def next_sequence_value(self, name: str) -> int:
        """
        Fetch the next value of a database sequence.

        Only dialects with real sequences (PostgreSQL) support this; on others
        a StoreError is raised and callers should rely on identity columns.
        """
        dialect = self.session.get_bind().dialect
        if not dialect.supports_sequences:
            raise StoreError(f"Sequences are not supported by {dialect.name}")
        value = self._execute(select(Sequence(name).next_value())).scalar()
        return int(value)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit everything done inside the block, or roll all of it back.

        SQLAlchemy errors raised inside (including at flush/commit time) come
        out as StoreError; anything else is re-raised unchanged after rollback.
        """
        try:
            yield self.session
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise IntegrityViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Transaction rolled back: {e}")
            raise StoreError(str(e)) from e
        except BaseException:
            self.session.rollback()
            raise
