import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, delete, select, update

from core.errors import NotFoundError, StoreError
from core.store import TomatoStore, check_fields, index_field
from models.tables.tomato import Tomato
from models.tomato import TomatoRecord

logger = logging.getLogger(__name__)


class SqlTomatoStore(TomatoStore):
    """
    Store backed by the ``tomato`` table. Each primitive runs in its own
    session and transaction, which gives the per record atomicity the
    service relies on.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = Session(self.engine, expire_on_commit=False)
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Store failed to %s: %s", action, e)
            raise StoreError(f"Failed to {action}") from e
        finally:
            session.close()

    def get(self, tomato_id: str) -> TomatoRecord | None:
        with self._session("get tomato") as session:
            tomato = session.get(Tomato, tomato_id)
            return TomatoRecord.model_validate(tomato) if tomato is not None else None

    def insert(self, fields: Mapping[str, Any]) -> str:
        check_fields(fields)
        with self._session("insert tomato") as session:
            tomato = Tomato(**fields)
            session.add(tomato)
            session.commit()
            logger.debug("inserted %s", tomato.id)
            return tomato.id

    def patch(self, tomato_id: str, fields: Mapping[str, Any]) -> None:
        check_fields(fields)
        # a single UPDATE, so a concurrent delete shows up as zero rows
        statement = update(Tomato).where(Tomato.id == tomato_id).values(**fields)
        with self._session("patch tomato") as session:
            result = session.exec(statement)
            if result.rowcount == 0:
                session.rollback()
                raise NotFoundError(tomato_id)

            session.commit()
            logger.debug("patched %s with %s", tomato_id, sorted(fields))

    def delete(self, tomato_id: str) -> bool:
        statement = delete(Tomato).where(Tomato.id == tomato_id)
        with self._session("delete tomato") as session:
            result = session.exec(statement)
            session.commit()

        if result.rowcount == 0:
            return False
        logger.debug("deleted %s", tomato_id)
        return True

    def scan(self, where: Mapping[str, Any] | None = None) -> list[TomatoRecord]:
        where = dict(where or {})
        check_fields(where)

        statement = select(Tomato)
        for key, value in where.items():
            statement = statement.where(getattr(Tomato, key) == value)
        statement = statement.order_by(Tomato.created_at, Tomato.id)

        with self._session("scan tomatoes") as session:
            return [TomatoRecord.model_validate(tomato) for tomato in session.exec(statement).all()]

    def scan_index(self, index: str, value: Any) -> list[TomatoRecord]:
        # every declared index is a column index on the table, so an equality
        # filter on that column is served by it
        field = index_field(index)
        return self.scan({field: value})

    def close(self) -> None:
        self.engine.dispose()
