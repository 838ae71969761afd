"""
Storage for stock history rows.

``RecordStore`` is the interface the HTTP layer talks to. ``SqlRecordStore``
implements it on SQLAlchemy Core for both the embedded SQLite file and a
networked PostgreSQL database; only the upsert statement differs by dialect.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from stocks_api.config import Settings
from stocks_api.db.base import Base
from stocks_api.db.session import build_engine
from stocks_api.models.stocks_history import StockHistory, VALUE_FIELDS

logger = logging.getLogger(__name__)

CONFLICT_KEYS = ("ticker", "date")


class StorageError(Exception):
    """Raised when the underlying database rejects an operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(message)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        orig = getattr(exc, "orig", None)
        message = str(orig) if orig is not None else str(exc)
        logger.error("Storage operation '%s' failed: %s", operation, message)
        raise StorageError(operation, message) from exc
    except (OverflowError, ValueError) as exc:
        # Raised by the driver while binding parameters, not wrapped by SQLAlchemy.
        logger.error("Storage operation '%s' failed: %s", operation, exc)
        raise StorageError(operation, str(exc)) from exc


class RecordStore(ABC):
    @abstractmethod
    def ensure_schema(self) -> None:
        ...

    @abstractmethod
    def upsert_batch(self, records: Sequence[Dict[str, Any]]) -> int:
        ...

    @abstractmethod
    def query_by_ticker(self, ticker: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def delete_by_ticker(self, ticker: str) -> int:
        ...

    @abstractmethod
    def delete_all(self) -> int:
        ...

    @abstractmethod
    def list_tickers(self) -> List[str]:
        ...

    def close(self) -> None:
        pass


def _conflict_key(row: Dict[str, Any]) -> Tuple[Any, Any]:
    ticker = row.get("ticker")
    if not isinstance(ticker, (str, type(None))):
        ticker = repr(ticker)
    return ticker, row.get("date")


def collapse_duplicates(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the last row for each (ticker, date), in first-seen order."""
    latest: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
    for row in records:
        latest[_conflict_key(row)] = row
    return list(latest.values())


class SqlRecordStore(RecordStore):
    def __init__(self, engine: Engine):
        self.engine = engine
        self.table = StockHistory.__table__

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def _insert(self):
        if self.dialect == "postgresql":
            return pg_insert(self.table)
        if self.dialect == "sqlite":
            return sqlite_insert(self.table)
        raise StorageError("upsert", f"Unsupported database backend: {self.dialect}")

    def ensure_schema(self) -> None:
        with storage_errors("ensure_schema"):
            Base.metadata.create_all(self.engine, tables=[self.table])
        logger.info("Schema ready for table %s", self.table.name)

    def upsert_batch(self, records: Sequence[Dict[str, Any]]) -> int:
        """
        Insert or replace every record in a single transaction.

        Any failing row rolls back the whole batch. Returns the number of
        distinct (ticker, date) rows written.
        """
        rows = collapse_duplicates(records)
        if not rows:
            return 0

        stmt = self._insert()
        stmt = stmt.on_conflict_do_update(
            index_elements=list(CONFLICT_KEYS),
            set_={field: stmt.excluded[field] for field in VALUE_FIELDS},
        )

        with storage_errors("upsert_batch"):
            with self.engine.begin() as conn:
                conn.execute(stmt, rows)

        if len(rows) != len(records):
            logger.info("Collapsed %d duplicate rows in batch", len(records) - len(rows))
        return len(rows)

    def query_by_ticker(self, ticker: str) -> List[Dict[str, Any]]:
        stmt = (
            select(self.table)
            .where(self.table.c.ticker == ticker)
            .order_by(self.table.c.date.asc())
        )
        with storage_errors("query_by_ticker"):
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()

        out = []
        for row in rows:
            d = dict(row)
            d["date"] = int(d["date"])
            out.append(d)
        return out

    def delete_by_ticker(self, ticker: str) -> int:
        stmt = delete(self.table).where(self.table.c.ticker == ticker)
        with storage_errors("delete_by_ticker"):
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount

    def delete_all(self) -> int:
        with storage_errors("delete_all"):
            with self.engine.begin() as conn:
                return conn.execute(delete(self.table)).rowcount

    def list_tickers(self) -> List[str]:
        stmt = select(self.table.c.ticker).distinct().order_by(self.table.c.ticker)
        with storage_errors("list_tickers"):
            with self.engine.connect() as conn:
                return list(conn.execute(stmt).scalars().all())

    def close(self) -> None:
        self.engine.dispose()


def create_store(settings: Settings) -> RecordStore:
    engine = build_engine(settings)
    logger.info(
        "Using %s backend at %s",
        settings.backend,
        engine.url.render_as_string(hide_password=True),
    )
    return SqlRecordStore(engine)
