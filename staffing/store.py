"""
Record store adapter: keyed records per collection, ordered reads, cursor pages,
and single-record create/update/delete. Every failure surfaces as PersistenceError.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .database import HospitalRow, PersonRow, init_db, make_engine, make_session_factory, new_id
from .errors import PersistenceError

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "hospitals": HospitalRow,
    "people": PersonRow,
}


@dataclass(frozen=True)
class Cursor:
    """Position of the last record of a page: its sort value plus its id as tie-breaker."""
    value: Any
    record_id: str


@dataclass
class Page:
    records: List[Dict[str, Any]]
    last: Optional[Cursor] = None


def _row_to_record(row) -> Dict[str, Any]:
    data = {}
    for col in row.__table__.columns:
        v = getattr(row, col.name)
        if v is not None:
            data[col.name] = v
    return data


class RecordStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordStore":
        engine = make_engine(settings.database_url)
        init_db(engine)
        return cls(make_session_factory(engine))

    @staticmethod
    def _table(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise PersistenceError(f"Unknown collection {collection!r}", collection)

    @contextmanager
    def _session(self, collection: str, record_id: str = ""):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"{collection}: {e}", collection, record_id) from e
        finally:
            db.close()

    def _order_column(self, table, field: str):
        if field not in table.__table__.columns:
            raise PersistenceError(f"{table.__tablename__} has no field {field!r}", table.__tablename__)
        return getattr(table, field)

    # ---- reads ----

    def read_all(self, collection: str, order_by: str) -> List[Dict[str, Any]]:
        table = self._table(collection)
        col = self._order_column(table, order_by)
        with self._session(collection) as db:
            rows = db.scalars(select(table).order_by(col, table.id)).all()
            return [_row_to_record(r) for r in rows]

    def read_page(
        self,
        collection: str,
        order_by: str,
        limit: int,
        start_after: Optional[Cursor] = None,
    ) -> Page:
        """Up to `limit` records in ascending `order_by`, strictly after `start_after` when given."""
        table = self._table(collection)
        col = self._order_column(table, order_by)
        stmt = select(table)
        if start_after is not None:
            stmt = stmt.where(or_(
                col > start_after.value,
                and_(col == start_after.value, table.id > start_after.record_id),
            ))
        stmt = stmt.order_by(col, table.id).limit(limit)
        with self._session(collection) as db:
            rows = db.scalars(stmt).all()
            records = [_row_to_record(r) for r in rows]
        last = None
        if records:
            last = Cursor(records[-1].get(order_by), records[-1]["id"])
        return Page(records=records, last=last)

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        table = self._table(collection)
        with self._session(collection, record_id) as db:
            row = db.get(table, record_id)
            return _row_to_record(row) if row else None

    # ---- writes ----

    def _check_fields(self, table, data: Dict[str, Any]) -> None:
        unknown = [k for k in data if k == "id" or k not in table.__table__.columns]
        if unknown:
            raise PersistenceError(f"{table.__tablename__}: cannot write fields {unknown}", table.__tablename__)

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a record and return the id the store issued for it."""
        table = self._table(collection)
        self._check_fields(table, data)
        record_id = new_id()
        with self._session(collection, record_id) as db:
            db.add(table(id=record_id, **data))
            db.commit()
        logger.debug("store add %s/%s", collection, record_id)
        return record_id

    def update(self, collection: str, record_id: str, data: Dict[str, Any]) -> None:
        """Write only the given fields. A None value clears the field."""
        table = self._table(collection)
        self._check_fields(table, data)
        with self._session(collection, record_id) as db:
            row = db.get(table, record_id)
            if row is None:
                raise PersistenceError(f"{collection}/{record_id} does not exist", collection, record_id)
            for k, v in data.items():
                setattr(row, k, v)
            db.commit()
        logger.debug("store update %s/%s %s", collection, record_id, sorted(data))

    def delete(self, collection: str, record_id: str) -> None:
        """Delete by id. Deleting a missing record is not an error."""
        table = self._table(collection)
        with self._session(collection, record_id) as db:
            row = db.get(table, record_id)
            if row is not None:
                db.delete(row)
                db.commit()
        logger.debug("store delete %s/%s", collection, record_id)
