# Overview: Transaction helpers for service-layer writes.

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateKeyError, InternalStoreError
from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; begin_write() takes the
    database write lock there instead.
    """
    return query.with_for_update()


def begin_write() -> None:
    """
    Start the current transaction as a writer.

    On SQLite this issues BEGIN IMMEDIATE so a second writer blocks (or fails
    with "database is locked") before it can read stale state. Other databases
    rely on lock_for_update().
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


def _is_plate_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "plate" in message and ("unique" in message or "duplicate" in message)


@contextmanager
def atomic(*, plate_field: str = "plate"):
    """
    Run a block as one unit of work: commit on success, roll back on any error.

    plate_field names the offending field when the plate unique constraint
    fires (e.g. "trade_in_vehicle.plate" during a sale).

    SQLAlchemy failures are translated into domain errors so callers never
    see driver exceptions. Nothing is retried; the caller re-submits.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if _is_plate_conflict(exc):
            raise DuplicateKeyError("Plate already registered", field=plate_field) from exc
        raise InternalStoreError("Database integrity error", details={"reason": str(exc.orig)}) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise InternalStoreError("Database error", details={"reason": str(exc)}) from exc
    except Exception:
        db.session.rollback()
        raise
