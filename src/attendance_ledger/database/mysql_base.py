from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mysql.connector import errors as mysql_errors

from ..core.constants import MYSQL_DUPLICATE_ENTRY
from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

SECONDS_PER_DAY = 24 * 60 * 60

# Connector failures that mean "store not reachable right now".
TRANSIENT_ERRORS = (mysql_errors.OperationalError, mysql_errors.InterfaceError)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except TRANSIENT_ERRORS as exc:
        raise StoreUnavailableError(str(exc)) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except TRANSIENT_ERRORS as exc:
        _safe_rollback(conn)
        raise StoreUnavailableError(str(exc)) from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except TRANSIENT_ERRORS:
        # Connection already gone; the server discards the transaction.
        pass


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, mysql_errors.IntegrityError) and getattr(exc, "errno", None) == MYSQL_DUPLICATE_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_decimal(value: Any) -> Optional[Decimal]:
    """DECIMAL/SUM columns arrive as Decimal, but some drivers hand back floats or strings."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or "HH:MM[:SS]" depending on the connector build."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % SECONDS_PER_DAY
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)

    if isinstance(value, str):
        hh, sep, rest = value.strip().partition(":")
        if not sep:
            raise ValueError(f"Invalid time string: {value!r}")
        mm, _, ss = rest.partition(":")
        return time(int(hh), int(mm), int(ss or 0))

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")

