from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..common.deadline import Deadline, current_deadline
from ..core.exceptions import DeadlineExceeded, DuplicateRecordError, PersistenceError
from .connection import DatabaseConnection

# MAX_EXECUTION_TIME exceeded
_ER_QUERY_TIMEOUT = 3024


def _remaining_ms(deadline: Deadline) -> int:
    return max(1, int(deadline.remaining() * 1000))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (connection, cursor); commit on success, rollback on error.

    mysql-connector errors leave this block as PersistenceError so callers can
    tell "database unavailable" apart from a business decision.

    Under a bound request deadline the connect timeout and the server-side
    MAX_EXECUTION_TIME of every SELECT are capped by the time remaining.
    """

    deadline = current_deadline()
    if deadline is not None:
        deadline.check("database call")

    try:
        conn = conn_factory.connect(timeout=deadline.remaining() if deadline is not None else None)
    except mysql.connector.Error as e:
        raise PersistenceError("Could not connect to the database") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            if deadline is not None:
                cur.execute("SET SESSION MAX_EXECUTION_TIME=%s", (_remaining_ms(deadline),))
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(str(e.msg)) from e
        raise PersistenceError("Database integrity error") from e
    except mysql.connector.Error as e:
        conn.rollback()
        if e.errno == _ER_QUERY_TIMEOUT:
            raise DeadlineExceeded("Deadline exceeded during database call") from e
        raise PersistenceError("Database error") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def json_column(value: Any, default: Any = None) -> Any:
    """Decode a MySQL JSON column.

    mysql-connector returns JSON as str or bytes depending on the
    implementation (C extension vs pure Python).
    """

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return default
        return json.loads(value)
    return value


def optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)
