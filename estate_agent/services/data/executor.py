"""SQL execution helpers (read queries are guarded, writes commit or roll back)"""
from typing import Any, Dict, List, Optional, Sequence
import re
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from psycopg2.extras import RealDictCursor
from estate_agent.db.connection import get_db_connection, return_db_connection


_FORBIDDEN_PATTERNS = [
    r";",  # multiple statements
    r"--",  # line comments
    r"/\*",  # block comments
    r"\\\\",  # backslash escapes
]

_ALLOWED_FIRST_WORDS = {"select", "with"}

Params = Dict[str, Any] | Sequence[Any] | None


def _assert_safe_select(query: str) -> None:
    normalized = query.strip().lower()
    if not any(normalized.startswith(w) for w in _ALLOWED_FIRST_WORDS):
        raise ValueError("Only read-only queries starting with SELECT/WITH are allowed.")
    for pat in _FORBIDDEN_PATTERNS:
        if re.search(pat, normalized):
            raise ValueError("Query contains a forbidden construct (semicolon/comment/escape).")


@contextmanager
def _db_cursor_with_timeout(statement_timeout_ms: int):
    conn = get_db_connection()
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(f"SET LOCAL statement_timeout = {int(statement_timeout_ms)}")
            yield conn, cur
    finally:
        return_db_connection(conn)


def execute_sql_safe(
    query: str,
    params: Params = None,
    *,
    statement_timeout_ms: int = 5000,
) -> List[Dict[str, Any]]:
    """
    Run a read-only query and return its rows as dicts.
    - SELECT/WITH only
    - semicolons and comments rejected
    - server-side statement_timeout
    """
    if not query:
        raise ValueError("Query is empty.")

    _assert_safe_select(query)

    with _db_cursor_with_timeout(statement_timeout_ms) as (conn, cur):
        try:
            cur.execute(query, params or None)
            rows = [dict(row) for row in cur.fetchall()]
        finally:
            # Close the read transaction so the pooled connection is clean
            conn.rollback()
        return rows


def execute_write(
    query: str,
    params: Params = None,
    *,
    fetch: bool = False,
    statement_timeout_ms: int = 5000,
) -> Optional[List[Dict[str, Any]]]:
    """
    Run an INSERT/UPDATE/DELETE inside its own transaction.

    With fetch=True the RETURNING rows are handed back.
    """
    if not query:
        raise ValueError("Query is empty.")

    with _db_cursor_with_timeout(statement_timeout_ms) as (conn, cur):
        try:
            cur.execute(query, params or None)
            rows = [dict(row) for row in cur.fetchall()] if fetch else None
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        return rows


def to_jsonable(value: Any) -> Any:
    """Make DB values (dates, Decimal) safe for jsonify"""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value
