"""SQLite history of balancing requests."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping

from chembalance.models import BalanceResult

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS session (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  created_utc TEXT,
  notes TEXT
);
CREATE TABLE IF NOT EXISTS balance (
  id INTEGER PRIMARY KEY,
  session_id INTEGER REFERENCES session(id),
  equation TEXT NOT NULL,
  method TEXT,
  result JSON,
  created_utc TEXT
);
"""


def connect(history_file: str | Path) -> sqlite3.Connection:
    """Open (and create) a history database."""
    path = Path(history_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(path)
    connection.execute("PRAGMA foreign_keys = ON;")
    return connection


def ensure_schema(connection: sqlite3.Connection) -> None:
    connection.executescript(SCHEMA_SQL)
    connection.commit()


def create_session(
    connection: sqlite3.Connection,
    name: str,
    notes: str | None = None,
    created_utc: str | None = None,
) -> int:
    """Create a session entry and return its ID."""
    created_utc = created_utc or _utc_now()
    cursor = connection.execute(
        "INSERT INTO session (name, created_utc, notes) VALUES (?, ?, ?)",
        (name, created_utc, notes),
    )
    connection.commit()
    return int(cursor.lastrowid)


def find_session(connection: sqlite3.Connection, name: str) -> int | None:
    row = connection.execute("SELECT id FROM session WHERE name = ? ORDER BY id LIMIT 1", (name,)).fetchone()
    return None if row is None else int(row[0])


def session_for(connection: sqlite3.Connection, name: str) -> int:
    """Return the ID of the session called ``name``, creating it on first use."""
    session_id = find_session(connection, name)
    if session_id is None:
        session_id = create_session(connection, name)
    return session_id


def save_balance(
    connection: sqlite3.Connection,
    session_id: int | None,
    equation: str,
    result: BalanceResult,
    created_utc: str | None = None,
) -> int:
    """Persist one balancing request and return its ID."""
    created_utc = created_utc or _utc_now()
    cursor = connection.execute(
        "INSERT INTO balance (session_id, equation, method, result, created_utc) VALUES (?, ?, ?, ?, ?)",
        (session_id, equation, result.method, _json_dumps(result.to_dict()), created_utc),
    )
    connection.commit()
    return int(cursor.lastrowid)


def list_balances(
    connection: sqlite3.Connection,
    limit: int | None = None,
    session: str | None = None,
) -> List[Dict[str, Any]]:
    """Most recent balancing requests first, optionally only those of one named session."""
    query = (
        "SELECT b.id, b.session_id, s.name, b.equation, b.method, b.result, b.created_utc "
        "FROM balance b LEFT JOIN session s ON s.id = b.session_id"
    )
    params: list = []
    if session is not None:
        query += " WHERE s.name = ?"
        params.append(session)
    query += " ORDER BY b.id DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    rows = connection.execute(query, params).fetchall()
    return [
        {
            "id": row[0],
            "session_id": row[1],
            "session": row[2],
            "equation": row[3],
            "method": row[4],
            "result": json.loads(row[5]) if row[5] else None,
            "created_utc": row[6],
        }
        for row in rows
    ]


def _json_dumps(payload: Mapping[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
