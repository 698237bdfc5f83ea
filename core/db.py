from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

import streamlit as st

from core.errors import DecodeError
from core.schema import SCHEMA_SQL
from core.utils import iso_now


def _connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return _connect(db_path)


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


# -------------------------
# Key-value documents
# -------------------------

@dataclass(frozen=True)
class LoadResult:
    value: Any = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, fallback: Any) -> Any:
        # Absent, malformed and JSON null all resolve to the caller's fallback.
        if self.error is not None or self.value is None:
            return fallback
        return self.value


def load(conn: sqlite3.Connection, key: str) -> LoadResult:
    rows = q(conn, "SELECT value FROM documents WHERE key=?", (key,))
    if not rows:
        return LoadResult()
    try:
        return LoadResult(value=json.loads(rows[0]["value"]))
    except (TypeError, ValueError) as e:
        return LoadResult(error=DecodeError(key, str(e)))


def save(conn: sqlite3.Connection, key: str, value: Any) -> None:
    x(
        conn,
        """
        INSERT INTO documents (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
        """,
        (key, json.dumps(value, ensure_ascii=False), iso_now()),
    )


def delete_all(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM documents;")
    conn.commit()


def document_counts(conn: sqlite3.Connection) -> list[dict]:
    rows = q(conn, "SELECT key, value, updated_at FROM documents ORDER BY key")
    out: list[dict] = []
    for r in rows:
        try:
            value = json.loads(r["value"])
        except (TypeError, ValueError):
            value = None
        n = len(value) if isinstance(value, (list, dict)) else 0
        out.append({"document": str(r["key"]), "entries": n, "updated_at": str(r["updated_at"])})
    return out
