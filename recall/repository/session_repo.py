from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.models import Session


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            token TEXT NOT NULL UNIQUE,
            expires_at INTEGER NOT NULL,
            created_at INTEGER NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id)")


def insert(conn: Connection, session: Session) -> None:
    insert_row(conn, "sessions", session)


def get_live_user_id(conn: Connection, token: str, now: int) -> str | None:
    row = conn.execute(
        "SELECT user_id FROM sessions WHERE token=? AND expires_at > ?", (token, now)
    ).fetchone()
    return None if row is None else row["user_id"]


def get_live_user(conn: Connection, token: str, now: int):
    return conn.execute(
        "SELECT u.id, u.email, u.name FROM sessions s "
        "JOIN users u ON u.id = s.user_id "
        "WHERE s.token=? AND s.expires_at > ?",
        (token, now),
    ).fetchone()


def delete_by_token(conn: Connection, token: str) -> int:
    return conn.execute("DELETE FROM sessions WHERE token=?", (token,)).rowcount


def count_for_user(conn: Connection, user_id: str) -> int:
    return int(conn.execute("SELECT COUNT(1) AS c FROM sessions WHERE user_id=?", (user_id,)).fetchone()["c"])
