from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.models import User


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )


def insert(conn: Connection, user: User) -> None:
    insert_row(conn, "users", user)


def get_by_email(conn: Connection, email: str):
    return conn.execute(
        "SELECT id, email, name, password_hash FROM users WHERE email=?", (email,)
    ).fetchone()


def get_by_id(conn: Connection, user_id: str):
    return conn.execute(
        "SELECT id, email, name, password_hash FROM users WHERE id=?", (user_id,)
    ).fetchone()


def email_taken_by_other(conn: Connection, email: str, user_id: str) -> bool:
    row = conn.execute("SELECT 1 FROM users WHERE email=? AND id != ?", (email, user_id)).fetchone()
    return row is not None


def update_profile(conn: Connection, user_id: str, name: str, email: str, now: int) -> None:
    conn.execute(
        "UPDATE users SET name=?, email=?, updated_at=? WHERE id=?",
        (name, email, now, user_id),
    )


def update_password(conn: Connection, user_id: str, password_hash: str, now: int) -> None:
    conn.execute(
        "UPDATE users SET password_hash=?, updated_at=? WHERE id=?",
        (password_hash, now, user_id),
    )
