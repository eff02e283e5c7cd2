from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.models import Area

AREA_COLUMNS = "id, user_id, name, image_url, created_at, updated_at"


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS areas (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            image_url TEXT,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_areas_user ON areas(user_id, created_at)")


def insert(conn: Connection, area: Area) -> None:
    insert_row(conn, "areas", area)


def get_owner(conn: Connection, area_id: str) -> str | None:
    row = conn.execute("SELECT user_id FROM areas WHERE id=?", (area_id,)).fetchone()
    return None if row is None else row["user_id"]


def get_one(conn: Connection, area_id: str, user_id: str):
    return conn.execute(
        f"SELECT {AREA_COLUMNS} FROM areas WHERE id=? AND user_id=?", (area_id, user_id)
    ).fetchone()


def list_for_user(conn: Connection, user_id: str):
    return conn.execute(
        f"SELECT {AREA_COLUMNS} FROM areas WHERE user_id=? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    ).fetchall()


def update(conn: Connection, area_id: str, user_id: str, name: str, image_url: str | None, now: int) -> None:
    conn.execute(
        "UPDATE areas SET name=?, image_url=?, updated_at=? WHERE id=? AND user_id=?",
        (name, image_url, now, area_id, user_id),
    )


def delete(conn: Connection, area_id: str, user_id: str) -> int:
    return conn.execute("DELETE FROM areas WHERE id=? AND user_id=?", (area_id, user_id)).rowcount
