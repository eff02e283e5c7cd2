from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.event_query import EVENT_COLUMNS, EventFilter, build_event_query
from ..domain.models import Event


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            project_id TEXT REFERENCES projects(id) ON DELETE SET NULL,
            title TEXT NOT NULL,
            description TEXT,
            start_time INTEGER NOT NULL,
            end_time INTEGER,
            location TEXT,
            all_day INTEGER NOT NULL DEFAULT 0,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_events_user_start ON events(user_id, start_time)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_events_project ON events(project_id)")


def insert(conn: Connection, event: Event) -> None:
    insert_row(conn, "events", event)


def get_owner(conn: Connection, event_id: str) -> str | None:
    row = conn.execute("SELECT user_id FROM events WHERE id=?", (event_id,)).fetchone()
    return None if row is None else row["user_id"]


def get_one(conn: Connection, event_id: str, user_id: str):
    return conn.execute(
        f"SELECT {EVENT_COLUMNS} FROM events e LEFT JOIN projects p ON p.id = e.project_id "
        "WHERE e.id=? AND e.user_id=?",
        (event_id, user_id),
    ).fetchone()


def query(conn: Connection, user_id: str, flt: EventFilter | None = None):
    sql, params = build_event_query(user_id, flt)
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, event: Event) -> None:
    conn.execute(
        "UPDATE events SET project_id=?, title=?, description=?, start_time=?, end_time=?, location=?, "
        "all_day=?, updated_at=? WHERE id=? AND user_id=?",
        (
            event.project_id, event.title, event.description, event.start_time, event.end_time,
            event.location, int(event.all_day), event.updated_at, event.id, event.user_id,
        ),
    )


def delete(conn: Connection, event_id: str, user_id: str) -> int:
    return conn.execute("DELETE FROM events WHERE id=? AND user_id=?", (event_id, user_id)).rowcount
