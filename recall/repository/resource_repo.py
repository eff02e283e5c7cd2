from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.models import Resource

RESOURCE_SELECT = (
    "SELECT r.id, r.project_id, p.title AS project_name, r.name, r.content, r.file_data, "
    "r.file_type, r.file_size, r.created_at, r.updated_at "
    "FROM resources r LEFT JOIN projects p ON p.id = r.project_id"
)


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS resources (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            content TEXT,
            file_data TEXT,
            file_type TEXT,
            file_size INTEGER,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_resources_user ON resources(user_id, created_at)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_resources_project ON resources(project_id)")


def insert(conn: Connection, resource: Resource) -> None:
    insert_row(conn, "resources", resource)


def get_owner(conn: Connection, resource_id: str) -> str | None:
    row = conn.execute("SELECT user_id FROM resources WHERE id=?", (resource_id,)).fetchone()
    return None if row is None else row["user_id"]


def get_one(conn: Connection, resource_id: str, user_id: str):
    return conn.execute(
        f"{RESOURCE_SELECT} WHERE r.id=? AND r.user_id=?", (resource_id, user_id)
    ).fetchone()


def list_for_user(conn: Connection, user_id: str, project_id: str | None = None):
    sql = f"{RESOURCE_SELECT} WHERE r.user_id=?"
    params: list[object] = [user_id]
    if project_id is not None:
        sql += " AND r.project_id=?"
        params.append(project_id)
    sql += " ORDER BY r.created_at DESC, r.rowid DESC"
    return conn.execute(sql, params).fetchall()


def get_file(conn: Connection, resource_id: str, user_id: str):
    return conn.execute(
        "SELECT name, file_data, file_type FROM resources WHERE id=? AND user_id=?",
        (resource_id, user_id),
    ).fetchone()


def update(conn: Connection, resource: Resource) -> None:
    conn.execute(
        "UPDATE resources SET project_id=?, name=?, content=?, file_data=?, file_type=?, file_size=?, "
        "updated_at=? WHERE id=? AND user_id=?",
        (
            resource.project_id, resource.name, resource.content, resource.file_data, resource.file_type,
            resource.file_size, resource.updated_at, resource.id, resource.user_id,
        ),
    )


def delete(conn: Connection, resource_id: str, user_id: str) -> int:
    return conn.execute("DELETE FROM resources WHERE id=? AND user_id=?", (resource_id, user_id)).rowcount
