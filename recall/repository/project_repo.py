from __future__ import annotations

from sqlite3 import Connection

from . import insert_row
from ..domain.models import Project

# area_name is read through the join for display only
PROJECT_SELECT = (
    "SELECT p.id, p.area_id, a.name AS area_name, p.title, p.description, p.status, p.priority, "
    "p.start_date, p.end_date, p.created_at, p.updated_at "
    "FROM projects p LEFT JOIN areas a ON a.id = p.area_id"
)


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            area_id TEXT NOT NULL REFERENCES areas(id) ON DELETE CASCADE,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL,
            priority TEXT,
            start_date INTEGER,
            end_date INTEGER,
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_projects_user ON projects(user_id, created_at)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_projects_area ON projects(area_id)")


def insert(conn: Connection, project: Project) -> None:
    insert_row(conn, "projects", project)


def get_owner(conn: Connection, project_id: str) -> str | None:
    row = conn.execute("SELECT user_id FROM projects WHERE id=?", (project_id,)).fetchone()
    return None if row is None else row["user_id"]


def get_one(conn: Connection, project_id: str, user_id: str):
    return conn.execute(
        f"{PROJECT_SELECT} WHERE p.id=? AND p.user_id=?", (project_id, user_id)
    ).fetchone()


def list_for_user(conn: Connection, user_id: str, area_id: str | None = None):
    sql = f"{PROJECT_SELECT} WHERE p.user_id=?"
    params: list[object] = [user_id]
    if area_id is not None:
        sql += " AND p.area_id=?"
        params.append(area_id)
    sql += " ORDER BY p.created_at DESC, p.rowid DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, project: Project) -> None:
    conn.execute(
        "UPDATE projects SET area_id=?, title=?, description=?, status=?, priority=?, "
        "start_date=?, end_date=?, updated_at=? WHERE id=? AND user_id=?",
        (
            project.area_id, project.title, project.description, project.status, project.priority,
            project.start_date, project.end_date, project.updated_at, project.id, project.user_id,
        ),
    )


def update_status(conn: Connection, project_id: str, user_id: str, status: str, now: int) -> None:
    conn.execute(
        "UPDATE projects SET status=?, updated_at=? WHERE id=? AND user_id=?",
        (status, now, project_id, user_id),
    )


def delete(conn: Connection, project_id: str, user_id: str) -> int:
    return conn.execute("DELETE FROM projects WHERE id=? AND user_id=?", (project_id, user_id)).rowcount
