"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
"""
from __future__ import annotations

from sqlite3 import Connection
from typing import Any

from ..domain.models import to_row


def insert_row(conn: Connection, table: str, entity: Any) -> None:
    row = to_row(entity)
    cols = ", ".join(row)
    marks = ", ".join(f":{c}" for c in row)
    conn.execute(f"INSERT INTO {table}({cols}) VALUES({marks})", row)


def ensure_all_schemas(conn: Connection) -> None:
    # parents before children
    from . import user_repo, session_repo, area_repo, project_repo, resource_repo, event_repo

    for repo in (user_repo, session_repo, area_repo, project_repo, resource_repo, event_repo):
        repo.ensure_schema(conn)
