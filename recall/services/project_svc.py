from __future__ import annotations

from ..db import get_conn
from ..domain.ids import IdGenerator
from ..domain.models import Project
from ..domain.validation import check_priority, check_status, optional_text, required_text
from ..errors import NotFoundOrForbidden
from ..logs import LogContext
from ..repository import project_repo
from ..repository.retry import insert_with_retry
from .ownership import AREA, PROJECT, require_owner
from .utils import now_ts, row_to_dict


def _build(user_id: str, data: dict, now: int) -> Project:
    """Validated Project from request fields; timestamps both set to now."""
    return Project(
        user_id=user_id,
        area_id=data.get("area_id") or "",
        title=required_text(data.get("title"), "title"),
        description=optional_text(data.get("description")),
        status=check_status(data.get("status")),
        priority=check_priority(data.get("priority")),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        created_at=now,
        updated_at=now,
    )


def create_project(user_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None, id_gen: IdGenerator | None = None) -> dict:
    now = now_ts() if now is None else now
    project = _build(user_id, data, now)
    with get_conn() as conn:
        require_owner(conn, AREA, project.area_id, user_id)
        project_id = insert_with_retry(conn, project, project_repo.insert, id_gen)
        after = row_to_dict(project_repo.get_one(conn, project_id, user_id))
    if log:
        log.set_entity("PROJECT", project_id)
        log.set_after(after)
    return after


def list_projects(user_id: str, area_id: str | None = None) -> list[dict]:
    with get_conn() as conn:
        if area_id is not None:
            require_owner(conn, AREA, area_id, user_id)
        return [dict(r) for r in project_repo.list_for_user(conn, user_id, area_id)]


def get_project(user_id: str, project_id: str) -> dict:
    with get_conn() as conn:
        row = project_repo.get_one(conn, project_id, user_id)
    if row is None:
        raise NotFoundOrForbidden("Project not found")
    return dict(row)


def update_project(user_id: str, project_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None) -> dict:
    now = now_ts() if now is None else now
    with get_conn() as conn:
        require_owner(conn, PROJECT, project_id, user_id)
        project = _build(user_id, data, now)
        project.id = project_id
        # moving to another area re-checks that area
        require_owner(conn, AREA, project.area_id, user_id)
        before = row_to_dict(project_repo.get_one(conn, project_id, user_id))
        project_repo.update(conn, project)
        after = row_to_dict(project_repo.get_one(conn, project_id, user_id))
    if log:
        log.set_entity("PROJECT", project_id)
        log.set_before(before)
        log.set_after(after)
    return after


def move_project(user_id: str, project_id: str, new_status: str, log: LogContext | None = None, *, now: int | None = None) -> dict:
    """Change only the board column (status) of a project."""
    now = now_ts() if now is None else now
    with get_conn() as conn:
        require_owner(conn, PROJECT, project_id, user_id)
        check_status(new_status)
        before = row_to_dict(project_repo.get_one(conn, project_id, user_id))
        project_repo.update_status(conn, project_id, user_id, new_status, now)
        after = row_to_dict(project_repo.get_one(conn, project_id, user_id))
    if log:
        log.set_entity("PROJECT", project_id)
        log.set_before(before)
        log.set_after(after)
    return after


def delete_project(user_id: str, project_id: str, log: LogContext | None = None) -> None:
    with get_conn() as conn:
        require_owner(conn, PROJECT, project_id, user_id)
        before = row_to_dict(project_repo.get_one(conn, project_id, user_id))
        project_repo.delete(conn, project_id, user_id)
    if log:
        log.set_entity("PROJECT", project_id)
        log.set_before(before)
