from __future__ import annotations

from ..db import get_conn
from ..domain.ids import IdGenerator
from ..domain.models import Area
from ..domain.validation import optional_text, required_text
from ..errors import NotFoundOrForbidden
from ..logs import LogContext
from ..repository import area_repo
from ..repository.retry import insert_with_retry
from .ownership import AREA, require_owner
from .utils import now_ts


def _summary(row) -> dict:
    d = dict(row)
    d.pop("user_id", None)
    return d


def create_area(user_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None, id_gen: IdGenerator | None = None) -> dict:
    now = now_ts() if now is None else now
    area = Area(
        user_id=user_id,
        name=required_text(data.get("name"), "name"),
        image_url=optional_text(data.get("image_url")),
        created_at=now,
        updated_at=now,
    )
    with get_conn() as conn:
        area_id = insert_with_retry(conn, area, area_repo.insert, id_gen)
        after = _summary(area_repo.get_one(conn, area_id, user_id))
    if log:
        log.set_entity("AREA", area_id)
        log.set_after(after)
    return after


def list_areas(user_id: str) -> list[dict]:
    with get_conn() as conn:
        return [_summary(r) for r in area_repo.list_for_user(conn, user_id)]


def get_area(user_id: str, area_id: str) -> dict:
    with get_conn() as conn:
        row = area_repo.get_one(conn, area_id, user_id)
    if row is None:
        raise NotFoundOrForbidden("Area not found")
    return _summary(row)


def update_area(user_id: str, area_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None) -> dict:
    now = now_ts() if now is None else now
    with get_conn() as conn:
        require_owner(conn, AREA, area_id, user_id)
        name = required_text(data.get("name"), "name")
        image_url = optional_text(data.get("image_url"))
        before = _summary(area_repo.get_one(conn, area_id, user_id))
        area_repo.update(conn, area_id, user_id, name, image_url, now)
        after = _summary(area_repo.get_one(conn, area_id, user_id))
    if log:
        log.set_entity("AREA", area_id)
        log.set_before(before)
        log.set_after(after)
    return after


def delete_area(user_id: str, area_id: str, log: LogContext | None = None) -> None:
    """Delete an area; its projects (and their resources) go with it."""
    with get_conn() as conn:
        require_owner(conn, AREA, area_id, user_id)
        before = _summary(area_repo.get_one(conn, area_id, user_id))
        area_repo.delete(conn, area_id, user_id)
    if log:
        log.set_entity("AREA", area_id)
        log.set_before(before)
