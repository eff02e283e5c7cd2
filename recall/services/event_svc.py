from __future__ import annotations

from ..db import get_conn
from ..domain.event_query import EventFilter
from ..domain.ids import IdGenerator
from ..domain.models import Event
from ..domain.validation import check_time_range, optional_text, required_text
from ..errors import EmptyField, NotFoundOrForbidden
from ..logs import LogContext
from ..repository import event_repo
from ..repository.retry import insert_with_retry
from .ownership import EVENT, PROJECT, require_owner
from .utils import now_ts


def _summary(row) -> dict:
    d = dict(row)
    d["all_day"] = bool(d["all_day"])
    return d


def _build(user_id: str, data: dict, now: int) -> Event:
    start_time = data.get("start_time")
    end_time = data.get("end_time")
    if start_time is None:
        raise EmptyField("start_time")
    check_time_range(start_time, end_time)
    return Event(
        user_id=user_id,
        project_id=data.get("project_id") or None,
        title=required_text(data.get("title"), "title"),
        description=optional_text(data.get("description")),
        start_time=start_time,
        end_time=end_time,
        location=optional_text(data.get("location")),
        all_day=bool(data.get("all_day", False)),
        created_at=now,
        updated_at=now,
    )


def create_event(user_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None, id_gen: IdGenerator | None = None) -> dict:
    now = now_ts() if now is None else now
    event = _build(user_id, data, now)
    with get_conn() as conn:
        if event.project_id is not None:
            require_owner(conn, PROJECT, event.project_id, user_id)
        event_id = insert_with_retry(conn, event, event_repo.insert, id_gen)
        after = _summary(event_repo.get_one(conn, event_id, user_id))
    if log:
        log.set_entity("EVENT", event_id)
        log.set_after(after)
    return after


def list_events(
    user_id: str,
    start_time: int | None = None,
    end_time: int | None = None,
    project_id: str | None = None,
) -> list[dict]:
    flt = EventFilter(start_time=start_time, end_time=end_time, project_id=project_id)
    with get_conn() as conn:
        return [_summary(r) for r in event_repo.query(conn, user_id, flt)]


def get_event(user_id: str, event_id: str) -> dict:
    with get_conn() as conn:
        row = event_repo.get_one(conn, event_id, user_id)
    if row is None:
        raise NotFoundOrForbidden("Event not found")
    return _summary(row)


def update_event(user_id: str, event_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None) -> dict:
    now = now_ts() if now is None else now
    with get_conn() as conn:
        require_owner(conn, EVENT, event_id, user_id)
        event = _build(user_id, data, now)
        event.id = event_id
        if event.project_id is not None:
            require_owner(conn, PROJECT, event.project_id, user_id)
        before = _summary(event_repo.get_one(conn, event_id, user_id))
        event_repo.update(conn, event)
        after = _summary(event_repo.get_one(conn, event_id, user_id))
    if log:
        log.set_entity("EVENT", event_id)
        log.set_before(before)
        log.set_after(after)
    return after


def delete_event(user_id: str, event_id: str, log: LogContext | None = None) -> None:
    with get_conn() as conn:
        require_owner(conn, EVENT, event_id, user_id)
        event_repo.delete(conn, event_id, user_id)
    if log:
        log.set_entity("EVENT", event_id)
