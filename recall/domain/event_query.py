from __future__ import annotations

from dataclasses import dataclass
from typing import Any

EVENT_COLUMNS = (
    "e.id, e.project_id, p.title AS project_name, e.title, e.description, "
    "e.start_time, e.end_time, e.location, e.all_day, e.created_at, e.updated_at"
)


@dataclass(frozen=True)
class EventFilter:
    """Optional bounds on an event listing; any subset may be set."""

    start_time: int | None = None
    end_time: int | None = None
    project_id: str | None = None


def build_event_query(user_id: str, flt: EventFilter | None = None) -> tuple[str, dict[str, Any]]:
    """
    Compose the owner-scoped event listing as one predicate.

    Each filter contributes its own clause independently, so every
    combination of start/end/project is the AND of the clauses present.
    Rows come back by start_time ascending, insertion order on ties.
    """
    flt = flt or EventFilter()
    where = ["e.user_id = :user_id"]
    params: dict[str, Any] = {"user_id": user_id}
    if flt.start_time is not None:
        where.append("e.start_time >= :start_time")
        params["start_time"] = flt.start_time
    if flt.end_time is not None:
        where.append("e.start_time <= :end_time")
        params["end_time"] = flt.end_time
    if flt.project_id is not None:
        where.append("e.project_id = :project_id")
        params["project_id"] = flt.project_id
    sql = (
        f"SELECT {EVENT_COLUMNS} FROM events e "
        "LEFT JOIN projects p ON p.id = e.project_id "
        f"WHERE {' AND '.join(where)} "
        "ORDER BY e.start_time ASC, e.rowid ASC"
    )
    return sql, params
