"""Ownership checks applied at every entity boundary.

``require_owner`` answers one question: does ``entity_id`` of ``kind``
exist and belong to ``user_id``? Missing and foreign rows give the same
NotFoundOrForbidden so callers cannot probe for other accounts' ids.
"""
from __future__ import annotations

from sqlite3 import Connection
from typing import Callable

from ..errors import NotFoundOrForbidden
from ..repository import area_repo, event_repo, project_repo, resource_repo

AREA = "Area"
PROJECT = "Project"
RESOURCE = "Resource"
EVENT = "Event"

_OWNER_LOOKUP: dict[str, Callable[[Connection, str], str | None]] = {
    AREA: area_repo.get_owner,
    PROJECT: project_repo.get_owner,
    RESOURCE: resource_repo.get_owner,
    EVENT: event_repo.get_owner,
}


def is_owner(conn: Connection, kind: str, entity_id: str | None, user_id: str) -> bool:
    if not entity_id:
        return False
    owner = _OWNER_LOOKUP[kind](conn, entity_id)
    return owner is not None and owner == user_id


def require_owner(conn: Connection, kind: str, entity_id: str | None, user_id: str) -> None:
    if not is_owner(conn, kind, entity_id, user_id):
        raise NotFoundOrForbidden(f"{kind} not found")
