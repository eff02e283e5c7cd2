from __future__ import annotations

import base64
import binascii

from ..db import get_conn
from ..domain.ids import IdGenerator
from ..domain.models import Resource
from ..domain.validation import check_file_size, optional_text, required_text
from ..errors import InvalidFileData, NotFoundOrForbidden, ValidationError
from ..logs import LogContext
from ..repository import resource_repo
from ..repository.retry import insert_with_retry
from .ownership import PROJECT, RESOURCE, require_owner
from .utils import now_ts, row_to_dict


def _decode(file_data: str) -> bytes:
    try:
        return base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFileData() from e


def _file_fields(data: dict) -> tuple[str | None, str | None, int | None]:
    """
    (file_data, file_type, file_size) after the size cap. When a payload
    is present its decoded length is checked and fills in a missing size.
    """
    file_data = data.get("file_data") or None
    file_size = data.get("file_size")
    check_file_size(file_size)
    if file_data is not None:
        n = len(_decode(file_data))
        check_file_size(n)
        if file_size is None:
            file_size = n
    return file_data, optional_text(data.get("file_type")), file_size


def _build(user_id: str, project_id: str, data: dict, now: int) -> Resource:
    file_data, file_type, file_size = _file_fields(data)
    return Resource(
        user_id=user_id,
        project_id=project_id,
        name=required_text(data.get("name"), "name"),
        content=data.get("content"),
        file_data=file_data,
        file_type=file_type,
        file_size=file_size,
        created_at=now,
        updated_at=now,
    )


def create_resource(user_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None, id_gen: IdGenerator | None = None) -> dict:
    now = now_ts() if now is None else now
    resource = _build(user_id, data.get("project_id") or "", data, now)
    with get_conn() as conn:
        require_owner(conn, PROJECT, resource.project_id, user_id)
        resource_id = insert_with_retry(conn, resource, resource_repo.insert, id_gen)
        after = row_to_dict(resource_repo.get_one(conn, resource_id, user_id))
    if log:
        log.set_entity("RESOURCE", resource_id)
        log.set_after(after)
    return after


def list_resources(user_id: str, project_id: str | None = None) -> list[dict]:
    with get_conn() as conn:
        if project_id is not None:
            require_owner(conn, PROJECT, project_id, user_id)
        return [dict(r) for r in resource_repo.list_for_user(conn, user_id, project_id)]


def get_resource(user_id: str, resource_id: str) -> dict:
    with get_conn() as conn:
        row = resource_repo.get_one(conn, resource_id, user_id)
    if row is None:
        raise NotFoundOrForbidden("Resource not found")
    return dict(row)


def update_resource(user_id: str, resource_id: str, data: dict, log: LogContext | None = None, *, now: int | None = None) -> dict:
    """Replace a resource's fields; ``project_id`` is optional and moves it when given."""
    now = now_ts() if now is None else now
    with get_conn() as conn:
        require_owner(conn, RESOURCE, resource_id, user_id)
        before = row_to_dict(resource_repo.get_one(conn, resource_id, user_id))
        resource = _build(user_id, data.get("project_id") or before["project_id"], data, now)
        resource.id = resource_id
        require_owner(conn, PROJECT, resource.project_id, user_id)
        resource_repo.update(conn, resource)
        after = row_to_dict(resource_repo.get_one(conn, resource_id, user_id))
    if log:
        log.set_entity("RESOURCE", resource_id)
        log.set_before(before)
        log.set_after(after)
    return after


def delete_resource(user_id: str, resource_id: str, log: LogContext | None = None) -> None:
    with get_conn() as conn:
        require_owner(conn, RESOURCE, resource_id, user_id)
        resource_repo.delete(conn, resource_id, user_id)
    if log:
        log.set_entity("RESOURCE", resource_id)


def read_resource_file(user_id: str, resource_id: str) -> tuple[str, str | None, bytes]:
    """(name, file_type, decoded bytes) of an owned resource's file payload."""
    with get_conn() as conn:
        row = resource_repo.get_file(conn, resource_id, user_id)
    if row is None:
        raise NotFoundOrForbidden("Resource not found")
    if not row["file_data"]:
        raise ValidationError("No file data available")
    return row["name"], row["file_type"], _decode(row["file_data"])


def suggested_extension(file_type: str | None) -> str | None:
    """'application/pdf' -> 'pdf'; None when nothing usable."""
    if not file_type:
        return None
    ext = file_type.split("/")[-1].strip()
    return ext or None
