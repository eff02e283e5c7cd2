from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from ..errors import RecallError
from ..logs import LogContext
from ..services import resource_svc
from .deps import current_user

router = APIRouter()


def _attachment(name: str) -> str:
    # latin-1 header: ascii fallback plus the RFC 5987 utf-8 form
    fallback = "".join(c if c not in '"\\' else "_" for c in name if " " <= c <= "~").strip() or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


class ResourceCreate(BaseModel):
    project_id: str
    name: str
    content: Optional[str] = None
    file_data: Optional[str] = None  # base64
    file_type: Optional[str] = None  # MIME type
    file_size: Optional[int] = None  # bytes


class ResourceUpdate(BaseModel):
    project_id: Optional[str] = None
    name: str
    content: Optional[str] = None
    file_data: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None


@router.post("/api/resources", status_code=201)
def api_resource_create(body: ResourceCreate, user_id: str = Depends(current_user)):
    log = LogContext("CREATE_RESOURCE", user_id)
    log.set_payload(body.model_dump())
    try:
        resource = resource_svc.create_resource(user_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "resource": resource}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.get("/api/resources")
def api_resource_list(project_id: Optional[str] = Query(None), user_id: str = Depends(current_user)):
    return {"success": True, "resources": resource_svc.list_resources(user_id, project_id)}


@router.get("/api/resources/{resource_id}")
def api_resource_get(resource_id: str, user_id: str = Depends(current_user)):
    return {"success": True, "resource": resource_svc.get_resource(user_id, resource_id)}


@router.get("/api/resources/{resource_id}/file")
def api_resource_file(resource_id: str, user_id: str = Depends(current_user)):
    name, file_type, data = resource_svc.read_resource_file(user_id, resource_id)
    return Response(
        content=data,
        media_type=file_type or "application/octet-stream",
        headers={"Content-Disposition": _attachment(name)},
    )


@router.put("/api/resources/{resource_id}")
def api_resource_update(resource_id: str, body: ResourceUpdate, user_id: str = Depends(current_user)):
    log = LogContext("UPDATE_RESOURCE", user_id)
    log.set_payload(body.model_dump())
    try:
        resource = resource_svc.update_resource(user_id, resource_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "resource": resource}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.delete("/api/resources/{resource_id}")
def api_resource_delete(resource_id: str, user_id: str = Depends(current_user)):
    log = LogContext("DELETE_RESOURCE", user_id)
    try:
        resource_svc.delete_resource(user_id, resource_id, log)
        log.write("OK")
        return {"success": True, "id": resource_id}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise
