from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..errors import RecallError
from ..logs import LogContext
from ..services import area_svc
from .deps import current_user

router = APIRouter()


class AreaBody(BaseModel):
    name: str
    image_url: str | None = None


@router.post("/api/areas", status_code=201)
def api_area_create(body: AreaBody, user_id: str = Depends(current_user)):
    log = LogContext("CREATE_AREA", user_id)
    log.set_payload(body.model_dump())
    try:
        area = area_svc.create_area(user_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "area": area}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.get("/api/areas")
def api_area_list(user_id: str = Depends(current_user)):
    return {"success": True, "areas": area_svc.list_areas(user_id)}


@router.get("/api/areas/{area_id}")
def api_area_get(area_id: str, user_id: str = Depends(current_user)):
    return {"success": True, "area": area_svc.get_area(user_id, area_id)}


@router.put("/api/areas/{area_id}")
def api_area_update(area_id: str, body: AreaBody, user_id: str = Depends(current_user)):
    log = LogContext("UPDATE_AREA", user_id)
    log.set_payload(body.model_dump())
    try:
        area = area_svc.update_area(user_id, area_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "area": area}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.delete("/api/areas/{area_id}")
def api_area_delete(area_id: str, user_id: str = Depends(current_user)):
    log = LogContext("DELETE_AREA", user_id)
    try:
        area_svc.delete_area(user_id, area_id, log)
        log.write("OK")
        return {"success": True, "id": area_id, "message": "Area deleted successfully"}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise
