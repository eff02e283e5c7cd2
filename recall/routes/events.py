from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..errors import RecallError
from ..logs import LogContext
from ..services import event_svc
from .deps import current_user

router = APIRouter()


class EventBody(BaseModel):
    project_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    start_time: int  # unix seconds
    end_time: Optional[int] = None
    location: Optional[str] = None
    all_day: bool = False


@router.post("/api/events", status_code=201)
def api_event_create(body: EventBody, user_id: str = Depends(current_user)):
    log = LogContext("CREATE_EVENT", user_id)
    log.set_payload(body.model_dump())
    try:
        event = event_svc.create_event(user_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "event": event}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.get("/api/events")
def api_event_list(
    start_time: Optional[int] = Query(None),
    end_time: Optional[int] = Query(None),
    project_id: Optional[str] = Query(None),
    user_id: str = Depends(current_user),
):
    events = event_svc.list_events(user_id, start_time, end_time, project_id)
    return {"success": True, "events": events}


@router.get("/api/events/{event_id}")
def api_event_get(event_id: str, user_id: str = Depends(current_user)):
    return {"success": True, "event": event_svc.get_event(user_id, event_id)}


@router.put("/api/events/{event_id}")
def api_event_update(event_id: str, body: EventBody, user_id: str = Depends(current_user)):
    log = LogContext("UPDATE_EVENT", user_id)
    log.set_payload(body.model_dump())
    try:
        event = event_svc.update_event(user_id, event_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "event": event}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.delete("/api/events/{event_id}")
def api_event_delete(event_id: str, user_id: str = Depends(current_user)):
    log = LogContext("DELETE_EVENT", user_id)
    try:
        event_svc.delete_event(user_id, event_id, log)
        log.write("OK")
        return {"success": True, "id": event_id}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise
