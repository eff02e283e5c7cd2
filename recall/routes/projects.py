from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..errors import RecallError
from ..logs import LogContext
from ..services import project_svc
from .deps import current_user

router = APIRouter()


class ProjectBody(BaseModel):
    area_id: str
    title: str
    description: Optional[str] = None
    status: str  # Inbox/Planned/Progress/Done
    priority: Optional[str] = None  # High/Medium/Low
    start_date: Optional[int] = None
    end_date: Optional[int] = None


class MoveBody(BaseModel):
    status: str


@router.post("/api/projects", status_code=201)
def api_project_create(body: ProjectBody, user_id: str = Depends(current_user)):
    log = LogContext("CREATE_PROJECT", user_id)
    log.set_payload(body.model_dump())
    try:
        project = project_svc.create_project(user_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "project": project}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.get("/api/projects")
def api_project_list(area_id: Optional[str] = Query(None), user_id: str = Depends(current_user)):
    return {"success": True, "projects": project_svc.list_projects(user_id, area_id)}


@router.get("/api/projects/{project_id}")
def api_project_get(project_id: str, user_id: str = Depends(current_user)):
    return {"success": True, "project": project_svc.get_project(user_id, project_id)}


@router.put("/api/projects/{project_id}")
def api_project_update(project_id: str, body: ProjectBody, user_id: str = Depends(current_user)):
    log = LogContext("UPDATE_PROJECT", user_id)
    log.set_payload(body.model_dump())
    try:
        project = project_svc.update_project(user_id, project_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True, "project": project}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.post("/api/projects/{project_id}/move")
def api_project_move(project_id: str, body: MoveBody, user_id: str = Depends(current_user)):
    log = LogContext("MOVE_PROJECT", user_id)
    log.set_payload(body.model_dump())
    try:
        project = project_svc.move_project(user_id, project_id, body.status, log)
        log.write("OK")
        return {"success": True, "project": project}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.delete("/api/projects/{project_id}")
def api_project_delete(project_id: str, user_id: str = Depends(current_user)):
    log = LogContext("DELETE_PROJECT", user_id)
    try:
        project_svc.delete_project(user_id, project_id, log)
        log.write("OK")
        return {"success": True, "id": project_id, "message": "Project deleted successfully"}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise
