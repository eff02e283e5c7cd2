from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..errors import RecallError
from ..logs import LogContext
from ..services import identity_svc
from .deps import bearer_token, current_user

router = APIRouter()


class SignupBody(BaseModel):
    email: str
    name: str
    password: str


class SigninBody(BaseModel):
    email: str
    password: str


class UpdateUserBody(BaseModel):
    name: str
    email: str


class ChangePasswordBody(BaseModel):
    current_password: str
    new_password: str


@router.post("/api/auth/signup", status_code=201)
def api_signup(body: SignupBody):
    log = LogContext("SIGNUP")
    log.set_payload(body.model_dump())
    try:
        res = identity_svc.signup(body.email, body.name, body.password, log)
        log.write("OK")
        return {"success": True, **res}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.post("/api/auth/signin")
def api_signin(body: SigninBody):
    log = LogContext("SIGNIN")
    log.set_payload({"email": body.email})
    try:
        res = identity_svc.signin(body.email, body.password, log)
        log.write("OK")
        return {"success": True, **res}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.get("/api/auth/validate")
def api_validate_token(token: str | None = Depends(bearer_token)):
    # null rather than an error: the caller only wants to know
    return identity_svc.validate_token(token)


@router.put("/api/auth/user")
def api_update_user(body: UpdateUserBody, user_id: str = Depends(current_user)):
    log = LogContext("UPDATE_USER", user_id)
    log.set_payload(body.model_dump())
    try:
        user = identity_svc.update_user(user_id, body.name, body.email, log)
        log.write("OK")
        return {"success": True, "user": user}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.post("/api/auth/password")
def api_change_password(body: ChangePasswordBody, user_id: str = Depends(current_user)):
    log = LogContext("CHANGE_PASSWORD", user_id)
    try:
        identity_svc.change_password(user_id, body.current_password, body.new_password, log)
        log.write("OK")
        return {"success": True}
    except RecallError as e:
        log.write("ERROR", str(e))
        raise


@router.delete("/api/auth/session")
def api_delete_session(token: str | None = Depends(bearer_token)):
    if not token:
        return {"success": True, "token": None}
    return {"success": True, "token": identity_svc.sign_out(token)}
