"""Accounts and sessions.

Connection-level primitives (``create_account``, ``authenticate``,
``issue_session``, ``resolve_session``, ``revoke_session``) take an open
connection; the command-level functions below them check out their own.
"""
from __future__ import annotations

import sqlite3
from sqlite3 import Connection

from ..db import get_conn, get_settings
from ..domain.ids import IdGenerator, TokenGenerator, default_token_generator
from ..domain.models import Session, User
from ..domain.passwords import hash_password, verify_password
from ..domain.validation import check_email, required_text
from ..errors import (
    DuplicateEmail,
    EmptyField,
    IncorrectPassword,
    InvalidCredentials,
    InvalidOrExpiredToken,
)
from ..logs import LogContext
from ..repository import session_repo, user_repo
from ..repository.retry import insert_with_retry
from .utils import now_ts

SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


def _hash(password: str) -> str:
    return hash_password(password, rounds=get_settings()["bcrypt_rounds"])


def create_account(
    conn: Connection,
    email: str,
    name: str,
    password: str,
    *,
    now: int,
    id_gen: IdGenerator | None = None,
) -> User:
    # exact, case-sensitive match against what is stored
    if user_repo.get_by_email(conn, email) is not None:
        raise DuplicateEmail()
    user = User(email=email, name=name, password_hash=_hash(password), created_at=now, updated_at=now)
    try:
        insert_with_retry(conn, user, user_repo.insert, id_gen)
    except sqlite3.IntegrityError as e:
        if "users.email" in str(e):
            raise DuplicateEmail() from e
        raise
    return user


def authenticate(conn: Connection, email: str, password: str) -> sqlite3.Row:
    row = user_repo.get_by_email(conn, email)
    if row is None or not verify_password(password, row["password_hash"]):
        raise InvalidCredentials()
    return row


def issue_session(
    conn: Connection,
    user_id: str,
    *,
    now: int,
    id_gen: IdGenerator | None = None,
    token_gen: TokenGenerator | None = None,
) -> str:
    token = (token_gen or default_token_generator()).generate()
    session = Session(user_id=user_id, token=token, expires_at=now + SESSION_TTL_SECONDS, created_at=now)
    insert_with_retry(conn, session, session_repo.insert, id_gen)
    return token


def resolve_session(conn: Connection, token: str | None, now: int) -> str:
    user_id = session_repo.get_live_user_id(conn, token, now) if token else None
    if user_id is None:
        raise InvalidOrExpiredToken()
    return user_id


def revoke_session(conn: Connection, token: str) -> None:
    session_repo.delete_by_token(conn, token)


# ===== commands =====

def signup(
    email: str,
    name: str,
    password: str,
    log: LogContext | None = None,
    *,
    now: int | None = None,
    id_gen: IdGenerator | None = None,
    token_gen: TokenGenerator | None = None,
) -> dict:
    now = now_ts() if now is None else now
    name = required_text(name, "name")
    if not password:
        raise EmptyField("password")
    with get_conn() as conn:
        user = create_account(conn, email, name, password, now=now, id_gen=id_gen)
        token = issue_session(conn, user.id, now=now, id_gen=id_gen, token_gen=token_gen)
    if log:
        log.set_user(user.id)
        log.set_entity("USER", user.id)
        log.set_after(user.summary())
    return {"token": token, "user": user.summary()}


def signin(
    email: str,
    password: str,
    log: LogContext | None = None,
    *,
    now: int | None = None,
    token_gen: TokenGenerator | None = None,
) -> dict:
    now = now_ts() if now is None else now
    with get_conn() as conn:
        row = authenticate(conn, email, password)
        token = issue_session(conn, row["id"], now=now, token_gen=token_gen)
    if log:
        log.set_user(row["id"])
        log.set_entity("USER", row["id"])
    return {"token": token, "user": {"id": row["id"], "email": row["email"], "name": row["name"]}}


def resolve_token(token: str | None, now: int | None = None) -> str:
    """User id behind a live session token; every non-auth command starts here."""
    with get_conn() as conn:
        return resolve_session(conn, token, now_ts() if now is None else now)


def validate_token(token: str | None, now: int | None = None) -> dict | None:
    if not token:
        return None
    with get_conn() as conn:
        row = session_repo.get_live_user(conn, token, now_ts() if now is None else now)
    return None if row is None else dict(row)


def update_user(user_id: str, name: str, email: str, log: LogContext | None = None, *, now: int | None = None) -> dict:
    now = now_ts() if now is None else now
    name = required_text(name, "name")
    check_email(email)
    with get_conn() as conn:
        before = user_repo.get_by_id(conn, user_id)
        if user_repo.email_taken_by_other(conn, email, user_id):
            raise DuplicateEmail("Email is already taken by another user")
        user_repo.update_profile(conn, user_id, name, email, now)
    after = {"id": user_id, "email": email, "name": name}
    if log:
        log.set_entity("USER", user_id)
        if before is not None:
            log.set_before({"id": before["id"], "email": before["email"], "name": before["name"]})
        log.set_after(after)
    return after


def change_password(
    user_id: str,
    current_password: str,
    new_password: str,
    log: LogContext | None = None,
    *,
    now: int | None = None,
) -> None:
    now = now_ts() if now is None else now
    if not new_password:
        raise EmptyField("new_password")
    with get_conn() as conn:
        row = user_repo.get_by_id(conn, user_id)
        if row is None:
            raise InvalidOrExpiredToken()
        if not verify_password(current_password, row["password_hash"]):
            raise IncorrectPassword()
        user_repo.update_password(conn, user_id, _hash(new_password), now)
    if log:
        log.set_entity("USER", user_id)


def sign_out(token: str) -> str:
    """Drop the session; unknown tokens are not an error."""
    with get_conn() as conn:
        revoke_session(conn, token)
    return token
