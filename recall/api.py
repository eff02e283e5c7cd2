"""
FastAPI app entry point aggregating per-domain routers under recall/routes.
Run with `uvicorn recall.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .db import init_db
from .errors import RecallError

logger = logging.getLogger(__name__)

app = FastAPI(title="recall-api", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "tauri://localhost",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    init_db()


@app.exception_handler(RecallError)
def handle_recall_error(request: Request, exc: RecallError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "error": exc.code},
    )


@app.exception_handler(RequestValidationError)
def handle_bad_request(request: Request, exc: RequestValidationError):
    errs = exc.errors()
    first = errs[0] if errs else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = f"{field}: {first.get('msg')}" if field else "invalid request"
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": msg, "error": "VALIDATION_ERROR"},
    )


# Include routers (split by entity)
from .routes import base as base_routes
from .routes import auth as auth_routes
from .routes import areas as areas_routes
from .routes import projects as projects_routes
from .routes import resources as resources_routes
from .routes import events as events_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(auth_routes.router)
app.include_router(areas_routes.router)
app.include_router(projects_routes.router)
app.include_router(resources_routes.router)
app.include_router(events_routes.router)
app.include_router(logs_routes.router)
