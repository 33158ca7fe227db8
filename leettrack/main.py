"""FastAPI entry point. Routers, middlewares, health and the sync job lifecycle."""

from __future__ import annotations

import logging
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from leettrack.Core.config import get_settings
from leettrack.features.dashboard.endpoints import router as dashboard_router
from leettrack.features.imports.endpoints import router as imports_router
from leettrack.features.students.endpoints import router as students_router
from leettrack.features.sync.endpoints import router as sync_router
from leettrack.jobs.sync_scheduler import SyncScheduler

_settings = get_settings()
_START_TIME = datetime.now(timezone.utc)

app = FastAPI(title=_settings.app_name)


# ------------------------
# CORS Setup
# ------------------------
def _split_csv(raw: str):
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_split_csv(_settings.allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start request_id=%s method=%s path=%s", req_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    logger.info("request.end request_id=%s path=%s status=%s", req_id, request.url.path, response.status_code)
    return response


@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    t0 = time.perf_counter()
    resp = await call_next(request)
    dt = int((time.perf_counter() - t0) * 1000)
    logging.getLogger("timing").info("%s %s %dms %s", request.method, request.url.path, dt, resp.status_code)
    return resp


# ------------------------
# Routers
# ------------------------
app.include_router(students_router)
app.include_router(sync_router)
app.include_router(dashboard_router)
app.include_router(imports_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {"name": _settings.app_name, "status": "ok", "docs": "/docs", "health": "/healthz"}


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz() -> Dict[str, Any]:
    from leettrack.DB.session import engine

    now = datetime.now(timezone.utc)
    db_status = "unknown"
    db_latency_ms = None
    try:
        start = time.perf_counter()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
        db_status = "ok"
    except SQLAlchemyError as e:
        db_status = f"error:{type(e).__name__}"

    scheduler = getattr(app.state, "sync_scheduler", None)
    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round((now - _START_TIME).total_seconds(), 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "database": (
                {"status": db_status, "latency_ms": db_latency_ms} if db_status == "ok" else {"status": db_status}
            ),
            "sync_scheduler": "running" if scheduler is not None and scheduler.running else "stopped",
        },
    }


# ------------------------
# Background Tasks
# ------------------------
@app.on_event("startup")
async def _start_background_tasks():
    from leettrack.DB.session import init_db

    logger = logging.getLogger("startup")
    init_db()
    if not _settings.auto_sync_on_startup:
        logger.info("Auto sync on startup disabled")
        return
    scheduler = SyncScheduler()
    scheduler.start()
    app.state.sync_scheduler = scheduler


@app.on_event("shutdown")
async def _stop_background_tasks():
    scheduler = getattr(app.state, "sync_scheduler", None)
    if scheduler is not None:
        await scheduler.stop()
