"""FastAPI application entrypoint.

Wires the routers for the Grampanchayat website backend together with
CORS, request logging, error handling and (for the local storage
backend) the static route that serves uploaded files.

Route groups, all under /api:
- auth, users: login, accounts and task permissions
- representatives, documents, certificates, images, hero-images,
  infrastructure, historical, grampanchayat, announcements: admin CRUD
- website: public read-only aggregates
"""

import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session

from . import services
from .config import settings
from .database import check_connection, create_db_and_tables, engine
from .errors import setup_exception_handlers
from .routers import (
    announcements,
    auth,
    certificates,
    documents,
    grampanchayat,
    hero_images,
    historical,
    images,
    infrastructure,
    representatives,
    users,
    website,
)
from .storage import LocalStorage, get_storage

app = FastAPI(title="Grampanchayat Website API")
logger = logging.getLogger("grampanchayat.api")
if not logger.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_exception_handlers(app)

for module in (
    auth,
    users,
    representatives,
    documents,
    certificates,
    images,
    hero_images,
    infrastructure,
    historical,
    grampanchayat,
    announcements,
    website,
):
    app.include_router(module.router)

storage = get_storage()
if isinstance(storage, LocalStorage):
    Path(storage.root).mkdir(parents=True, exist_ok=True)
    app.mount(f"{storage.base_url}/{storage.bucket}", StaticFiles(directory=storage.root), name="files")

create_db_and_tables()
check_connection()
with Session(engine) as _session:
    services.ensure_default_admin(_session)


def _request_log(request: Request, req_id: str, started: float, **fields) -> str:
    payload = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    payload.update(fields)
    return json.dumps(payload, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed %s", _request_log(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith("/api"):
        logger.info("request_done %s", _request_log(request, req_id, started, status_code=response.status_code))
    return response


@app.get("/")
def index():
    return {
        "message": "Grampanchayat Website API",
        "status": "running",
        "endpoints": sorted(path for path in app.openapi()["paths"] if path.startswith("/api")),
    }


@app.get("/api/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat(), "storage": settings.STORAGE_BACKEND}
