from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import init_db
from .dependencies import dashboard_result_cache
from .routers import auth_router, dashboard_router, receipts_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("clinic_analytics.audit")

app = FastAPI(title="Clinic Analytics & Reporting")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    init_db()
    logger.info("Analytics engine started")


@app.middleware("http")
async def audit_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    principal_id = getattr(request.state, "principal_id", None) or "anonymous"
    audit_logger.info(
        f"principal={principal_id} method={request.method} path={request.url.path} "
        f"status={response.status_code} duration_ms={elapsed_ms:.1f}"
    )
    return response


app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(receipts_router)


@app.get("/health")
def health() -> dict:
    return {
        "status": "healthy",
        "cache": dashboard_result_cache.stats(),
    }
