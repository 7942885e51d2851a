"""
YAM Dashboard API Server - REST API for billing, retroplanning and production.
"""
# ruff: noqa: S104
# S104: Development server binding (guarded by __name__ check)

import logging
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.billing_router import router as billing_router
from api.production_router import router as production_router
from api.response_models import HealthResponse
from api.retroplanning_router import router as retroplanning_router
from api.validation_router import router as validation_router
from lib import config
from lib import db as db_module
from lib.errors import AppError
from lib.observability import (
    CorrelationIdMiddleware,
    HealthChecker,
    HealthStatus,
    RequestLoggingMiddleware,
    configure_from_settings,
)
from lib.state_store import get_store

logger = logging.getLogger(__name__)

# FastAPI app initialization
app = FastAPI(
    title="YAM Dashboard API",
    description="Agency dashboard: project billing, retroplanning and production tracking",
    version="1.0.0",
)

# CORS middleware - configurable via CORS_ORIGINS env var
# Dev default: allow all origins; Production: set CORS_ORIGINS to comma-separated list
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last = outermost: the request ID is bound before the request is logged
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(billing_router, prefix="/api")
app.include_router(retroplanning_router, prefix="/api")
app.include_router(production_router, prefix="/api")
app.include_router(validation_router, prefix="/api")


# ==== Error handling ====


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Une erreur est survenue.",
            "code": "INTERNAL_ERROR",
            "detail": type(exc).__name__,
        },
    )


# ==== DB Startup & Migrations ====
@app.on_event("startup")
async def run_db_migrations_on_startup():
    """Converge the schema and log DB info at startup."""
    store = get_store()
    logger.info("=== YAM Dashboard startup ===")
    logger.info("DB path: %s", store.db_path)

    migration_result = db_module.run_startup_migrations(store.db_path)
    if migration_result.get("columns_added"):
        logger.info("Migrations added columns: %s", migration_result["columns_added"])

    if not config.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not set: retroplanning generation will fail")


# ==== Health ====


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Component health; 503 when a component is unhealthy."""
    report = HealthChecker(db_path=get_store().db_path).run_all()
    status_code = 503 if report.status == HealthStatus.UNHEALTHY else 200
    return JSONResponse(status_code=status_code, content=report.to_dict())


@app.get("/api/db-info")
async def db_info():
    """Resolved DB path, size and schema version."""
    store = get_store()
    info = db_module.get_db_info(store.db_path)
    info["cache"] = store.cache.get_stats().to_dict()
    info["checked_at"] = datetime.now().isoformat()
    return info


def main():
    """Run the server."""
    configure_from_settings()
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
