# planner/main.py

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from planner.api.v1.calendar import router as calendar_router
from planner.api.v1.health import router as health_router
from planner.api.v1.recurrence import router as recurrence_router
from planner.config import settings
from planner.core.errors import PlannerError

logging.basicConfig(level=settings.LOG_LEVEL.upper())
log = logging.getLogger(__name__)

description = """
Monthly calendar views over one-off and recurring events, per-label time
statistics and recurrence rule previews.
"""
tags_metadata = [
    {"name": "Calendar", "description": "Active dates of a month and label statistics."},
    {"name": "Recurrence", "description": "Parsing, summarizing and expanding recurrence rules."},
    {"name": "Health", "description": "Database and broker checks."},
]

app = FastAPI(
    title="Planner Calendar API",
    description=description,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    log.info("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error_code": exc.error_code},
    )


app.include_router(calendar_router)
app.include_router(recurrence_router)
app.include_router(health_router)

log.info("FastAPI application configured. Environment: %s", settings.ENVIRONMENT)
