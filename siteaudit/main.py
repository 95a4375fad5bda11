"""
Site Audit: FastAPI backend

Endpoints:
  GET     /api/analyze?url=...   Audit one page (returns the AuditReport JSON)
  OPTIONS /api/analyze           Cross-origin preflight
  GET     /health                Health check
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .engine import InvalidTarget, parse_target, run_audit

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

AUDIT_FAILED = "Kunne ikke analysere URL. Sjekk at nettsiden er tilgjengelig."

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Site audit API starting (fetch timeout %ss)", config.FETCH_TIMEOUT)
    yield


app = FastAPI(
    title="Site Audit",
    version="1.0.0",
    lifespan=lifespan,
)


class Finding(BaseModel):
    severity: Literal["success", "info", "warning", "critical"]
    message: str


class CategoryReport(BaseModel):
    score: int
    status: Literal["green", "yellow", "orange", "red"]
    details: list[Finding]
    benchmark: int
    metrics: dict[str, Any]


class AuditResponse(BaseModel):
    url: str
    analyzedAt: str
    responseTime: int
    totalScore: int
    benchmarks: dict[str, int]
    categories: dict[str, CategoryReport]


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def error_response(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.get("/health")
async def health():
    return {"status": "ok", "engine": "siteaudit"}


@app.options("/api/analyze")
async def analyze_preflight():
    return Response(status_code=200)


@app.get("/api/analyze", response_model=AuditResponse)
async def analyze(url: str | None = None):
    try:
        parse_target(url)
    except InvalidTarget as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Analyzing %s", url)
    try:
        results = await run_audit(url)
    except Exception as e:
        logger.error("Analyze error for %s: %s", url, e)
        raise HTTPException(status_code=500, detail=AUDIT_FAILED)

    return results


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("siteaudit.main:app", host=config.HOST, port=config.PORT, reload=True)
