"""
Health check endpoints for liveness and readiness probes.
"""
from typing import Dict, Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel

from dm_archive.core.database import check_db_connection
from dm_archive.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    checks: Optional[Dict[str, str]] = None


@router.get("/live", response_model=HealthResponse, summary="Liveness probe")
async def liveness() -> HealthResponse:
    """Always returns 200 while the process is up."""
    return HealthResponse(status="ok")


@router.get("/ready", response_model=HealthResponse, summary="Readiness probe")
async def readiness(response: Response) -> HealthResponse:
    """200 when the archive store answers, 503 otherwise."""
    if check_db_connection():
        return HealthResponse(status="ok", checks={"database": "ok"})
    
    logger.warning("Readiness check failed: database not reachable")
    response.status_code = 503
    return HealthResponse(status="not ready", checks={"database": "failed"})
