"""
WordBank Backend — Health Check Route
=======================================

What:  GET /health for monitoring and platform probes.
How:   Reports whether the GitHub repository is configured. No remote call is
       made, so probes never consume API rate limit.

Status levels:
    - healthy:   REPO_OWNER, REPO_NAME and GITHUB_TOKEN are set
    - degraded:  one of them is missing; write requests will fail with
                 config_missing until it is set
"""

import logging
import time

from fastapi import APIRouter

from wordbank import __version__
from wordbank.config import settings
from wordbank.schemas.word import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    missing = settings.missing_remote_settings()
    if missing:
        logger.warning("Health check: GitHub not configured, missing %s", ", ".join(missing))

    return HealthResponse(
        status="degraded" if missing else "healthy",
        version=__version__,
        github="not_configured" if missing else "configured",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
