import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from sqlgate.api.deps import RegistryDep
from sqlgate.core.health import liveness_check, readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/liveness/", response_model=None)
async def liveness() -> bool | JSONResponse:
    """
    Liveness probe: is the process alive and responsive?

    Lightweight: no database I/O.  If this fails the container should be
    restarted by the orchestrator.
    """
    ok, failures = liveness_check()
    if not ok:
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Process unhealthy", "data": failures},
        )
    return True


@router.get("/health-check/", response_model=None)
async def health_check(registry: RegistryDep) -> bool | JSONResponse:
    """
    Readiness probe: can the service handle traffic?

    Runs SELECT 1 on every served database (waiting for its lock).
    Returns 200 with true if all answer; 503 with the failing names otherwise.
    """
    ok, failures = await asyncio.to_thread(readiness_check, registry)
    if not ok:
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "message": "Service Unavailable",
                "data": failures,
            },
        )
    return True
