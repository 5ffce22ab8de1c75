from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

router = APIRouter()

@router.get("/health")
async def health() -> dict[str, str]:
    """
    Liveness probe.
    Returns 200 OK if the process is alive.
    """
    # Calculators live in memory only; nothing external to check.
    return {"status": "ok"}

@router.get("/ready")
async def ready(request: Request):
    """
    Readiness probe.
    Returns 200 OK once the app has a registry and finished startup.
    Returns 503 if not ready.
    """
    state = request.app.state
    if getattr(state, "registry", None) is not None and getattr(state, "ready", False):
        return {"status": "ready"}
    return JSONResponse({"status": "not ready"}, status_code=HTTP_503_SERVICE_UNAVAILABLE)
