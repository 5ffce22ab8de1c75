"""HTTP surface over the app's HandleRegistry.

Every route forwards primitives (handle, floats, paths) to the registry, so the
registry's policy applies unchanged: unknown handles and failed reads/writes
degrade to no-ops and zero values instead of errors. Statistics that
overflow to inf or nan are returned as null.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from statscalc.api.schemas import CalculatorState, HandleList, HandleOut, PathIn, StatsOut, ValuesIn
from statscalc.observability.metrics import LIVE_HANDLES
from statscalc.services.registry import HandleRegistry

router = APIRouter(prefix="/calculators", tags=["calculators"])


def get_registry(request: Request) -> HandleRegistry:
    # One registry per app instance, created in create_app()
    return request.app.state.registry


def resolve_data_path(request: Request, raw: str) -> Path:
    """
    Resolve a client-supplied path against the configured data directory.
    Raises HTTP 400 if the result lies outside it.
    """
    base: Path = request.app.state.settings.data_dir.resolve()
    target = (base / raw).resolve()
    if target != base and base not in target.parents:
        raise HTTPException(status_code=400, detail=f"path {raw!r} is outside the data directory")
    return target


def _record_live_handles(request: Request, registry: HandleRegistry) -> None:
    LIVE_HANDLES.labels(request.app.state.metrics_label).set(len(registry))


def _state(registry: HandleRegistry, handle: int) -> CalculatorState:
    return CalculatorState(handle=handle, live=handle in registry, count=registry.get_count(handle))


@router.get("", response_model=HandleList)
async def list_calculators(registry: HandleRegistry = Depends(get_registry)):
    return HandleList(handles=registry.handles())


@router.post("", response_model=HandleOut, status_code=HTTP_201_CREATED)
async def create_calculator(request: Request, registry: HandleRegistry = Depends(get_registry)):
    handle = registry.create()
    _record_live_handles(request, registry)
    return HandleOut(handle=handle)


@router.delete("/{handle}", status_code=HTTP_204_NO_CONTENT)
async def destroy_calculator(handle: int, request: Request, registry: HandleRegistry = Depends(get_registry)):
    """Destroy a calculator. Unknown handles are accepted silently."""
    registry.destroy(handle)
    _record_live_handles(request, registry)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.post("/{handle}/values", response_model=CalculatorState)
async def append_values(handle: int, body: ValuesIn, registry: HandleRegistry = Depends(get_registry)):
    for value in body.values:
        registry.append_value(handle, value)
    return _state(registry, handle)


@router.post("/{handle}/read-file", response_model=CalculatorState)
async def read_file(handle: int, body: PathIn, request: Request, registry: HandleRegistry = Depends(get_registry)):
    """
    Append the numbers found in a file under the data directory.
    A missing or malformed file leaves the calculator unchanged; compare
    'count' before and after to detect it.
    """
    registry.read_file(handle, resolve_data_path(request, body.path))
    return _state(registry, handle)


@router.post("/{handle}/write-stats", response_model=CalculatorState)
async def write_stats(handle: int, body: PathIn, request: Request, registry: HandleRegistry = Depends(get_registry)):
    registry.write_stats(handle, resolve_data_path(request, body.path))
    return _state(registry, handle)


@router.get("/{handle}/stats", response_model=StatsOut)
async def get_stats(handle: int, registry: HandleRegistry = Depends(get_registry)):
    return StatsOut(
        handle=handle,
        count=registry.get_count(handle),
        sum=registry.get_sum(handle),
        mean=registry.get_mean(handle),
        stddev=registry.get_std_dev(handle),
    )
