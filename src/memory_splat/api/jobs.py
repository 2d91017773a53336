"""Job tracker endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from memory_splat.api.models import JobOut

if TYPE_CHECKING:
    from memory_splat.containers import AppContainer

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("", dependencies=[Depends(require_admin)])
async def list_jobs(request: Request) -> dict[str, list[JobOut]]:
    """Return jobs that are still tracked."""
    container: AppContainer = request.app.state.container
    tracker = container.job_tracker
    jobs = [tracker.get(request_id) for request_id in tracker.list_active()]
    return {"jobs": [JobOut.from_job(job) for job in jobs if job is not None]}


@router.post("/reap", dependencies=[Depends(require_admin)])
async def reap_jobs(
    request: Request,
    max_age_ms: int | None = Query(default=None, ge=0),
) -> dict[str, list[str]]:
    """Remove stale jobs from the tracker."""
    container: AppContainer = request.app.state.container
    return {"reaped": container.orchestrator.reap_stale(max_age_ms)}
