"""Job routes — public listing and detail, employer posting and editing."""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from job_board.auth.access import require_role, require_session
from job_board.auth.session import SessionIdentity
from job_board.models import UserRole
from job_board.services.jobs import (
    JobFilters,
    delete_job,
    get_job,
    job_payload,
    list_jobs,
    parse_job_fields,
    post_job,
    update_job,
)

from .dependencies import current_session, get_db, parse_id, read_payload

router = APIRouter()


@router.get("/api/jobs")
def jobs_index(
    db: Session = Depends(get_db),
    query: str = "",
    location: str = "",
    type: str = "",
    limit: int = Query(20, ge=1),
    page: int = Query(1, ge=1),
    featured: bool = False,
    latest: bool = False,
):
    filters = JobFilters(
        query=query,
        location=location,
        type=type,
        limit=limit,
        page=page,
        featured=featured,
        latest=latest,
    )
    return [job_payload(job) for job in list_jobs(db, filters)]


@router.post("/api/jobs/create")
async def create_job(
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    require_role(session, UserRole.EMPLOYER)
    fields = parse_job_fields(await read_payload(request))
    job_id = post_job(db, session, fields)
    return JSONResponse({"success": True, "jobId": str(job_id)}, status_code=201)


@router.post("/employers/post-job")
async def post_job_form(
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    fields = parse_job_fields(await read_payload(request))
    post_job(db, session, fields)
    return RedirectResponse("/dashboard/employer", status_code=303)


@router.get("/api/jobs/{job_id}")
def job_detail(job_id: str, db: Session = Depends(get_db)):
    job = get_job(db, parse_id(job_id, "Job"), record_view=True)
    return job_payload(job)


@router.put("/api/jobs/{job_id}")
async def edit_job(
    job_id: str,
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    require_session(session)
    fields = parse_job_fields(await read_payload(request), include_status=True)
    job = update_job(db, parse_id(job_id, "Job"), session, fields)
    return job_payload(job)


@router.delete("/api/jobs/{job_id}")
def remove_job(
    job_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    delete_job(db, parse_id(job_id, "Job"), session)
    return {"success": True}
