"""Application routes — apply, applicant views, employer status updates."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from job_board.auth.access import require_role, require_session
from job_board.auth.session import SessionIdentity
from job_board.models import UserRole
from job_board.services.applications import (
    apply_for_job,
    get_application,
    list_employer_applications,
    list_my_applications,
    update_application_status,
)

from .dependencies import current_session, get_db, parse_id, read_payload

router = APIRouter()


@router.post("/api/jobs/{job_id}/apply")
async def apply(
    job_id: str,
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    require_role(session, UserRole.JOBSEEKER)
    payload = await read_payload(request)
    application = apply_for_job(
        db,
        parse_id(job_id, "Job"),
        session,
        cover_letter=payload.get("coverLetter", ""),
        resume_url=payload.get("resumeUrl"),
    )
    return JSONResponse({"success": True, "application": application.to_dict()}, status_code=201)


@router.get("/api/applications")
def applications_index(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    session = require_session(session)
    # Employers see applications to their jobs, job seekers their own
    if session.role == UserRole.EMPLOYER.value:
        return list_employer_applications(db, session)
    return list_my_applications(db, session)


@router.get("/api/applications/{application_id}")
def application_detail(
    application_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return get_application(db, parse_id(application_id, "Application"), session)


@router.post("/api/applications/{application_id}/status")
async def change_status(
    application_id: str,
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    require_role(session, UserRole.EMPLOYER)
    payload = await read_payload(request)
    application = update_application_status(
        db, parse_id(application_id, "Application"), payload.get("status", ""), session
    )
    return {"success": True, "application": application.to_dict()}
