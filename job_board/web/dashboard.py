"""Dashboard routes — per-role aggregates and the employer company profile."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from job_board.auth.session import SessionIdentity
from job_board.services.companies import get_company_profile, update_company_profile
from job_board.services.dashboards import admin_dashboard, employer_dashboard, jobseeker_dashboard

from .dependencies import current_session, get_db, read_payload

router = APIRouter()


@router.get("/api/employer/dashboard")
@router.get("/dashboard/employer")
def employer_index(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return employer_dashboard(db, session)


@router.get("/api/jobseeker/dashboard")
@router.get("/dashboard/jobseeker")
def jobseeker_index(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return jobseeker_dashboard(db, session)


@router.get("/api/admin/dashboard")
@router.get("/admin")
def admin_index(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return admin_dashboard(db, session)


@router.get("/dashboard/employer/profile")
def company_profile(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return get_company_profile(db, session).to_dict()


@router.post("/dashboard/employer/profile")
async def save_company_profile(
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    payload = await read_payload(request)
    update_company_profile(db, session, {
        "name": payload.get("companyName") or payload.get("name"),
        "website": payload.get("website"),
        "location": payload.get("location"),
        "industry": payload.get("industry"),
        "size": payload.get("size"),
        "description": payload.get("description"),
        "logo_url": payload.get("logoUrl"),
    })
    return RedirectResponse("/dashboard/employer/profile", status_code=303)
