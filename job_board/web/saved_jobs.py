"""Saved job routes for job seekers."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from job_board.auth.session import SessionIdentity
from job_board.services.saved_jobs import list_saved_jobs, save_job, unsave_job

from .dependencies import current_session, get_db, parse_id

router = APIRouter()


@router.get("/api/saved-jobs")
def saved_jobs_index(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return list_saved_jobs(db, session)


@router.post("/api/jobs/{job_id}/save")
def save(
    job_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    saved = save_job(db, parse_id(job_id, "Job"), session)
    return JSONResponse({"success": True, "id": str(saved.id)}, status_code=201)


@router.delete("/api/jobs/{job_id}/save")
def unsave(
    job_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    unsave_job(db, parse_id(job_id, "Job"), session)
    return {"success": True}
