"""Saved job operations for job seekers."""

import logging
import uuid

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from job_board.auth.access import require_role
from job_board.auth.session import SessionIdentity
from job_board.errors import AlreadySaved, NotFound
from job_board.models import Job, SavedJob, UserRole, unit_of_work

from .jobs import job_payload

logger = logging.getLogger("job_board.saved_jobs")


def save_job(db: Session, job_id: uuid.UUID, session: SessionIdentity) -> SavedJob:
    """Bookmark a job; saving it twice fails with AlreadySaved."""
    require_role(session, UserRole.JOBSEEKER)

    if db.get(Job, job_id) is None:
        raise NotFound("Job not found")

    saved = SavedJob(job_id=job_id, user_id=session.user_id)
    try:
        with unit_of_work(db):
            db.add(saved)
            db.flush()
    except IntegrityError:
        raise AlreadySaved()

    logger.info("%s saved job %s", session.email, job_id)
    return saved


def unsave_job(db: Session, job_id: uuid.UUID, session: SessionIdentity) -> None:
    """Remove a bookmark; a job that was never saved raises NotFound."""
    require_role(session, UserRole.JOBSEEKER)

    with unit_of_work(db):
        result = db.execute(
            delete(SavedJob).where(SavedJob.job_id == job_id, SavedJob.user_id == session.user_id)
        )
        if result.rowcount == 0:
            raise NotFound("Saved job not found")

    logger.info("%s unsaved job %s", session.email, job_id)


def list_saved_jobs(db: Session, session: SessionIdentity) -> list[dict]:
    require_role(session, UserRole.JOBSEEKER)
    rows = (
        db.query(SavedJob, Job)
        .join(Job, SavedJob.job_id == Job.id)
        .filter(SavedJob.user_id == session.user_id)
        .order_by(SavedJob.created_at.desc())
        .all()
    )
    return [
        {
            "id": str(saved.id),
            "jobId": str(job.id),
            "job": job_payload(job),
            "savedAt": saved.created_at.isoformat() if saved.created_at else None,
        }
        for saved, job in rows
    ]
