"""Application operations — applying, status changes, applicant and employer views."""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from job_board.auth.access import require_ownership, require_role, require_session
from job_board.auth.session import SessionIdentity
from job_board.errors import DuplicateApplication, NotFound, NotFoundOrForbidden, ValidationError
from job_board.models import (
    Application,
    ApplicationStatus,
    Company,
    Job,
    User,
    UserRole,
    unit_of_work,
)
from job_board.utils.text_processing import format_posted_at

from .notifications import notify

logger = logging.getLogger("job_board.applications")

DEFAULT_RESUME = "sample-resume.pdf"


def parse_status(value: str | None) -> ApplicationStatus:
    try:
        return ApplicationStatus((value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(status.value for status in ApplicationStatus)
        raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}")


def apply_for_job(
    db: Session,
    job_id: uuid.UUID,
    session: SessionIdentity,
    cover_letter: str = "",
    resume_url: str | None = None,
) -> Application:
    """Submit a pending application; a second one for the same job is rejected."""
    require_role(session, UserRole.JOBSEEKER)

    job = db.query(Job).filter(Job.id == job_id, Job.is_active.is_(True)).first()
    if job is None:
        raise NotFound("Job not found")

    application = Application(
        job_id=job.id,
        user_id=session.user_id,
        cover_letter=cover_letter or "",
        resume_url=resume_url or DEFAULT_RESUME,
        status=ApplicationStatus.PENDING.value,
    )
    # UNIQUE(job_id, user_id) decides duplicates; no separate existence check
    try:
        with unit_of_work(db):
            db.add(application)
            db.flush()
            owner_id = db.query(Company.user_id).filter(Company.id == job.company_id).scalar()
            if owner_id is not None:
                notify(db, owner_id, "New application", f"{session.name} applied for {job.title}")
    except IntegrityError:
        logger.warning("Duplicate application by %s for job %s", session.email, job_id)
        raise DuplicateApplication()

    logger.info("%s applied for job %s", session.email, job.id)
    return application


def update_application_status(
    db: Session,
    application_id: uuid.UUID,
    new_status: str,
    session: SessionIdentity,
) -> Application:
    """Set any status on an application to one of the employer's jobs.

    There is no transition graph: every status may follow every other one.
    """
    require_role(session, UserRole.EMPLOYER)
    status = parse_status(new_status)

    with unit_of_work(db):
        row = (
            db.query(Application, Job.title)
            .join(Job, Application.job_id == Job.id)
            .join(Company, Job.company_id == Company.id)
            .filter(Application.id == application_id, Company.user_id == session.user_id)
            .first()
        )
        if row is None:
            logger.warning("%s denied status update on application %s", session.email, application_id)
            raise NotFoundOrForbidden("Application not found or you don't have permission to update it")

        application, job_title = row
        application.status = status.value
        notify(
            db,
            application.user_id,
            "Application update",
            f"Your application for {job_title} is now {status.value}",
        )

    logger.info("Application %s set to %s by %s", application.id, status.value, session.email)
    return application


def _applicant_view(application: Application, job: Job) -> dict:
    return {
        **application.to_dict(),
        "jobTitle": job.title,
        "company": job.company_name,
        "appliedAgo": format_posted_at(application.created_at),
    }


def list_my_applications(db: Session, session: SessionIdentity) -> list[dict]:
    """The job seeker's own applications, newest first."""
    require_role(session, UserRole.JOBSEEKER)
    rows = (
        db.query(Application, Job)
        .join(Job, Application.job_id == Job.id)
        .filter(Application.user_id == session.user_id)
        .order_by(Application.created_at.desc())
        .all()
    )
    return [_applicant_view(application, job) for application, job in rows]


def get_application(db: Session, application_id: uuid.UUID, session: SessionIdentity) -> dict:
    """One application, visible only to the applicant who submitted it."""
    session = require_session(session)
    application = db.get(Application, application_id)
    if application is None:
        raise NotFound("Application not found")
    require_ownership(application.user_id, session)
    return _applicant_view(application, application.job)


def list_employer_applications(db: Session, session: SessionIdentity, limit: int | None = None) -> list[dict]:
    """Applications to any of the employer's jobs, with applicant name and email."""
    require_role(session, UserRole.EMPLOYER)
    query = (
        db.query(Application, Job.title, User.name, User.email)
        .join(Job, Application.job_id == Job.id)
        .join(Company, Job.company_id == Company.id)
        .join(User, Application.user_id == User.id)
        .filter(Company.user_id == session.user_id)
        .order_by(Application.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return [
        {
            **application.to_dict(),
            "jobTitle": job_title,
            "applicantName": name,
            "applicantEmail": email,
        }
        for application, job_title, name, email in query.all()
    ]
