"""Job operations — posting, editing, deletion, moderation and search."""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Query, Session

from job_board.auth.access import require_role, require_session, verify_admin
from job_board.auth.session import SessionIdentity
from job_board.errors import NotFound, NotFoundOrForbidden, ValidationError
from job_board.models import Application, Company, Job, SavedJob, UserRole, unit_of_work
from job_board.utils.text_processing import (
    ANY_LOCATION,
    REMOTE_LOCATION,
    contains_pattern,
    format_posted_at,
    split_lines,
    split_tags,
)

from .companies import get_or_create_company

logger = logging.getLogger("job_board.jobs")

FEATURED_COUNT = 3
LATEST_COUNT = 5
LATEST_WINDOW = timedelta(hours=24)
MAX_PAGE_SIZE = 100

# Column length limits (see models/job.py)
_FIELD_LIMITS = {"title": 255, "location": 255, "type": 50, "salary": 100}


@dataclass
class JobFilters:
    query: str = ""
    location: str = ""
    type: str = ""
    limit: int = 20
    page: int = 1
    featured: bool = False
    latest: bool = False


def parse_job_fields(form: Mapping[str, str], include_status: bool = False) -> dict:
    """Validate a job form and turn its text areas into ordered lists.

    Requirements and responsibilities are one item per line, tags are comma
    separated; blank entries are dropped. With ``include_status`` the
    ``isActive`` checkbox is read too (absent means inactive).
    """
    fields = {key: str(form.get(key) or "").strip() for key in ("title", "location", "type", "salary")}
    if not fields["title"]:
        raise ValidationError("Job title is required.")
    for key, limit in _FIELD_LIMITS.items():
        if len(fields[key]) > limit:
            raise ValidationError(f"{key.capitalize()} must be at most {limit} characters.")

    fields["description"] = str(form.get("description") or "")
    fields["requirements"] = split_lines(form.get("requirements"))
    fields["responsibilities"] = split_lines(form.get("responsibilities"))
    fields["tags"] = split_tags(form.get("tags"))

    if include_status:
        fields["is_active"] = str(form.get("isActive")).lower() == "true"
    return fields


def job_payload(job: Job, now: datetime | None = None) -> dict:
    return {**job.to_dict(), "postedAt": format_posted_at(job.created_at, now)}


def _owned_job(db: Session, job_id: uuid.UUID, session: SessionIdentity, action: str) -> Job:
    # Existence and ownership in one query: a missing job and someone else's job look the same
    job = (
        db.query(Job)
        .join(Company, Job.company_id == Company.id)
        .filter(Job.id == job_id, Company.user_id == session.user_id)
        .first()
    )
    if job is None:
        logger.warning("%s denied %s on job %s", session.email, action, job_id)
        raise NotFoundOrForbidden(f"Job not found or you don't have permission to {action} it")
    return job


def post_job(db: Session, session: SessionIdentity, fields: Mapping) -> uuid.UUID:
    """Create an active job under the employer's company and return its id."""
    require_role(session, UserRole.EMPLOYER)

    with unit_of_work(db):
        company = get_or_create_company(db, session)
        job = Job(
            title=fields["title"],
            company_id=company.id,
            company_name=company.name,
            location=fields.get("location", ""),
            type=fields.get("type", ""),
            salary=fields.get("salary", ""),
            description=fields.get("description", ""),
            requirements=list(fields.get("requirements", [])),
            responsibilities=list(fields.get("responsibilities", [])),
            tags=list(fields.get("tags", [])),
            is_active=True,
        )
        db.add(job)
        db.flush()

    logger.info("Job %s posted by %s: %s", job.id, session.email, job.title)
    return job.id


def update_job(db: Session, job_id: uuid.UUID, session: SessionIdentity, fields: Mapping) -> Job:
    """Overwrite every mutable field of a job the employer owns."""
    session = require_session(session)

    with unit_of_work(db):
        job = _owned_job(db, job_id, session, "edit")
        job.title = fields["title"]
        job.location = fields.get("location", "")
        job.type = fields.get("type", "")
        job.salary = fields.get("salary", "")
        job.description = fields.get("description", "")
        job.requirements = list(fields.get("requirements", []))
        job.responsibilities = list(fields.get("responsibilities", []))
        job.tags = list(fields.get("tags", []))
        job.is_active = bool(fields.get("is_active", False))

    logger.info("Job %s updated by %s", job.id, session.email)
    return job


def delete_job(db: Session, job_id: uuid.UUID, session: SessionIdentity) -> None:
    """Delete a job with its applications and saved-job rows, all or nothing."""
    session = require_session(session)

    with unit_of_work(db):
        job = _owned_job(db, job_id, session, "delete")
        db.execute(delete(Application).where(Application.job_id == job.id))
        db.execute(delete(SavedJob).where(SavedJob.job_id == job.id))
        db.execute(delete(Job).where(Job.id == job.id))

    logger.info("Job %s deleted by %s", job_id, session.email)


def approve_job(db: Session, job_id: uuid.UUID, admin_session: SessionIdentity) -> Job:
    verify_admin(db, admin_session)

    job = db.get(Job, job_id)
    if job is None:
        raise NotFound("Job not found")

    with unit_of_work(db):
        job.is_approved = True

    logger.info("Job %s approved by %s", job.id, admin_session.email)
    return job


def _any_tag_matches(db: Session, pattern: str):
    """EXISTS over the elements of ``Job.tags``, not its JSON text."""
    if db.get_bind().dialect.name == "postgresql":
        elements = func.json_array_elements_text(Job.tags)
    else:
        elements = func.json_each(Job.tags)
    tag = elements.table_valued("value", name="tag", joins_implicitly=True)
    return select(tag.c.value).where(tag.c.value.ilike(pattern, escape="\\")).exists()


def list_jobs(db: Session, filters: JobFilters | None = None) -> list[Job]:
    """Active jobs matching every given filter, newest first."""
    filters = filters or JobFilters()
    query = db.query(Job).filter(Job.is_active.is_(True))

    # No featured flag exists: featured means the most recent few
    if filters.featured:
        return query.order_by(Job.created_at.desc()).limit(FEATURED_COUNT).all()

    if filters.latest:
        cutoff = datetime.now(timezone.utc) - LATEST_WINDOW
        return (
            query.filter(Job.created_at > cutoff)
            .order_by(Job.created_at.desc())
            .limit(LATEST_COUNT)
            .all()
        )

    term = filters.query.strip()
    if term:
        pattern = contains_pattern(term)
        query = query.filter(or_(
            Job.title.ilike(pattern, escape="\\"),
            Job.company_name.ilike(pattern, escape="\\"),
            Job.description.ilike(pattern, escape="\\"),
            _any_tag_matches(db, pattern),
        ))

    location = filters.location.strip()
    if location and location != ANY_LOCATION:
        if location == REMOTE_LOCATION:
            query = query.filter(or_(
                Job.location == REMOTE_LOCATION,
                Job.location.ilike("%remote%"),
            ))
        else:
            query = query.filter(Job.location == location)

    if filters.type:
        query = query.filter(Job.type == filters.type)

    limit = max(1, min(filters.limit, MAX_PAGE_SIZE))
    page = max(1, filters.page)
    return (
        query.order_by(Job.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_job(db: Session, job_id: uuid.UUID, record_view: bool = False) -> Job:
    """An active job by id; ``record_view`` bumps its view counter."""
    job = db.query(Job).filter(Job.id == job_id, Job.is_active.is_(True)).first()
    if job is None:
        raise NotFound("Job not found")

    if record_view:
        with unit_of_work(db):
            db.execute(
                update(Job)
                .where(Job.id == job.id)
                .values(views_count=Job.views_count + 1)
                .execution_options(synchronize_session=False)
            )
        db.refresh(job)
    return job


def _with_application_counts(query: Query, limit: int | None = None) -> list[dict]:
    counts = (
        query.session.query(Application.job_id, func.count(Application.id).label("applications"))
        .group_by(Application.job_id)
        .subquery()
    )
    query = (
        query.add_columns(func.coalesce(counts.c.applications, 0))
        .outerjoin(counts, counts.c.job_id == Job.id)
        .order_by(Job.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    rows = query.all()
    return [{**job_payload(job), "applications": applications} for job, applications in rows]


def list_employer_jobs(db: Session, session: SessionIdentity) -> list[dict]:
    """Every job (active or not) of the employer's company, with application counts."""
    require_role(session, UserRole.EMPLOYER)
    query = (
        db.query(Job)
        .join(Company, Job.company_id == Company.id)
        .filter(Company.user_id == session.user_id)
    )
    return _with_application_counts(query)


def list_admin_jobs(db: Session, admin_session: SessionIdentity, limit: int = 10) -> list[dict]:
    verify_admin(db, admin_session)
    return _with_application_counts(db.query(Job), limit=limit)
