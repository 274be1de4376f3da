"""Company operations — employer profile and admin listing."""

import logging
from collections.abc import Mapping

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from job_board.auth.access import require_role, verify_admin
from job_board.auth.session import SessionIdentity
from job_board.errors import ValidationError
from job_board.models import Company, Job, User, UserRole, unit_of_work

logger = logging.getLogger("job_board.companies")

PROFILE_FIELDS = ("name", "website", "location", "industry", "size", "description", "logo_url")


def get_or_create_company(db: Session, session: SessionIdentity) -> Company:
    """The employer's company, created on the spot if registration never made one.

    The caller owns the transaction; a new company is only flushed.
    """
    require_role(session, UserRole.EMPLOYER)
    company = db.query(Company).filter(Company.user_id == session.user_id).first()
    if company is None:
        company = Company(name=session.name, user_id=session.user_id)
        db.add(company)
        db.flush()
        logger.info("Created missing company for employer %s", session.email)
    return company


def get_company_profile(db: Session, session: SessionIdentity) -> Company:
    with unit_of_work(db):
        return get_or_create_company(db, session)


def update_company_profile(db: Session, session: SessionIdentity, fields: Mapping[str, str]) -> Company:
    """Overwrite the employer's company profile; a rename also updates its jobs."""
    name = (fields.get("name") or "").strip()
    if not name:
        raise ValidationError("Company name is required.")

    with unit_of_work(db):
        company = get_or_create_company(db, session)

        for key in PROFILE_FIELDS:
            if key == "name":
                continue
            value = (fields.get(key) or "").strip()
            setattr(company, key, value or None)

        if name != company.name:
            company.name = name
            db.execute(
                update(Job).where(Job.company_id == company.id).values(company_name=name)
            )

    logger.info("Company profile updated for %s", session.email)
    return company


def list_companies(db: Session, admin_session: SessionIdentity, limit: int = 10) -> list[dict]:
    """Newest companies with owner email and job count, for the admin table."""
    verify_admin(db, admin_session)
    job_counts = (
        db.query(Job.company_id, func.count(Job.id).label("jobs"))
        .group_by(Job.company_id)
        .subquery()
    )
    rows = (
        db.query(Company, User.email, func.coalesce(job_counts.c.jobs, 0))
        .join(User, Company.user_id == User.id)
        .outerjoin(job_counts, job_counts.c.company_id == Company.id)
        .order_by(Company.created_at.desc())
        .limit(limit)
        .all()
    )
    return [
        {**company.to_dict(), "email": email, "jobs": jobs}
        for company, email, jobs in rows
    ]
