"""Dashboard aggregation — one count query per metric, read-only.

The counts are not taken from a single snapshot; each is as fresh as the
moment its query ran.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from job_board.auth.access import require_role, verify_admin
from job_board.auth.session import SessionIdentity
from job_board.models import (
    Application,
    ApplicationStatus,
    Company,
    Job,
    SavedJob,
    User,
    UserRole,
)

from .accounts import list_users
from .applications import list_employer_applications, list_my_applications
from .companies import list_companies
from .jobs import list_admin_jobs, list_employer_jobs
from .saved_jobs import list_saved_jobs

NEW_WINDOW = timedelta(days=30)
RECENT_LIMIT = 10


def _count(query) -> int:
    return query.scalar() or 0


def _status_breakdown(db: Session, *criteria) -> dict[str, int]:
    rows = (
        db.query(Application.status, func.count(Application.id))
        .select_from(Application)
        .join(Job, Application.job_id == Job.id)
        .join(Company, Job.company_id == Company.id)
        .filter(*criteria)
        .group_by(Application.status)
        .all()
    )
    counts = {status.value: 0 for status in ApplicationStatus}
    counts.update({status: count for status, count in rows})
    return counts


def employer_dashboard(db: Session, session: SessionIdentity) -> dict:
    require_role(session, UserRole.EMPLOYER)
    since = datetime.now(timezone.utc) - NEW_WINDOW
    owned = Company.user_id == session.user_id

    def jobs_query(*columns):
        return db.query(*columns).select_from(Job).join(Company, Job.company_id == Company.id).filter(owned)

    def applications_query():
        return (
            db.query(func.count(Application.id))
            .select_from(Application)
            .join(Job, Application.job_id == Job.id)
            .join(Company, Job.company_id == Company.id)
            .filter(owned)
        )

    return {
        "activeJobs": _count(jobs_query(func.count(Job.id)).filter(Job.is_active.is_(True))),
        "totalJobs": _count(jobs_query(func.count(Job.id))),
        "newJobs": _count(jobs_query(func.count(Job.id)).filter(Job.created_at > since)),
        "totalApplications": _count(applications_query()),
        "newApplications": _count(applications_query().filter(Application.created_at > since)),
        "jobViews": _count(jobs_query(func.coalesce(func.sum(Job.views_count), 0))),
        "applicationsByStatus": _status_breakdown(db, owned),
        "jobs": list_employer_jobs(db, session),
        "applications": list_employer_applications(db, session, limit=RECENT_LIMIT),
    }


def admin_dashboard(db: Session, session: SessionIdentity) -> dict:
    verify_admin(db, session)
    since = datetime.now(timezone.utc) - NEW_WINDOW

    return {
        "totalUsers": _count(db.query(func.count(User.id))),
        "newUsers": _count(db.query(func.count(User.id)).filter(User.created_at > since)),
        "activeJobs": _count(db.query(func.count(Job.id)).filter(Job.is_active.is_(True))),
        "newJobs": _count(db.query(func.count(Job.id)).filter(Job.created_at > since)),
        "totalCompanies": _count(db.query(func.count(Company.id))),
        "newCompanies": _count(db.query(func.count(Company.id)).filter(Company.created_at > since)),
        "totalApplications": _count(db.query(func.count(Application.id))),
        "newApplications": _count(
            db.query(func.count(Application.id)).filter(Application.created_at > since)
        ),
        "pendingJobs": _count(db.query(func.count(Job.id)).filter(Job.is_approved.is_(False))),
        "reportedContent": 0,  # no reporting feature yet
        "users": [user.to_dict() for user in list_users(db, session, limit=RECENT_LIMIT)],
        "jobs": list_admin_jobs(db, session, limit=RECENT_LIMIT),
        "companies": list_companies(db, session, limit=RECENT_LIMIT),
    }


def jobseeker_dashboard(db: Session, session: SessionIdentity) -> dict:
    require_role(session, UserRole.JOBSEEKER)
    mine = Application.user_id == session.user_id

    by_status = {status.value: 0 for status in ApplicationStatus}
    by_status.update(dict(
        db.query(Application.status, func.count(Application.id))
        .filter(mine)
        .group_by(Application.status)
        .all()
    ))

    return {
        "totalApplications": _count(db.query(func.count(Application.id)).filter(mine)),
        "savedJobs": _count(
            db.query(func.count(SavedJob.id)).filter(SavedJob.user_id == session.user_id)
        ),
        "interviews": by_status[ApplicationStatus.INTERVIEW.value],
        "applicationsByStatus": by_status,
        "applications": list_my_applications(db, session),
        "savedJobsList": list_saved_jobs(db, session),
    }
