"""ORM models for the job board."""

from .application import Application, ApplicationStatus
from .base import Base, SessionLocal, engine, unit_of_work
from .company import Company
from .job import Job
from .notification import Notification
from .saved_job import SavedJob
from .user import User, UserRole

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "unit_of_work",
    "User",
    "UserRole",
    "Company",
    "Job",
    "Application",
    "ApplicationStatus",
    "SavedJob",
    "Notification",
]
