"""Shared fixtures: an in-memory database with the full schema and account factories."""

import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from job_board.auth.passwords import hash_password
from job_board.auth.session import SessionIdentity
from job_board.models import Base, User, UserRole
from job_board.services.accounts import register_user
from job_board.services.jobs import parse_job_fields, post_job


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs sync handlers in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def make_employer(db):
    def _make(email="employer123@example.com", company="Acme", website=None):
        return register_user(
            db,
            role="employer",
            profile={"email": email, "company_name": company, "website": website},
            password="employer123",
        )
    return _make


@pytest.fixture
def make_jobseeker(db):
    def _make(email="seeker@example.com", first_name="Jane", last_name="Doe"):
        return register_user(
            db,
            role="jobseeker",
            profile={"email": email, "first_name": first_name, "last_name": last_name},
            password="jobseeker123",
        )
    return _make


@pytest.fixture
def make_admin(db):
    def _make(email="admin@example.com", active=True):
        user = User(
            name="Admin User",
            email=email,
            password_hash=hash_password("admin123"),
            role=UserRole.ADMIN.value,
            is_active=active,
        )
        db.add(user)
        db.commit()
        return SessionIdentity(id=str(user.id), name=user.name, email=user.email, role=user.role)
    return _make


@pytest.fixture
def make_job(db):
    def _make(employer, title="Backend Engineer", **form):
        fields = parse_job_fields({
            "title": title,
            "location": form.pop("location", "Mumbai, India"),
            "type": form.pop("type", "Full-time"),
            "salary": form.pop("salary", ""),
            "description": form.pop("description", "Build APIs."),
            "requirements": form.pop("requirements", "Python\nSQL"),
            "responsibilities": form.pop("responsibilities", "Ship features"),
            "tags": form.pop("tags", "Python, API"),
        })
        return post_job(db, employer, fields)
    return _make


@pytest.fixture
def forged_identity():
    """Identities for user ids that do not exist in the database."""
    def _make(role="jobseeker", **overrides):
        data = {"id": str(uuid.uuid4()), "name": "Mallory", "email": "mallory@example.com", "role": role}
        data.update(overrides)
        return SessionIdentity(**data)
    return _make
