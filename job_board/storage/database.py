"""Schema bootstrap, status check and demo data seeding."""

import logging
from pathlib import Path

from sqlalchemy import func, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from job_board.auth.passwords import hash_password
from job_board.config import MIN_BCRYPT_ROUNDS
from job_board.models import Base, Company, Job, User, UserRole, unit_of_work

logger = logging.getLogger("job_board.storage")

SAMPLE_JOBS = [
    {
        "title": "Senior Frontend Developer",
        "location": "Mumbai, India",
        "type": "Full-time",
        "salary": "₹15,00,000 - ₹25,00,000",
        "description": (
            "<p>We are looking for a Senior Frontend Developer to join our team and help us "
            "build amazing user experiences.</p>"
        ),
        "requirements": [
            "5+ years of experience with React",
            "Strong TypeScript skills",
            "Experience with state management libraries",
            "Understanding of web accessibility standards",
        ],
        "responsibilities": [
            "Develop new user-facing features",
            "Build reusable components and libraries",
            "Optimize applications for maximum speed and scalability",
            "Collaborate with backend developers and designers",
        ],
        "tags": ["React", "TypeScript", "Frontend", "Senior"],
    },
    {
        "title": "Backend Engineer",
        "location": "Remote",
        "type": "Full-time",
        "salary": "₹12,00,000 - ₹20,00,000",
        "description": (
            "<p>Join our backend team to build scalable APIs and services that power our "
            "applications.</p>"
        ),
        "requirements": [
            "3+ years of experience with Node.js",
            "Experience with PostgreSQL or similar databases",
            "Knowledge of RESTful API design",
            "Understanding of microservices architecture",
        ],
        "responsibilities": [
            "Design and implement APIs",
            "Optimize database queries",
            "Implement security and data protection measures",
            "Write unit and integration tests",
        ],
        "tags": ["Node.js", "PostgreSQL", "API", "Backend"],
    },
    {
        "title": "UX/UI Designer",
        "location": "Bangalore, India",
        "type": "Full-time",
        "salary": "₹10,00,000 - ₹18,00,000",
        "description": (
            "<p>We are seeking a talented UX/UI Designer to create amazing user experiences "
            "for our products.</p>"
        ),
        "requirements": [
            "3+ years of experience in UX/UI design",
            "Proficiency with design tools like Figma",
            "Portfolio demonstrating UI design skills",
            "Experience with user research and testing",
        ],
        "responsibilities": [
            "Create wireframes, prototypes, and user flows",
            "Conduct user research and usability testing",
            "Collaborate with developers to implement designs",
            "Maintain design system and documentation",
        ],
        "tags": ["UX", "UI", "Figma", "Design"],
    },
]


def _ensure_sqlite_directory(engine: Engine) -> None:
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_database(engine: Engine) -> None:
    """Create any missing tables; safe to run repeatedly."""
    _ensure_sqlite_directory(engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables verified")


def is_database_initialized(engine: Engine) -> bool:
    """True once the jobs table exists."""
    return inspect(engine).has_table(Job.__tablename__)


def seed_sample_data(db: Session, rounds: int = MIN_BCRYPT_ROUNDS) -> bool:
    """Create demo admin, employer, job seeker and jobs when there are no jobs yet."""
    if db.query(func.count(Job.id)).scalar():
        logger.info("Sample data skipped: jobs already exist")
        return False

    with unit_of_work(db):
        db.add(User(
            name="Admin User",
            email="admin@example.com",
            password_hash=hash_password("admin123", rounds),
            role=UserRole.ADMIN.value,
        ))
        employer = User(
            name="Demo Company",
            email="employer@example.com",
            password_hash=hash_password("employer123", rounds),
            role=UserRole.EMPLOYER.value,
        )
        db.add(employer)
        db.add(User(
            name="John Doe",
            email="jobseeker@example.com",
            password_hash=hash_password("jobseeker123", rounds),
            role=UserRole.JOBSEEKER.value,
        ))
        db.flush()

        company = Company(
            name="Demo Company",
            user_id=employer.id,
            website="https://demo-company.com",
            location="Mumbai, India",
            industry="Technology",
            size="50-100",
            description="A leading technology company specializing in web applications.",
            logo_url="/placeholder.svg?height=100&width=100",
        )
        db.add(company)
        db.flush()

        for sample in SAMPLE_JOBS:
            db.add(Job(company_id=company.id, company_name=company.name, **sample))

    logger.info("Sample data seeded: 3 users, 1 company, %d jobs", len(SAMPLE_JOBS))
    return True


def get_stats(db: Session) -> dict:
    """Row counts per table, for the CLI."""
    stats = {}
    for mapper in Base.registry.mappers:
        model = mapper.class_
        stats[model.__tablename__] = db.query(func.count()).select_from(model).scalar() or 0
    return stats
