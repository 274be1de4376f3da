"""Account operations — registration, login, admin user moderation."""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from job_board.auth.access import verify_admin
from job_board.auth.passwords import hash_password, verify_password
from job_board.auth.session import SessionIdentity
from job_board.config import MIN_BCRYPT_ROUNDS
from job_board.errors import (
    AccountDeactivated,
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    RoleMismatch,
    ValidationError,
)
from job_board.models import Company, User, UserRole, unit_of_work

logger = logging.getLogger("job_board.accounts")

MIN_PASSWORD_LENGTH = 8
SELF_SERVICE_ROLES = (UserRole.JOBSEEKER.value, UserRole.EMPLOYER.value)


def _identity(user: User) -> SessionIdentity:
    return SessionIdentity(id=str(user.id), name=user.name, email=user.email, role=user.role)


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _validate_registration(role: str, email: str, password: str, confirm_password: str | None):
    if role not in SELF_SERVICE_ROLES:
        raise ValidationError("Invalid user type")
    if not email or "@" not in email:
        raise ValidationError("A valid email address is required.")
    if not password:
        raise ValidationError("Password is required.")
    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")


def register_user(
    db: Session,
    role: str,
    profile: Mapping[str, str],
    password: str,
    confirm_password: str | None = None,
    rounds: int = MIN_BCRYPT_ROUNDS,
) -> SessionIdentity:
    """Create a job seeker or employer (with its company) and return the new identity.

    ``profile`` carries ``email`` plus ``first_name``/``last_name`` for job
    seekers or ``company_name``/``website`` for employers.
    """
    email = _normalize_email(profile.get("email"))
    _validate_registration(role, email, password, confirm_password)

    if role == UserRole.JOBSEEKER.value:
        name = f"{(profile.get('first_name') or '').strip()} {(profile.get('last_name') or '').strip()}".strip()
        if not name:
            raise ValidationError("First and last name are required.")
    else:
        name = (profile.get("company_name") or "").strip()
        if not name:
            raise ValidationError("Company name is required.")

    user = User(name=name, email=email, password_hash=hash_password(password, rounds), role=role)
    try:
        with unit_of_work(db):
            db.add(user)
            db.flush()
            if role == UserRole.EMPLOYER.value:
                db.add(Company(
                    name=name,
                    user_id=user.id,
                    website=(profile.get("website") or "").strip() or None,
                ))
    except IntegrityError:
        logger.warning("Registration rejected, email already in use: %s", email)
        raise DuplicateEmail()

    logger.info("Registered %s %s", role, email)
    return _identity(user)


def login_user(db: Session, email: str, password: str, claimed_role: str) -> SessionIdentity:
    """Verify credentials for the role the user chose at login."""
    email = _normalize_email(email)
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise InvalidCredentials()

    if user.role != claimed_role:
        raise RoleMismatch(user.role)

    if not verify_password(password or "", user.password_hash):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentials()

    if not user.is_active:
        raise AccountDeactivated()

    with unit_of_work(db):
        user.last_login_at = datetime.now(timezone.utc)

    return _identity(user)


def get_current_user(db: Session, session: SessionIdentity | None) -> User | None:
    """Return the User row behind the session, or None."""
    if session is None:
        return None
    return db.query(User).filter(User.id == session.user_id).first()


def update_user_status(db: Session, user_id: uuid.UUID, active: bool, admin_session: SessionIdentity) -> User:
    """Activate or deactivate an account (users are never deleted)."""
    verify_admin(db, admin_session)

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    with unit_of_work(db):
        user.is_active = active

    logger.info("Admin %s set %s active=%s", admin_session.email, user.email, active)
    return user


def list_users(db: Session, admin_session: SessionIdentity, limit: int = 10) -> list[User]:
    verify_admin(db, admin_session)
    return db.query(User).order_by(User.created_at.desc()).limit(limit).all()
