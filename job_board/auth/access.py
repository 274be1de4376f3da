"""Access control — session, role and ownership checks."""

import logging
import uuid
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from job_board.errors import Forbidden, Unauthenticated, Unauthorized
from job_board.models import User, UserRole

from .session import SessionIdentity

logger = logging.getLogger("job_board.access")

LOGIN_PATH = "/auth/login"

# Paths that require a session
PROTECTED_PATHS = ("/dashboard", "/profile", "/settings", "/employers/post-job", "/admin")

# Paths that require specific roles
ROLE_PROTECTED_PATHS = {
    "/dashboard/employer": (UserRole.EMPLOYER.value,),
    "/dashboard/jobseeker": (UserRole.JOBSEEKER.value,),
    "/admin": (UserRole.ADMIN.value,),
    "/employers/post-job": (UserRole.EMPLOYER.value,),
}

ROLE_HOME = {
    UserRole.EMPLOYER.value: "/dashboard/employer",
    UserRole.JOBSEEKER.value: "/dashboard/jobseeker",
    UserRole.ADMIN.value: "/admin",
}


def require_session(session: SessionIdentity | None) -> SessionIdentity:
    if session is None:
        raise Unauthenticated()
    return session


def require_role(session: SessionIdentity | None, role: str | UserRole) -> SessionIdentity:
    """Fail with Unauthorized unless the session exists and carries ``role``."""
    role = role.value if isinstance(role, UserRole) else role
    session = require_session(session)
    if session.role != role:
        logger.warning("Role check failed: %s is %s, needs %s", session.email, session.role, role)
        raise Unauthorized()
    return session


def require_ownership(owner_user_id: uuid.UUID | str | None, session: SessionIdentity) -> None:
    """Fail with Forbidden unless the resource's owning user is the session user."""
    if owner_user_id is None or str(owner_user_id) != session.id:
        logger.warning("Ownership check failed for %s", session.email)
        raise Forbidden()


def verify_admin(db: Session, session: SessionIdentity | None) -> User:
    """Re-check the admin claim against the users table; the cookie alone is not trusted."""
    session = require_role(session, UserRole.ADMIN)
    admin = db.query(User).filter(
        User.id == session.user_id,
        User.role == UserRole.ADMIN.value,
        User.is_active.is_(True),
    ).first()
    if admin is None:
        logger.warning("Admin claim for %s not backed by the users table", session.email)
        raise Forbidden()
    return admin


def _matches(pathname: str, prefix: str) -> bool:
    return pathname.startswith(prefix)


def resolve_route_access(pathname: str, session: SessionIdentity | None) -> str | None:
    """Where to redirect a request for ``pathname``, or None to let it through."""
    if not any(_matches(pathname, path) for path in PROTECTED_PATHS):
        return None

    if session is None:
        return f"{LOGIN_PATH}?{urlencode({'callbackUrl': pathname})}"

    for path, roles in ROLE_PROTECTED_PATHS.items():
        if _matches(pathname, path) and session.role not in roles:
            return ROLE_HOME.get(session.role, "/")

    return None
