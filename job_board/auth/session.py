"""Cookie-backed session store.

The identity ``{id, name, email, role}`` is the whole session: there is no
server-side session table. Starlette's ``SessionMiddleware`` writes it into the
``job_board_session`` cookie as base64 JSON signed with itsdangerous, so the
payload is readable by the client but cannot be altered without the secret.
A cookie with a bad signature or an unexpected shape reads as "no session".
"""

import logging
import uuid
from dataclasses import asdict, dataclass

from fastapi import Request
from fastapi.responses import RedirectResponse

from job_board.config import AppConfig
from job_board.models import UserRole

logger = logging.getLogger("job_board.session")

SESSION_FIELDS = ("id", "name", "email", "role")


@dataclass(frozen=True)
class SessionIdentity:
    """Who is making the request, as carried by the session cookie."""

    id: str
    name: str
    email: str
    role: str

    @property
    def user_id(self) -> uuid.UUID:
        return uuid.UUID(self.id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionIdentity | None":
        """Decode a session payload; anything malformed yields None."""
        if not data or not all(isinstance(data.get(key), str) for key in SESSION_FIELDS):
            return None
        if data["role"] not in {role.value for role in UserRole}:
            return None
        try:
            uuid.UUID(data["id"])
        except ValueError:
            return None
        return cls(**{key: data[key] for key in SESSION_FIELDS})


def session_middleware_options(config: AppConfig) -> dict:
    """Keyword arguments for SessionMiddleware (the cookie is always httpOnly)."""
    return {
        "secret_key": config.session.secret,
        "session_cookie": config.session.cookie_name,
        "max_age": config.session.max_age,
        "path": "/",
        "same_site": "lax",
        "https_only": config.secure_cookies,
    }


def create_session(request: Request, identity: SessionIdentity) -> None:
    request.session.clear()
    request.session.update(identity.to_dict())
    logger.info("Session created for %s (%s)", identity.email, identity.role)


def get_session(request: Request) -> SessionIdentity | None:
    """Return the decoded identity, or None if absent or undecodable."""
    if "session" not in request.scope:
        return None
    return SessionIdentity.from_dict(dict(request.session))


def destroy_session(request: Request) -> RedirectResponse:
    request.session.clear()
    return RedirectResponse("/", status_code=303)
