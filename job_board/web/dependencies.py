"""Shared FastAPI dependencies — DB session, session identity, request parsing."""

import uuid
from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from job_board.auth.session import SessionIdentity, get_session
from job_board.errors import NotFound, ValidationError
from job_board.models import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def current_session(request: Request) -> SessionIdentity | None:
    """The identity from the session cookie, or None (never raises)."""
    return get_session(request)


def parse_id(value: str, label: str = "Resource") -> uuid.UUID:
    """A path id as UUID; anything else cannot name a row."""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise NotFound(f"{label} not found")


async def read_payload(request: Request) -> dict:
    """Request body as a flat dict, from JSON or form encoding."""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Request body is not valid JSON")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
