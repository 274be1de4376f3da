"""Admin moderation routes (every action re-verifies the admin against the users table)."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from job_board.auth.session import SessionIdentity
from job_board.errors import ValidationError
from job_board.services.accounts import update_user_status
from job_board.services.jobs import approve_job, job_payload

from .dependencies import current_session, get_db, parse_id, read_payload

router = APIRouter(prefix="/api/admin")


def _parse_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    raise ValidationError("isActive must be true or false")


@router.post("/jobs/{job_id}/approve")
def approve(
    job_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    job = approve_job(db, parse_id(job_id, "Job"), session)
    return {"success": True, "job": job_payload(job)}


@router.post("/users/{user_id}/status")
async def user_status(
    user_id: str,
    request: Request,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    payload = await read_payload(request)
    user = update_user_status(
        db, parse_id(user_id, "User"), _parse_flag(payload.get("isActive")), session
    )
    return {"success": True, "user": user.to_dict()}
