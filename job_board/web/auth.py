"""Authentication routes — register, login, logout, current identity."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from job_board.auth.access import ROLE_HOME
from job_board.auth.session import SessionIdentity, create_session, destroy_session
from job_board.config import get_config
from job_board.errors import Unauthenticated
from job_board.models import UserRole
from job_board.services.accounts import get_current_user, login_user, register_user

from .dependencies import current_session, get_db, read_payload

router = APIRouter()


def _safe_callback(callback: str | None) -> str | None:
    # Only same-site paths; "//host" would leave the site
    if callback and callback.startswith("/") and not callback.startswith("//"):
        return callback
    return None


@router.post("/auth/register")
async def register(request: Request, db: Session = Depends(get_db)):
    payload = await read_payload(request)

    identity = register_user(
        db,
        role=payload.get("userType", ""),
        profile={
            "email": payload.get("email"),
            "first_name": payload.get("firstName"),
            "last_name": payload.get("lastName"),
            "company_name": payload.get("companyName"),
            "website": payload.get("website"),
        },
        password=payload.get("password", ""),
        confirm_password=payload.get("confirmPassword"),
        rounds=get_config().security.bcrypt_rounds,
    )
    return JSONResponse({"success": True, "user": identity.to_dict()}, status_code=201)


@router.get("/auth/login")
def login_form(
    callbackUrl: str | None = None,
    session: SessionIdentity | None = Depends(current_session),
):
    # Already signed in: go where the login would have sent them
    if session is not None:
        return RedirectResponse(_safe_callback(callbackUrl) or ROLE_HOME.get(session.role, "/"), status_code=303)
    return {
        "fields": ["email", "password", "userType", "callbackUrl"],
        "userTypes": [role.value for role in UserRole],
        "callbackUrl": _safe_callback(callbackUrl),
        "error": None,
    }


@router.post("/auth/login")
async def login(request: Request, db: Session = Depends(get_db)):
    payload = await read_payload(request)

    identity = login_user(
        db,
        email=payload.get("email", ""),
        password=payload.get("password", ""),
        claimed_role=payload.get("userType", ""),
    )
    create_session(request, identity)

    target = _safe_callback(payload.get("callbackUrl")) or ROLE_HOME.get(identity.role, "/")
    return RedirectResponse(target, status_code=303)


@router.get("/auth/logout")
def logout(request: Request):
    return destroy_session(request)


@router.get("/api/me")
def me(
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    user = get_current_user(db, session)
    if user is None:
        raise Unauthenticated()
    return user.to_dict()
