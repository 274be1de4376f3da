"""Notification routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from job_board.auth.session import SessionIdentity
from job_board.services.notifications import list_notifications, mark_notification_read

from .dependencies import current_session, get_db, parse_id

router = APIRouter(prefix="/api/notifications")


@router.get("")
def notifications_index(
    unread: bool = False,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    return [n.to_dict() for n in list_notifications(db, session, unread_only=unread)]


@router.post("/{notification_id}/read")
def mark_read(
    notification_id: str,
    session: SessionIdentity | None = Depends(current_session),
    db: Session = Depends(get_db),
):
    notification = mark_notification_read(db, parse_id(notification_id, "Notification"), session)
    return notification.to_dict()
