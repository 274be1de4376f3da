"""In-app notifications."""

import uuid

from sqlalchemy.orm import Session

from job_board.auth.access import require_ownership, require_session
from job_board.auth.session import SessionIdentity
from job_board.errors import NotFound
from job_board.models import Notification, unit_of_work


def notify(db: Session, user_id: uuid.UUID, title: str, message: str) -> Notification:
    """Queue a notification in the caller's transaction."""
    notification = Notification(user_id=user_id, title=title, message=message)
    db.add(notification)
    return notification


def list_notifications(db: Session, session: SessionIdentity, unread_only: bool = False) -> list[Notification]:
    session = require_session(session)
    query = db.query(Notification).filter(Notification.user_id == session.user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).all()


def mark_notification_read(db: Session, notification_id: uuid.UUID, session: SessionIdentity) -> Notification:
    session = require_session(session)
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFound("Notification not found")
    require_ownership(notification.user_id, session)

    with unit_of_work(db):
        notification.is_read = True
    return notification
