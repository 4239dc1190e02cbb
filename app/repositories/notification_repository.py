# app/repositories/notification_repository.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.notification import Notification
from app.models.user import User

logger = logging.getLogger(__name__)


def create(db: Session, notification: Notification) -> Notification:
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.debug(
        f"created notification id={notification.id} user_id={notification.user_id}"
    )
    return notification


def get(db: Session, notification_id: int) -> Optional[Notification]:
    return db.get(Notification, notification_id)


def list_for_user(
    db: Session,
    user: User,
    *,
    unread_only: bool = False,
) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user.id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_read(db: Session, notification: Notification) -> Notification:
    notification.read = True
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.debug(f"marked notification id={notification.id} read")
    return notification
