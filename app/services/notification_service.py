# app/services/notification_service.py
from typing import Tuple

from sqlalchemy.orm import Session

from app.models.enums import NotificationType, RequestStatus
from app.models.id_request import IdRequest
from app.models.notification import Notification
from app.repositories import notification_repository

# new status -> (title, message, type)
_STATUS_MESSAGES = {
    RequestStatus.PENDING: (
        "Request received",
        "Your ID card request is pending review.",
        NotificationType.INFO,
    ),
    RequestStatus.APPROVED: (
        "Request approved",
        "Your ID card request has been approved.",
        NotificationType.SUCCESS,
    ),
    RequestStatus.REJECTED: (
        "Request rejected",
        "Your ID card request was rejected.",
        NotificationType.ERROR,
    ),
    RequestStatus.PROCESSING: (
        "Card in production",
        "Your ID card is being printed.",
        NotificationType.INFO,
    ),
    RequestStatus.READY: (
        "Ready for pickup",
        "Your ID card is ready for pickup.",
        NotificationType.SUCCESS,
    ),
    RequestStatus.DELIVERED: (
        "Card delivered",
        "Your ID card has been delivered.",
        NotificationType.INFO,
    ),
}


def describe_status(status: RequestStatus) -> Tuple[str, str, NotificationType]:
    return _STATUS_MESSAGES[status]


def notify_status_change(
    db: Session,
    *,
    id_request: IdRequest,
    new_status: RequestStatus,
) -> Notification:
    title, message, ntype = describe_status(new_status)
    if id_request.comments and new_status == RequestStatus.REJECTED:
        message = f"{message} Reason: {id_request.comments}"
    notification = Notification(
        user_id=id_request.user_id,
        id_request_id=id_request.id,
        title=title,
        message=message,
        type=ntype,
    )
    return notification_repository.create(db, notification)
