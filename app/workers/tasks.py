"""
Notification Tasks for Worker
These tasks are executed by RQ workers after an admin changes a request's status
"""

import logging

from app.db.session import SessionLocal
from app.models.enums import RequestStatus
from app.repositories import id_request_repository
from app.services.notification_service import notify_status_change

logger = logging.getLogger(__name__)


def status_notification_task(request_id: int, old_status: str, new_status: str) -> dict:
    """
    Worker task that records a notification for the owner of an id request.

    Args:
        request_id: ID of the request whose status changed
        old_status: status before the change
        new_status: status after the change

    Returns:
        Dictionary with the outcome
    """
    db = SessionLocal()
    try:
        logger.info(
            f"Starting notification task for id request {request_id}: "
            f"{old_status} -> {new_status}"
        )

        id_request = id_request_repository.get(db, request_id)
        if id_request is None:
            logger.warning(f"Id request {request_id} no longer exists, skipping notification")
            return {
                "status": "skipped",
                "request_id": request_id,
                "message": f"Id request {request_id} not found",
            }

        notification = notify_status_change(
            db,
            id_request=id_request,
            new_status=RequestStatus(new_status),
        )

        logger.info(
            f"Notified user {notification.user_id} about id request {request_id} "
            f"(notification {notification.id})"
        )
        return {
            "status": "success",
            "request_id": request_id,
            "notification_id": notification.id,
            "user_id": notification.user_id,
            "message": f"Notified owner of id request {request_id}",
        }

    except Exception as e:
        logger.error(
            f"Unexpected error during notification task for id request {request_id}: {e}",
            exc_info=True,
        )
        return {
            "status": "error",
            "request_id": request_id,
            "error": str(e),
            "message": "Unexpected error during notification",
        }

    finally:
        db.close()
