# app/schemas/notification.py
from datetime import datetime

from pydantic import BaseModel

from app.models.enums import NotificationType


class NotificationPublic(BaseModel):
    id: int
    id_request_id: int | None = None
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
