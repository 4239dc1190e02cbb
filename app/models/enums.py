# app/models/enums.py
import enum


class Role(str, enum.Enum):
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    DELIVERED = "DELIVERED"


class RequestType(str, enum.Enum):
    NEW = "NEW"
    REPLACEMENT = "REPLACEMENT"


class NotificationType(str, enum.Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class DeliveryMethod(str, enum.Enum):
    PICKUP = "PICKUP"
    MAIL = "MAIL"


class ReplacementReason(str, enum.Enum):
    LOST = "lost"
    STOLEN = "stolen"
    DAMAGED = "damaged"
    NAME_CHANGE = "name_change"
    EXPIRED = "expired"
