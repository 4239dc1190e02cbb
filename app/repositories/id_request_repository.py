# app/repositories/id_request_repository.py
"""
IdRequest store.

No workflow rules live here: update() accepts any status. The admin
workflow is enforced in app.services.id_request_service.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session

from app.core.exceptions import FieldValidationError
from app.models.enums import DeliveryMethod, RequestStatus, RequestType
from app.models.id_request import IdRequest
from app.models.timestamps import utcnow
from app.models.user import User

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = frozenset(
    {
        "status",
        "type",
        "delivery_method",
        "address",
        "photo_url",
        "reason",
        "comments",
        "fee",
        "paid",
    }
)

_ENUM_FIELDS = {
    "status": RequestStatus,
    "type": RequestType,
    "delivery_method": DeliveryMethod,
}


def _newest_first(query):
    # id breaks ties between requests stamped with the same request_date
    return query.order_by(IdRequest.request_date.desc(), IdRequest.id.desc())


def _coerce(field: str, value: Any) -> Any:
    if field in _ENUM_FIELDS and value is not None:
        try:
            return _ENUM_FIELDS[field](value)
        except ValueError as e:
            raise FieldValidationError(field, f"invalid value {value!r}") from e
    if field == "paid":
        return bool(value)
    if field == "fee" and value is not None:
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise FieldValidationError(field, f"invalid amount {value!r}") from e
    return value


def create(db: Session, id_request: IdRequest) -> IdRequest:
    """
    Persist a new request. status defaults to PENDING, paid to False,
    delivery_method to PICKUP and request_date to now when the caller leaves
    them unset. updated_at is always the creation time, even for a
    back-dated request_date.
    """
    if id_request.user is None and id_request.user_id is None:
        raise FieldValidationError("user", "must reference a user")

    if id_request.status is None:
        id_request.status = RequestStatus.PENDING
    if id_request.paid is None:
        id_request.paid = False
    if id_request.delivery_method is None:
        id_request.delivery_method = DeliveryMethod.PICKUP
    now = utcnow()
    if id_request.request_date is None:
        id_request.request_date = now
    id_request.updated_at = now

    db.add(id_request)
    db.commit()
    db.refresh(id_request)
    logger.debug(f"created id_request id={id_request.id} user_id={id_request.user_id}")
    return id_request


def get(db: Session, request_id: int) -> Optional[IdRequest]:
    return db.get(IdRequest, request_id)


def find_by_user_order_by_request_date_desc(db: Session, user: User) -> List[IdRequest]:
    """WHERE user_id = :user.id ORDER BY request_date DESC"""
    return _newest_first(
        db.query(IdRequest).filter(IdRequest.user_id == user.id)
    ).all()


def find_all_order_by_request_date_desc(
    db: Session,
    *,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[IdRequest]:
    """ORDER BY request_date DESC over every request."""
    query = _newest_first(db.query(IdRequest)).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def find_by_status(
    db: Session,
    status: RequestStatus,
    *,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[IdRequest]:
    """WHERE status = :status ORDER BY request_date DESC"""
    query = _newest_first(
        db.query(IdRequest).filter(IdRequest.status == status)
    ).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def search(
    db: Session,
    *,
    text: Optional[str] = None,
    status: Optional[RequestStatus] = None,
    department: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[IdRequest]:
    """
    Admin listing, newest first. ``text`` matches (case-insensitive,
    substring) the owner's first name, last name, full name, student_id
    or the request id. ``status`` and ``department`` are exact filters.
    """
    query = db.query(IdRequest).join(User, IdRequest.user_id == User.id)
    if status is not None:
        query = query.filter(IdRequest.status == status)
    if department:
        query = query.filter(User.department == department)
    if text and text.strip():
        pattern = f"%{text.strip().lower()}%"
        full_name = func.lower(User.first_name + " " + User.last_name)
        query = query.filter(
            or_(
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                full_name.like(pattern),
                func.lower(User.student_id).like(pattern),
                cast(IdRequest.id, String).like(pattern),
            )
        )
    query = _newest_first(query).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_for_user_id(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(IdRequest.id))
        .filter(IdRequest.user_id == user_id)
        .scalar()
    )


def count_for_user(db: Session, user: User) -> int:
    return count_for_user_id(db, user.id)


def count_by_status(db: Session) -> Dict[RequestStatus, int]:
    counts = {status: 0 for status in RequestStatus}
    rows = (
        db.query(IdRequest.status, func.count(IdRequest.id))
        .group_by(IdRequest.status)
        .all()
    )
    for status, n in rows:
        counts[RequestStatus(status)] = n
    return counts


def count_by_department(db: Session) -> Dict[str, int]:
    rows = (
        db.query(User.department, func.count(IdRequest.id))
        .join(User, IdRequest.user_id == User.id)
        .group_by(User.department)
        .order_by(User.department.asc())
        .all()
    )
    return {department: n for department, n in rows}


def count_paid(db: Session) -> int:
    return db.query(func.count(IdRequest.id)).filter(IdRequest.paid.is_(True)).scalar()


def update(db: Session, id_request: IdRequest, changes: Mapping[str, Any]) -> IdRequest:
    unknown = set(changes) - MUTABLE_FIELDS
    if unknown:
        raise FieldValidationError(sorted(unknown)[0], "is not a mutable field")

    # Coerce everything first so a bad value leaves the instance untouched.
    coerced = {field: _coerce(field, value) for field, value in changes.items()}
    if "status" in coerced and coerced["status"] is None:
        raise FieldValidationError("status", "must not be null")
    if "delivery_method" in coerced and coerced["delivery_method"] is None:
        raise FieldValidationError("delivery_method", "must not be null")

    for field, value in coerced.items():
        setattr(id_request, field, value)

    id_request.updated_at = utcnow()
    db.add(id_request)
    db.commit()
    db.refresh(id_request)
    logger.debug(f"updated id_request id={id_request.id} fields={sorted(changes)}")
    return id_request


def delete(db: Session, id_request: IdRequest) -> None:
    request_id = id_request.id
    db.delete(id_request)
    db.commit()
    logger.debug(f"deleted id_request id={request_id}")
