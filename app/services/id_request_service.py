# app/services/id_request_service.py
import logging
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidStatusTransition
from app.models.enums import DeliveryMethod, RequestStatus, RequestType
from app.models.id_request import IdRequest
from app.models.user import User
from app.repositories import id_request_repository
from app.schemas.id_request import FeeQuote, IdRequestCreate, RequestSummary
from app.workers.queue import enqueue_status_notification

logger = logging.getLogger(__name__)

# Admin workflow. REJECTED and DELIVERED are terminal.
ALLOWED_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.PROCESSING, RequestStatus.REJECTED}),
    RequestStatus.PROCESSING: frozenset({RequestStatus.READY}),
    RequestStatus.READY: frozenset({RequestStatus.DELIVERED}),
    RequestStatus.REJECTED: frozenset(),
    RequestStatus.DELIVERED: frozenset(),
}


# Card fees, in dollars
STANDARD_FEE = Decimal("15.00")
REPLACEMENT_FEE = Decimal("20.00")
MAIL_DELIVERY_FEE = Decimal("5.00")


def quote_fee(
    request_type: RequestType,
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP,
) -> FeeQuote:
    """
    Fee owed for a request: the standard card fee, plus the replacement
    fee for lost/stolen/damaged cards, plus shipping for mail delivery.
    """
    replacement = REPLACEMENT_FEE if request_type == RequestType.REPLACEMENT else Decimal("0.00")
    shipping = MAIL_DELIVERY_FEE if delivery_method == DeliveryMethod.MAIL else Decimal("0.00")
    return FeeQuote(
        type=request_type,
        delivery_method=delivery_method,
        base=STANDARD_FEE,
        replacement=replacement,
        shipping=shipping,
        total=STANDARD_FEE + replacement + shipping,
    )


def can_transition(current: RequestStatus, new: RequestStatus) -> bool:
    return new == current or new in ALLOWED_TRANSITIONS[current]


def submit_request(
    db: Session,
    *,
    student: User,
    obj_in: IdRequestCreate,
) -> IdRequest:
    """
    学生提交证件申请
    status 初始为 PENDING, paid 为 False, fee 按表单计算
    """
    quote = quote_fee(obj_in.type, obj_in.delivery_method)
    mail = obj_in.delivery_method == DeliveryMethod.MAIL
    id_request = IdRequest(
        user=student,
        type=obj_in.type,
        reason=obj_in.reason.value if obj_in.reason else None,
        delivery_method=obj_in.delivery_method,
        address=obj_in.address.strip() if mail else None,
        fee=quote.total,
        photo_url=obj_in.photo_url,
        comments=obj_in.comments,
    )
    id_request = id_request_repository.create(db, id_request)
    logger.info(
        f"User {student.id} submitted id request {id_request.id} (type={obj_in.type.value}, fee={quote.total})"
    )
    return id_request


def get_request(db: Session, request_id: int) -> Optional[IdRequest]:
    return id_request_repository.get(db, request_id)


def list_requests_for_user(db: Session, *, user: User) -> List[IdRequest]:
    return id_request_repository.find_by_user_order_by_request_date_desc(db, user)


def list_all_requests(
    db: Session,
    *,
    status: Optional[RequestStatus] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[IdRequest]:
    """
    管理员列表：按状态 / 院系过滤，按姓名、学号或申请编号搜索
    """
    if department or (search and search.strip()):
        return id_request_repository.search(
            db, text=search, status=status, department=department, skip=skip, limit=limit
        )
    if status is not None:
        return id_request_repository.find_by_status(db, status, skip=skip, limit=limit)
    return id_request_repository.find_all_order_by_request_date_desc(
        db, skip=skip, limit=limit
    )


def change_status(
    db: Session,
    *,
    id_request: IdRequest,
    new_status: RequestStatus,
    comments: Optional[str] = None,
) -> IdRequest:
    """
    管理员修改申请状态：
      - 只允许 ALLOWED_TRANSITIONS 中的边
      - 状态真正变化后入队通知任务
    """
    old_status = id_request.status
    if not can_transition(old_status, new_status):
        logger.warning(
            f"Rejected transition {old_status.value} -> {new_status.value} "
            f"for id request {id_request.id}"
        )
        raise InvalidStatusTransition(old_status, new_status)

    changes = {"status": new_status}
    if comments is not None:
        changes["comments"] = comments
    id_request = id_request_repository.update(db, id_request, changes)

    if new_status != old_status:
        logger.info(
            f"Id request {id_request.id}: {old_status.value} -> {new_status.value}"
        )
        enqueue_status_notification(id_request.id, old_status.value, new_status.value)

    return id_request


def mark_paid(db: Session, *, id_request: IdRequest, paid: bool = True) -> IdRequest:
    id_request = id_request_repository.update(db, id_request, {"paid": paid})
    logger.info(f"Id request {id_request.id} paid={paid}")
    return id_request


def delete_request(db: Session, *, id_request: IdRequest) -> None:
    request_id = id_request.id
    id_request_repository.delete(db, id_request)
    logger.info(f"Deleted id request {request_id}")


def request_summary(db: Session) -> RequestSummary:
    by_status = id_request_repository.count_by_status(db)
    return RequestSummary(
        total=sum(by_status.values()),
        paid=id_request_repository.count_paid(db),
        by_status=by_status,
        by_department=id_request_repository.count_by_department(db),
    )
