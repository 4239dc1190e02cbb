# app/api/v1/endpoints/id_requests.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.security import get_current_admin, get_current_student, get_current_user
from app.db.deps import get_db
from app.models.enums import DeliveryMethod, RequestStatus, RequestType
from app.models.id_request import IdRequest
from app.models.user import User
from app.schemas.id_request import (
    FeeQuote,
    IdRequestAdminView,
    IdRequestCreate,
    IdRequestPaymentUpdate,
    IdRequestPublic,
    IdRequestStatusUpdate,
    RequestSummary,
)
from app.services import id_request_service

router = APIRouter(prefix="/id-requests", tags=["id-requests"])


def _get_request_or_404(db: Session, request_id: int) -> IdRequest:
    r = id_request_service.get_request(db, request_id)
    if not r:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Id request not found")
    return r


@router.post("/", response_model=IdRequestPublic, status_code=status.HTTP_201_CREATED)
def submit_request(
    obj_in: IdRequestCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    学生提交证件申请。
    """
    return id_request_service.submit_request(db, student=current_student, obj_in=obj_in)


@router.get("/me", response_model=List[IdRequestPublic])
def list_my_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    查看自己的所有申请（最新的在前）。
    """
    return id_request_service.list_requests_for_user(db, user=current_user)


@router.get("/quote", response_model=FeeQuote)
def get_fee_quote(
    type: RequestType = RequestType.NEW,
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP,
    current_user: User = Depends(get_current_user),
):
    """
    申请前预估费用。
    """
    return id_request_service.quote_fee(type, delivery_method)


@router.get("/summary", response_model=RequestSummary)
def get_summary(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return id_request_service.request_summary(db)


@router.get("/", response_model=List[IdRequestAdminView])
def list_all_requests(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    department: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    """
    search 匹配学生姓名、学号或申请编号
    """
    rs = id_request_service.list_all_requests(
        db,
        status=status_filter,
        department=department,
        search=search,
        skip=skip,
        limit=limit,
    )
    return [IdRequestAdminView.from_request(r) for r in rs]


@router.get("/{request_id}", response_model=IdRequestPublic)
def get_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    r = _get_request_or_404(db, request_id)
    # 学生只能看自己的申请；管理员可看全部
    if r.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=404, detail="Id request not found")
    return r


@router.put("/{request_id}/status", response_model=IdRequestPublic)
def update_status(
    request_id: int,
    obj_in: IdRequestStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    r = _get_request_or_404(db, request_id)
    # 非法状态流转抛出 InvalidStatusTransition -> 409
    return id_request_service.change_status(
        db, id_request=r, new_status=obj_in.status, comments=obj_in.comments
    )


@router.put("/{request_id}/payment", response_model=IdRequestPublic)
def update_payment(
    request_id: int,
    obj_in: IdRequestPaymentUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    r = _get_request_or_404(db, request_id)
    return id_request_service.mark_paid(db, id_request=r, paid=obj_in.paid)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    r = _get_request_or_404(db, request_id)
    id_request_service.delete_request(db, id_request=r)
    return None
