# app/schemas/id_request.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, model_validator

from app.models.enums import DeliveryMethod, ReplacementReason, RequestStatus, RequestType


class IdRequestCreate(BaseModel):
    type: RequestType = RequestType.NEW
    reason: ReplacementReason | None = None
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    address: str | None = None
    photo_url: str | None = None
    comments: str | None = None

    @model_validator(mode="after")
    def check_form(self):
        if self.type == RequestType.REPLACEMENT and self.reason is None:
            raise ValueError("reason is required for a replacement card")
        if self.delivery_method == DeliveryMethod.MAIL and not (self.address or "").strip():
            raise ValueError("address is required for mail delivery")
        return self


class IdRequestStatusUpdate(BaseModel):
    status: RequestStatus
    comments: str | None = None


class IdRequestPaymentUpdate(BaseModel):
    paid: bool = True


class FeeQuote(BaseModel):
    """费用明细：基础 + 补办 + 邮寄"""
    type: RequestType
    delivery_method: DeliveryMethod
    base: Decimal
    replacement: Decimal
    shipping: Decimal
    total: Decimal


class IdRequestPublic(BaseModel):
    id: int
    user_id: int
    status: RequestStatus
    type: RequestType | None = None
    delivery_method: DeliveryMethod
    address: str | None = None
    photo_url: str | None = None
    reason: str | None = None
    comments: str | None = None
    fee: Decimal | None = None
    paid: bool
    request_date: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class IdRequestAdminView(IdRequestPublic):
    """管理员视图：附带学生信息"""
    student_id: str
    student_name: str
    department: str
    program: str

    @classmethod
    def from_request(cls, r) -> "IdRequestAdminView":
        return cls(
            id=r.id,
            user_id=r.user_id,
            status=r.status,
            type=r.type,
            delivery_method=r.delivery_method,
            address=r.address,
            photo_url=r.photo_url,
            reason=r.reason,
            comments=r.comments,
            fee=r.fee,
            paid=r.paid,
            request_date=r.request_date,
            updated_at=r.updated_at,
            student_id=r.user.student_id,
            student_name=r.user.full_name,
            department=r.user.department,
            program=r.user.program,
        )


class RequestSummary(BaseModel):
    total: int
    paid: int
    by_status: dict[RequestStatus, int]
    by_department: dict[str, int]
