# app/models/id_request.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import DeliveryMethod, RequestStatus, RequestType
from app.models.timestamps import utcnow


class IdRequest(Base):
    __tablename__ = "id_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # PENDING / APPROVED / REJECTED / PROCESSING / READY / DELIVERED
    status = Column(
        Enum(RequestStatus, name="request_status", native_enum=False, length=20),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    type = Column(
        Enum(RequestType, name="request_type", native_enum=False, length=20),
        nullable=True,
    )

    delivery_method = Column(
        Enum(DeliveryMethod, name="delivery_method", native_enum=False, length=20),
        nullable=False,
        default=DeliveryMethod.PICKUP,
    )
    address = Column(Text, nullable=True)  # required for MAIL delivery

    photo_url = Column(String(500), nullable=True)
    reason = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    fee = Column(Numeric(6, 2), nullable=True)  # quoted at submission
    paid = Column(Boolean, nullable=False, default=False)

    request_date = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    user = relationship("User", back_populates="id_requests", lazy="joined")

    def __repr__(self) -> str:
        return f"<IdRequest id={self.id} user_id={self.user_id} status={self.status}>"
