# app/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.enums import Role
from app.models.timestamps import utcnow


class UserRoleEntry(Base):
    """One row per (user, role); the composite key keeps roles a set."""

    __tablename__ = "user_roles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role = Column(
        Enum(Role, name="role", native_enum=False, length=20),
        primary_key=True,
    )

    def __init__(self, role: Role):
        self.role = Role(role)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(50), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    department = Column(String(100), nullable=False)
    program = Column(String(100), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    role_entries = relationship(
        "UserRoleEntry",
        collection_class=set,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    # user.roles behaves as a set of Role
    roles = association_proxy("role_entries", "role", creator=UserRoleEntry)

    # No cascade: a user who still owns requests cannot be deleted.
    id_requests = relationship("IdRequest", back_populates="user", passive_deletes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
