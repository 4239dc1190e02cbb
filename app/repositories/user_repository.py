# app/repositories/user_repository.py
"""
User store.

Explicit query functions over the ``users`` table. create() and update()
validate the record, enforce the email / student_id uniqueness rule
and commit. Lookups that find nothing return ``None`` (or ``False``).
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import FieldValidationError, UniquenessViolation, UserHasRequests
from app.models.enums import Role
from app.models.timestamps import utcnow
from app.models.user import User
from app.repositories import id_request_repository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "student_id",
    "first_name",
    "last_name",
    "email",
    "password",
    "department",
    "program",
)

# Columns callers may change through update(); id and created_at are immutable.
MUTABLE_FIELDS = frozenset(REQUIRED_FIELDS) | {"roles"}


def _validate(user: User) -> None:
    for field in REQUIRED_FIELDS:
        value = getattr(user, field)
        if value is None or not str(value).strip():
            raise FieldValidationError(field, "must not be blank")

    try:
        validate_email(user.email, check_deliverability=False)
    except EmailNotValidError as e:
        raise FieldValidationError("email", str(e)) from e


def _check_unique(db: Session, user: User) -> None:
    # Exclude the record itself so updates that keep the same email pass.
    for field in ("email", "student_id"):
        column = getattr(User, field)
        value = getattr(user, field)
        query = db.query(User.id).filter(column == value)
        if user.id is not None:
            query = query.filter(User.id != user.id)
        if db.query(query.exists()).scalar():
            raise UniquenessViolation(field, value)


def _commit(db: Session, user: User) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent insert; the unique index caught it.
        db.rollback()
        message = str(e.orig).lower()
        field = "student_id" if "student_id" in message else "email"
        raise UniquenessViolation(field, getattr(user, field)) from e
    db.refresh(user)


def create(db: Session, user: User) -> User:
    """
    Persist a new user. Raises FieldValidationError for blank/malformed
    fields and UniquenessViolation when email or student_id is taken.
    """
    _validate(user)
    _check_unique(db, user)

    db.add(user)
    _commit(db, user)
    logger.debug(f"created user id={user.id} email={user.email}")
    return user


def get(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def find_by_email(db: Session, email: str) -> Optional[User]:
    """WHERE email = :email"""
    return db.query(User).filter(User.email == email).first()


def find_by_student_id(db: Session, student_id: str) -> Optional[User]:
    """WHERE student_id = :student_id"""
    return db.query(User).filter(User.student_id == student_id).first()


def exists_by_email(db: Session, email: str) -> bool:
    return db.query(db.query(User.id).filter(User.email == email).exists()).scalar()


def exists_by_student_id(db: Session, student_id: str) -> bool:
    return db.query(
        db.query(User.id).filter(User.student_id == student_id).exists()
    ).scalar()


def list_all(db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.id.asc()).offset(skip).limit(limit).all()


def count(db: Session) -> int:
    return db.query(func.count(User.id)).scalar()


def update(db: Session, user: User, changes: Mapping[str, Any]) -> User:
    """
    Apply ``changes`` to a persisted user. ``roles`` replaces the whole set.
    updated_at is always refreshed, including role-only changes which do not
    touch the users row.
    """
    unknown = set(changes) - MUTABLE_FIELDS
    if unknown:
        raise FieldValidationError(sorted(unknown)[0], "is not a mutable field")

    for field, value in changes.items():
        if field == "roles":
            user.roles = {Role(r) for r in _as_iterable(value)}
        else:
            setattr(user, field, value)

    try:
        _validate(user)
        _check_unique(db, user)
    except (FieldValidationError, UniquenessViolation):
        db.rollback()
        raise

    user.updated_at = utcnow()
    db.add(user)
    _commit(db, user)
    logger.debug(f"updated user id={user.id} fields={sorted(changes)}")
    return user


def delete(db: Session, user: User) -> None:
    """
    Delete a user and their roles. Requests are never cascaded: a user who
    still owns any raises UserHasRequests and the session is left usable.
    """
    user_id = user.id
    n = id_request_repository.count_for_user_id(db, user_id)
    if n:
        raise UserHasRequests(user_id, n)

    db.delete(user)
    try:
        db.commit()
    except IntegrityError as e:
        # A request was inserted for this user after the count above.
        db.rollback()
        raise UserHasRequests(
            user_id, id_request_repository.count_for_user_id(db, user_id)
        ) from e
    logger.debug(f"deleted user id={user_id}")


def _as_iterable(value) -> Iterable:
    if value is None:
        return ()
    if isinstance(value, (str, Role)):
        return (value,)
    return value
