# app/services/user_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import UserHasRequests
from app.core.security import get_password_hash
from app.models.enums import Role
from app.models.user import User
from app.repositories import user_repository
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def register_user(db: Session, *, obj_in: UserCreate) -> User:
    """
    Create an account. The password is stored as a bcrypt hash; users who
    ask for no roles become students.
    """
    user = User(
        student_id=obj_in.student_id,
        first_name=obj_in.first_name,
        last_name=obj_in.last_name,
        email=obj_in.email,
        password=get_password_hash(obj_in.password),
        department=obj_in.department,
        program=obj_in.program,
        roles=set(obj_in.roles) if obj_in.roles else {Role.STUDENT},
    )
    user = user_repository.create(db, user)
    logger.info(f"Registered user {user.id} ({user.email}) roles={sorted(r.value for r in user.roles)}")
    return user


def update_user(db: Session, *, db_obj: User, obj_in: UserUpdate) -> User:
    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    if "password" in update_data:
        update_data["password"] = get_password_hash(update_data["password"])
    return user_repository.update(db, db_obj, update_data)


def set_roles(db: Session, *, db_obj: User, roles: set[Role]) -> User:
    user = user_repository.update(db, db_obj, {"roles": roles})
    logger.info(f"Roles of user {user.id} set to {sorted(r.value for r in roles)}")
    return user


def delete_user(db: Session, *, db_obj: User) -> None:
    user_id = db_obj.id
    try:
        user_repository.delete(db, db_obj)
    except UserHasRequests as e:
        logger.warning(f"Refusing to delete user {user_id}: {e.count} id request(s) remain")
        raise
    logger.info(f"Deleted user {user_id}")


def ensure_default_admin(db: Session) -> Optional[User]:
    """
    Create the bootstrap administrator from settings if configured and
    missing. Returns the admin user, or None when not configured.
    """
    email = settings.DEFAULT_ADMIN_EMAIL
    password = settings.DEFAULT_ADMIN_PASSWORD
    if not email or not password:
        return None

    existing = user_repository.find_by_email(db, email)
    if existing:
        return existing

    admin = User(
        student_id="ADMIN-0001",
        first_name="Admin",
        last_name="User",
        email=email,
        password=get_password_hash(password),
        department="Administration",
        program="Staff",
        roles={Role.ADMIN},
    )
    admin = user_repository.create(db, admin)
    logger.info(f"Created default admin {admin.email}")
    return admin
