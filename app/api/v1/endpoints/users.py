# app/api/v1/endpoints/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import get_current_admin, get_current_user
from app.db.deps import get_db
from app.models.user import User
from app.repositories import user_repository
from app.schemas.user import UserPublic, UserRolesUpdate, UserUpdate
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserPublic)
def update_me(
    obj_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_user(db, db_obj=current_user, obj_in=obj_in)


@router.get("/", response_model=List[UserPublic])
def list_users(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    skip: int = 0,
    limit: int = 100,
):
    return user_repository.list_all(db, skip=skip, limit=limit)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_repository.get(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}/roles", response_model=UserPublic)
def update_user_roles(
    user_id: int,
    obj_in: UserRolesUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    return user_service.set_roles(db, db_obj=user, roles=obj_in.roles)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete themselves")
    # 仍有申请记录时抛出 UserHasRequests -> 409
    user_service.delete_user(db, db_obj=user)
    return None
