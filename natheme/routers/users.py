# natheme/routers/users.py

from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlmodel import Session, col, select

from natheme.auth_service import find_user_by_email, normalize_email
from natheme.db import get_session
from natheme.models import MessageResponse, Role, User, UserCreate, UserRead, UserUpdate, utc_now
from natheme.utils import get_current_admin_user, get_password_hash


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


# Get All Users (Admin Only)
@router.get("", response_model=list[UserRead])
def read_users(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    return session.exec(select(User).order_by(User.id)).all()

# Search users by name, email or phone (Admin Only)
@router.get("/search", response_model=list[UserRead])
def search_users(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    q: str | None = None,
):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Please provide a search query")

    pattern = f"%{q.strip()}%"
    statement = (
        select(User)
        .where(or_(col(User.name).ilike(pattern), col(User.email).ilike(pattern), col(User.phone).ilike(pattern)))
        .order_by(User.id)
    )
    return session.exec(statement).all()

# Create User (Admin Only)
@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    user_create: UserCreate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    """
    Create a customer account on someone's behalf.

    Raises:
        HTTPException: If a required field is blank or the email is already registered.
    """
    if not user_create.name.strip() or not normalize_email(user_create.email) or not user_create.password:
        raise HTTPException(status_code=400, detail="Please fill in all required fields")
    if find_user_by_email(session, user_create.email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        name=user_create.name.strip(),
        email=normalize_email(user_create.email),
        password=get_password_hash(user_create.password),
        phone=user_create.phone,
        location=user_create.location,
        role=Role.CUSTOMER,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"User ID {user.id} created by admin ID {admin_user.id}.")
    return user

# Update User (Admin Only)
@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    """
    Update a user's profile fields.

    Raises:
        HTTPException: 404 for an unknown user, 403 when an admin edits the
        owner account, 400 for a blank name or email or an email already in use.
    """
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role == Role.OWNER and admin_user.role != Role.OWNER:
        raise HTTPException(status_code=403, detail="Only the owner can edit the owner account")

    user_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in user_data:
        user_data["name"] = user_data["name"].strip()
    if "email" in user_data:
        user_data["email"] = normalize_email(user_data["email"])
    if any(key in user_data and not user_data[key] for key in ("name", "email")):
        raise HTTPException(status_code=400, detail="Please fill in all required fields")
    if "email" in user_data:
        existing_user = find_user_by_email(session, user_data["email"])
        if existing_user and existing_user.id != user_id:
            raise HTTPException(status_code=400, detail="User already exists")

    for key, value in user_data.items():
        setattr(user, key, value)
    user.updated_at = utc_now()

    session.add(user)
    session.commit()
    session.refresh(user)
    return user

# Delete User (Admin Only)
@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role == Role.OWNER:
        raise HTTPException(status_code=403, detail="The owner account cannot be deleted")

    session.delete(user)
    session.commit()
    logger.info(f"User ID {user_id} deleted by admin ID {admin_user.id}.")
    return MessageResponse(message="User deleted successfully")
