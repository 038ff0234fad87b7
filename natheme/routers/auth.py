# natheme/routers/auth.py

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from natheme import auth_service
from natheme.db import get_session
from natheme.errors import unwrap
from natheme.models import AuthResponse, SigninRequest, SignupRequest, User, UserRead
from natheme.settings import AuthConfig, get_auth_config
from natheme.utils import get_current_user


router = APIRouter(prefix="/api/auth", tags=["auth"])


# User Registration Endpoint
@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    session: Annotated[Session, Depends(get_session)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
):
    """
    Register a new customer account.

    Returns the created user (never its password) and a session token.
    """
    result = unwrap(auth_service.signup(session, request, config))
    return AuthResponse(
        message="User registered successfully",
        user=UserRead.model_validate(result.user),
        token=result.token,
    )

# Login Endpoint
@router.post("/signin", response_model=AuthResponse)
def signin(
    request: SigninRequest,
    session: Annotated[Session, Depends(get_session)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
):
    result = unwrap(auth_service.signin(session, request, config))
    return AuthResponse(
        message="Login successful",
        user=UserRead.model_validate(result.user),
        token=result.token,
    )

# Get Current User Endpoint
@router.get("/me", response_model=UserRead)
async def read_users_me(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user
