# natheme/utils.py

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any
import logging
import re

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session

from natheme.db import get_session
from natheme.models import User, Role
from natheme.settings import AuthConfig, get_auth_config


logger = logging.getLogger(__name__)


BCRYPT_ROUNDS = 10

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# At least 8 characters, one letter, one digit; letters, digits and !@#$%^&* only
PASSWORD_PATTERN = re.compile(r"(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d!@#$%^&*]{8,}", re.ASCII)

bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify that a plain password matches the given hashed password.

    Args:
        plain_password (str): The plain text password provided by the user.
        hashed_password (str): The hashed password stored in the database.

    Returns:
        bool: True if the passwords match, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """
    Hash a plain password using bcrypt with the configured cost factor.

    Args:
        password (str): The plain text password to hash.

    Returns:
        str: The hashed password.
    """
    return pwd_context.hash(password)

def is_valid_password(password: str) -> bool:
    return PASSWORD_PATTERN.fullmatch(password) is not None

def create_access_token(user: User, config: AuthConfig, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed session token carrying the user's id and email.

    Args:
        user (User): The user the token is issued for.
        config (AuthConfig): Signing key, algorithm and default lifetime.
        expires_delta (timedelta, optional): Overrides the configured lifetime.

    Returns:
        str: The encoded JWT.
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta if expires_delta is not None else config.token_lifetime)
    to_encode = {"id": user.id, "email": user.email, "iat": issued_at, "exp": expire}
    return jwt.encode(to_encode, config.secret_key, algorithm=config.algorithm)

def decode_access_token(token: str, config: AuthConfig) -> dict[str, Any]:
    """
    Verify a session token and return its claims.

    Raises:
        JWTError: If the signature is invalid, the token is malformed or expired.
    """
    return jwt.decode(token, config.secret_key, algorithms=[config.algorithm])


# Dependency to get current user
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[Session, Depends(get_session)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> User:
    """
    Resolve the caller from the bearer token in the Authorization header.

    Returns:
        User: The authenticated user, with its current role from the database.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired, or names
            a user that no longer exists.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(credentials.credentials, config)
        user_id = payload.get("id")
        if not isinstance(user_id, int):
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = session.get(User, user_id)
    if user is None:
        raise credentials_exception
    logger.debug(f"Decoded token for user ID: {user.id}, Role: {user.role.value}")
    return user

# Dependency to get current admin user
async def get_current_admin_user(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """
    Ensure that the current user has admin privileges. The owner counts as an admin.
    """
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied: Admins only")
    return current_user

# Dependency to get current owner user, layered after the admin check
async def get_current_owner_user(current_user: Annotated[User, Depends(get_current_admin_user)]) -> User:
    if current_user.role != Role.OWNER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied: Owner only")
    return current_user
