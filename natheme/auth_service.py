# natheme/auth_service.py

"""
Account operations behind the auth and admin endpoints.

Each operation returns either its success value or a ``Failure`` describing
why the request was refused; routers turn failures into HTTP responses with
``natheme.errors.unwrap``.
"""

from dataclasses import dataclass
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from natheme.errors import ErrorKind, Failure, Result
from natheme.models import Role, SignupRequest, SigninRequest, User
from natheme.settings import AuthConfig
from natheme.utils import (
    create_access_token,
    get_password_hash,
    is_valid_password,
    verify_password,
)


logger = logging.getLogger(__name__)


MISSING_FIELDS = "Please fill in all required fields"
PASSWORD_MISMATCH = "Passwords do not match"
WEAK_PASSWORD = "Password must be at least 8 characters long and contain at least one letter and one number."
USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid credentials"
SERVER_ERROR = "Server error"


@dataclass(frozen=True)
class AuthSuccess:
    user: User
    token: str


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()

def find_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def signup(session: Session, request: SignupRequest, config: AuthConfig) -> Result[AuthSuccess]:
    """
    Register a customer account and issue its first session token.

    Checks run in order and the first failing one is returned: required
    fields, password confirmation, password policy, email uniqueness.
    """
    required = (request.name, request.email, request.password, request.confirmPassword)
    if any(not value or not value.strip() for value in required):
        return Failure(ErrorKind.VALIDATION, MISSING_FIELDS)
    if request.password != request.confirmPassword:
        return Failure(ErrorKind.VALIDATION, PASSWORD_MISMATCH)
    if not is_valid_password(request.password):
        return Failure(ErrorKind.VALIDATION, WEAK_PASSWORD)

    email = normalize_email(request.email)
    try:
        if find_user_by_email(session, email) is not None:
            return Failure(ErrorKind.CONFLICT, USER_EXISTS)

        user = User(
            name=request.name.strip(),
            email=email,
            password=get_password_hash(request.password),
            phone=request.phone,
            location=request.location,
            role=Role.CUSTOMER,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
    except IntegrityError:
        # lost the race against a concurrent signup for the same email
        session.rollback()
        logger.info(f"Duplicate signup rejected by the store for {email}")
        return Failure(ErrorKind.CONFLICT, USER_EXISTS)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Signup error")
        return Failure(ErrorKind.INTERNAL, SERVER_ERROR)

    logger.info(f"User ID {user.id} registered.")
    return AuthSuccess(user=user, token=create_access_token(user, config))


def signin(session: Session, request: SigninRequest, config: AuthConfig) -> Result[AuthSuccess]:
    """
    Check credentials and issue a session token.

    Unknown emails and wrong passwords produce the same failure so callers
    cannot tell which accounts exist.
    """
    try:
        user = find_user_by_email(session, request.email)
    except SQLAlchemyError:
        logger.exception("Signin error")
        return Failure(ErrorKind.INTERNAL, SERVER_ERROR)

    if user is None or not verify_password(request.password, user.password):
        return Failure(ErrorKind.VALIDATION, INVALID_CREDENTIALS)

    logger.info(f"User ID {user.id} logged in successfully.")
    return AuthSuccess(user=user, token=create_access_token(user, config))


def _change_role(session: Session, user: User, role: Role) -> Result[User]:
    user.role = role
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Role change to {role.value} failed for user ID {user.id}")
        return Failure(ErrorKind.INTERNAL, SERVER_ERROR)
    return user


def promote_to_admin(session: Session, email: str | None) -> Result[str]:
    email = normalize_email(email)
    if not email:
        return Failure(ErrorKind.VALIDATION, "Email is required")

    user = find_user_by_email(session, email)
    if user is None:
        return Failure(ErrorKind.NOT_FOUND, "User not found")
    if user.is_admin:
        return Failure(ErrorKind.VALIDATION, "User is already an admin")

    result = _change_role(session, user, Role.ADMIN)
    if isinstance(result, Failure):
        return result
    logger.info(f"User ID {user.id} promoted to admin.")
    return f"User {email} promoted to admin successfully"


def demote_to_customer(session: Session, email: str | None) -> Result[str]:
    email = normalize_email(email)
    if not email:
        return Failure(ErrorKind.VALIDATION, "Email is required")

    user = find_user_by_email(session, email)
    if user is None:
        return Failure(ErrorKind.NOT_FOUND, "User not found")
    if user.role != Role.ADMIN:
        return Failure(ErrorKind.VALIDATION, "User is not an admin")

    result = _change_role(session, user, Role.CUSTOMER)
    if isinstance(result, Failure):
        return result
    logger.info(f"User ID {user.id} demoted to customer.")
    return f"User {email} demoted to customer successfully"


def ensure_owner_account(
    session: Session,
    config: AuthConfig,
    name: str = "Owner",
    password: str | None = None,
) -> User | None:
    """
    Make sure the configured owner email belongs to an account with the owner role.

    An existing account is raised to owner. A missing one is created only when
    a password is supplied. Returns the owner, or None when nothing is configured.
    """
    if not config.owner_email:
        return None

    owner = find_user_by_email(session, config.owner_email)
    if owner is None:
        if not password:
            logger.warning(f"Owner account {config.owner_email} does not exist and no OWNER_PASSWORD is set.")
            return None
        owner = User(
            name=name,
            email=config.owner_email,
            password=get_password_hash(password),
            role=Role.OWNER,
        )
        session.add(owner)
        session.commit()
        session.refresh(owner)
        logger.info("Owner account created.")
    elif owner.role != Role.OWNER:
        owner.role = Role.OWNER
        session.add(owner)
        session.commit()
        session.refresh(owner)
        logger.info(f"User ID {owner.id} raised to owner.")
    return owner
