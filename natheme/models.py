# natheme/models.py

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import JSON, Column, Enum as SAEnum
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    OWNER = "owner"


# Users

class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int|None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    email: str = Field(index=True, unique=True, nullable=False)
    password: str = Field(nullable=False)  # bcrypt hash
    phone: str|None = None
    location: str|None = None
    role: Role = Field(
        default=Role.CUSTOMER,
        sa_column=Column(
            SAEnum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
            nullable=False,
            default=Role.CUSTOMER,
        ),
    )
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now, nullable=False, sa_column_kwargs={"onupdate": utc_now}
    )

    @property
    def is_admin(self) -> bool:
        return self.role in (Role.ADMIN, Role.OWNER)

class UserRead(SQLModel):
    id: int
    name: str
    email: str
    phone: str|None = None
    location: str|None = None
    role: Role
    created_at: datetime|None = None

class UserCreate(SQLModel):
    name: str
    email: str
    password: str
    phone: str|None = None
    location: str|None = None

class UserUpdate(SQLModel):
    name: str|None = None
    email: str|None = None
    phone: str|None = None
    location: str|None = None


# Auth requests / responses

class SignupRequest(SQLModel):
    name: str
    email: str
    password: str
    confirmPassword: str
    phone: str|None = None
    location: str|None = None

class SigninRequest(SQLModel):
    email: str
    password: str

class RoleChangeRequest(SQLModel):
    email: str|None = None

class AuthResponse(SQLModel):
    message: str
    user: UserRead
    token: str

class MessageResponse(SQLModel):
    message: str


# Projects

class Project(SQLModel, table=True):
    __tablename__ = "Projects"

    id: int|None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    description: str|None = None
    image_urls: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now, nullable=False, sa_column_kwargs={"onupdate": utc_now}
    )

class ProjectUpdate(SQLModel):
    name: str|None = None
    description: str|None = None
    image_urls: list[str]|None = None

class ProjectResponse(SQLModel):
    message: str
    project: Project


# Catalogs

class Catalog(SQLModel, table=True):
    __tablename__ = "catalogs"

    id: int|None = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    description: str|None = None
    file_path: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)

class CatalogResponse(SQLModel):
    message: str
    catalog: Catalog


# Contact form

class ContactMessage(SQLModel, table=True):
    __tablename__ = "ContactMessages"

    id: int|None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    email: str = Field(nullable=False)
    message: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)

class ContactCreate(SQLModel):
    name: str
    email: str
    message: str

class ContactResponse(SQLModel):
    success: bool
    message: str


# Admin dashboard

class DashboardSummary(SQLModel):
    totalProjects: int
    totalCatalogs: int
    totalUsers: int

class DashboardResponse(SQLModel):
    message: str
    data: DashboardSummary
