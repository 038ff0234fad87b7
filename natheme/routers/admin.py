# natheme/routers/admin.py

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy import func
from sqlmodel import Session, col, select

from natheme import auth_service
from natheme.db import get_session
from natheme.errors import unwrap
from natheme.models import (
    Catalog,
    CatalogResponse,
    DashboardResponse,
    DashboardSummary,
    MessageResponse,
    Project,
    ProjectResponse,
    ProjectUpdate,
    Role,
    RoleChangeRequest,
    User,
    UserRead,
)
from natheme.routers.catalogs import create_catalog, delete_catalog
from natheme.routers.projects import create_project, delete_project, store_project_images, update_project
from natheme.utils import get_current_admin_user, get_current_owner_user


router = APIRouter(prefix="/api/admin", tags=["admin"])


# Only the owner can promote/demote users
@router.put("/promote", response_model=MessageResponse)
def promote_to_admin(
    request: RoleChangeRequest,
    session: Annotated[Session, Depends(get_session)],
    owner: Annotated[User, Depends(get_current_owner_user)],
):
    return MessageResponse(message=unwrap(auth_service.promote_to_admin(session, request.email)))

@router.put("/demote", response_model=MessageResponse)
def demote_to_customer(
    request: RoleChangeRequest,
    session: Annotated[Session, Depends(get_session)],
    owner: Annotated[User, Depends(get_current_owner_user)],
):
    return MessageResponse(message=unwrap(auth_service.demote_to_customer(session, request.email)))


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard_summary(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    def count(model) -> int:
        return session.exec(select(func.count()).select_from(model)).one()

    return DashboardResponse(
        message="Dashboard summary",
        data=DashboardSummary(
            totalProjects=count(Project),
            totalCatalogs=count(Catalog),
            totalUsers=count(User),
        ),
    )

@router.get("/customers", response_model=list[UserRead])
def get_customers(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    return session.exec(select(User).where(User.role == Role.CUSTOMER).order_by(User.id)).all()

@router.get("/admins", response_model=list[UserRead])
def get_admins(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    statement = select(User).where(col(User.role).in_([Role.ADMIN, Role.OWNER])).order_by(User.id)
    return session.exec(statement).all()


# Project management

@router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def admin_add_project(
    request: Request,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    name: Annotated[str, Form()],
    description: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
):
    image_urls = store_project_images(request, images or [])
    project = create_project(session, name, description, image_urls)
    return ProjectResponse(message="Project added successfully", project=project)

@router.put("/projects/{project_id}", response_model=ProjectResponse)
def admin_update_project(
    project_id: int,
    project_update: ProjectUpdate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    project = update_project(session, project_id, project_update)
    return ProjectResponse(message="Project updated successfully", project=project)

@router.delete("/projects/{project_id}", response_model=MessageResponse)
def admin_delete_project(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    delete_project(session, project_id)
    return MessageResponse(message="Project deleted successfully")


# Catalog management

@router.post("/catalogs", response_model=CatalogResponse, status_code=status.HTTP_201_CREATED)
@router.post("/catalogs/upload", response_model=CatalogResponse, status_code=status.HTTP_201_CREATED)
def admin_upload_catalog(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    title: Annotated[str, Form()],
    description: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
):
    catalog = create_catalog(session, title, description, file)
    return CatalogResponse(message="Catalog uploaded successfully", catalog=catalog)

@router.delete("/catalogs/{catalog_id}", response_model=MessageResponse)
def admin_delete_catalog(
    catalog_id: int,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    delete_catalog(session, catalog_id)
    return MessageResponse(message="Catalog deleted successfully")
