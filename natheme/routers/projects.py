# natheme/routers/projects.py

from typing import Annotated
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlmodel import Session, select

from natheme.db import get_session
from natheme.models import MessageResponse, Project, ProjectResponse, ProjectUpdate, User, utc_now
from natheme.storage import IMAGE_EXTENSIONS, UploadError, save_upload
from natheme.utils import get_current_admin_user


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


def store_project_images(request: Request, images: list[UploadFile]) -> list[str]:
    """Save uploaded images and return absolute URLs the frontend can display."""
    urls = []
    for image in images:
        if not image.filename:
            continue
        try:
            stored = save_upload(image, "projects", IMAGE_EXTENSIONS, "Only image files are allowed")
        except UploadError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        urls.append(f"{request.base_url}{stored.public_path}")
    return urls

def create_project(session: Session, name: str, description: str | None, image_urls: list[str]) -> Project:
    project = Project(name=name, description=description, image_urls=image_urls)
    session.add(project)
    session.commit()
    session.refresh(project)
    logger.info(f"Project ID {project.id} created with {len(image_urls)} images.")
    return project

def update_project(session: Session, project_id: int, project_update: ProjectUpdate) -> Project:
    project = session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    project_data = project_update.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in project_data.items():
        setattr(project, key, value)
    project.updated_at = utc_now()

    session.add(project)
    session.commit()
    session.refresh(project)
    return project

def delete_project(session: Session, project_id: int) -> None:
    project = session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    session.delete(project)
    session.commit()
    logger.info(f"Project ID {project_id} deleted.")


@router.get("", response_model=list[Project])
def get_projects(session: Annotated[Session, Depends(get_session)]):
    return session.exec(select(Project).order_by(Project.id)).all()

@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project_endpoint(
    request: Request,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    name: Annotated[str, Form()],
    description: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
):
    image_urls = store_project_images(request, images or [])
    project = create_project(session, name, description, image_urls)
    return ProjectResponse(message="Project created successfully", project=project)

@router.put("/{project_id}", response_model=Project)
def update_project_endpoint(
    project_id: int,
    project_update: ProjectUpdate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    return update_project(session, project_id, project_update)

@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project_endpoint(
    project_id: int,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    delete_project(session, project_id)
    return MessageResponse(message="Project deleted successfully")
