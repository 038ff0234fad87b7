# natheme/routers/catalogs.py

from typing import Annotated
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlmodel import Session, col, select

from natheme.db import get_session
from natheme.models import Catalog, CatalogResponse, MessageResponse, User
from natheme.storage import CATALOG_EXTENSIONS, UploadError, delete_stored_file, save_upload
from natheme.utils import get_current_admin_user


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalogs", tags=["catalogs"])


def create_catalog(session: Session, title: str, description: str | None, file: UploadFile | None) -> Catalog:
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File required")
    try:
        stored = save_upload(file, "catalogs", CATALOG_EXTENSIONS, "Only PDF or DOC files are allowed")
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    catalog = Catalog(title=title, description=description, file_path=stored.public_path)
    session.add(catalog)
    session.commit()
    session.refresh(catalog)
    logger.info(f"Catalog ID {catalog.id} uploaded as {stored.public_path}.")
    return catalog

def delete_catalog(session: Session, catalog_id: int) -> None:
    """Delete a catalog row and its stored document, if the document is still on disk."""
    catalog = session.get(Catalog, catalog_id)
    if not catalog:
        raise HTTPException(status_code=404, detail="Catalog not found")

    delete_stored_file(catalog.file_path)
    session.delete(catalog)
    session.commit()
    logger.info(f"Catalog ID {catalog_id} deleted.")


@router.get("", response_model=list[Catalog])
def get_catalogs(session: Annotated[Session, Depends(get_session)]):
    return session.exec(select(Catalog).order_by(col(Catalog.created_at).desc(), col(Catalog.id).desc())).all()

@router.post("/upload", response_model=CatalogResponse, status_code=status.HTTP_201_CREATED)
def upload_catalog(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
    title: Annotated[str, Form()],
    description: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
):
    catalog = create_catalog(session, title, description, file)
    return CatalogResponse(message="Catalog uploaded successfully", catalog=catalog)

@router.delete("/{catalog_id}", response_model=MessageResponse)
def delete_catalog_endpoint(
    catalog_id: int,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[User, Depends(get_current_admin_user)],
):
    delete_catalog(session, catalog_id)
    return MessageResponse(message="Catalog deleted successfully")
