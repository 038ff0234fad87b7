# natheme/storage.py

"""Disk-backed storage for uploaded catalog documents and project images."""

from dataclasses import dataclass
from pathlib import Path
import logging
import time

from fastapi import UploadFile

from natheme import settings


logger = logging.getLogger(__name__)

CATALOG_EXTENSIONS = frozenset({".pdf", ".doc", ".docx"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"})

PUBLIC_PREFIX = "uploads"
CHUNK_SIZE = 1024 * 1024


class UploadError(ValueError):
    """Raised when an uploaded file is refused."""


@dataclass(frozen=True)
class StoredFile:
    path: Path
    public_path: str  # e.g. "uploads/catalogs/1700000000000-brochure.pdf"


def ensure_upload_dirs(root: Path | None = None) -> None:
    root = root or settings.UPLOAD_DIR
    for category in ("catalogs", "projects"):
        (root / category).mkdir(parents=True, exist_ok=True)

def stored_name(original_name: str) -> str:
    # keep only the basename so a crafted filename cannot leave the upload dir
    basename = Path(original_name.replace("\\", "/")).name
    return f"{int(time.time() * 1000)}-{basename}"

def save_upload(
    file: UploadFile,
    category: str,
    allowed_extensions: frozenset[str],
    error_message: str,
    max_size: int | None = None,
    root: Path | None = None,
) -> StoredFile:
    """
    Write an uploaded file to ``<root>/<category>/<epoch-ms>-<name>``.

    Raises:
        UploadError: If the extension is not allowed or the file exceeds max_size.
            A partially written file is removed.
    """
    root = root or settings.UPLOAD_DIR
    max_size = settings.MAX_UPLOAD_SIZE if max_size is None else max_size

    filename = file.filename or ""
    if Path(filename).suffix.lower() not in allowed_extensions:
        raise UploadError(error_message)

    directory = root / category
    directory.mkdir(parents=True, exist_ok=True)
    name = stored_name(filename)
    destination = directory / name

    written = 0
    with destination.open("wb") as handle:
        while chunk := file.file.read(CHUNK_SIZE):
            written += len(chunk)
            if written > max_size:
                break
            handle.write(chunk)
    if written > max_size:
        destination.unlink(missing_ok=True)
        raise UploadError("File too large")

    logger.info(f"Stored upload {name} ({written} bytes) in {category}")
    return StoredFile(path=destination, public_path=f"{PUBLIC_PREFIX}/{category}/{name}")

def resolve_public_path(public_path: str, root: Path | None = None) -> Path:
    root = root or settings.UPLOAD_DIR
    relative = public_path.replace("\\", "/").lstrip("/")
    if relative.startswith(f"{PUBLIC_PREFIX}/"):
        relative = relative[len(PUBLIC_PREFIX) + 1:]
    return root / relative

def delete_stored_file(public_path: str, root: Path | None = None) -> bool:
    path = resolve_public_path(public_path, root)
    if path.is_file():
        path.unlink()
        logger.info(f"Removed stored file {public_path}")
        return True
    return False
