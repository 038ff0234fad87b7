# tests/test_utils.py

import io
from datetime import timedelta

import pytest
from fastapi import HTTPException, UploadFile
from jose import JWTError
from starlette.datastructures import Secret

from natheme import settings
from natheme.errors import ErrorKind, Failure, STATUS_BY_KIND, unwrap
from natheme.models import User
from natheme.settings import AuthConfig
from natheme.storage import (
    CATALOG_EXTENSIONS,
    UploadError,
    delete_stored_file,
    resolve_public_path,
    save_upload,
    stored_name,
)
from natheme.utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    is_valid_password,
    verify_password,
)


CONFIG = AuthConfig(secret_key="unit-secret", algorithm="HS256", token_lifetime=timedelta(days=7))


def test_password_hashing():
    hashed = get_password_hash("abcd1234")
    assert hashed != "abcd1234"
    assert verify_password("abcd1234", hashed)
    assert not verify_password("abcd12345", hashed)
    # salted: same password, different hash
    assert get_password_hash("abcd1234") != hashed

@pytest.mark.parametrize(
    "password, valid",
    [
        ("abcd1234", True),
        ("ABCDEFG1", True),
        ("a1!@#$%^&*", True),
        ("abc1234", False),      # too short
        ("abcdefgh", False),     # no digit
        ("12345678", False),     # no letter
        ("abcd-1234", False),    # symbol outside the allowed set
        ("abcd1234é", False),    # non-ASCII letter
        ("abcd١٢٣٤", False),     # non-ASCII digits
    ],
)
def test_password_policy(password, valid):
    assert is_valid_password(password) is valid

def test_access_token_claims():
    user = User(id=7, name="Ann", email="ann@x.com", password="x")
    claims = decode_access_token(create_access_token(user, CONFIG), CONFIG)

    assert claims["id"] == 7
    assert claims["email"] == "ann@x.com"
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

def test_access_token_wrong_secret():
    user = User(id=7, name="Ann", email="ann@x.com", password="x")
    token = create_access_token(user, CONFIG)
    other = AuthConfig(secret_key="another-secret", algorithm="HS256", token_lifetime=timedelta(days=7))

    with pytest.raises(JWTError):
        decode_access_token(token, other)

def test_access_token_expired():
    user = User(id=7, name="Ann", email="ann@x.com", password="x")
    token = create_access_token(user, CONFIG, expires_delta=timedelta(seconds=-1))

    with pytest.raises(JWTError):
        decode_access_token(token, CONFIG)


def test_failure_status_mapping():
    assert STATUS_BY_KIND[ErrorKind.CONFLICT] == 400
    assert Failure(ErrorKind.NOT_FOUND, "missing").status_code == 404
    assert set(STATUS_BY_KIND) == set(ErrorKind)

def test_unwrap():
    assert unwrap("ok") == "ok"
    with pytest.raises(HTTPException) as exc_info:
        unwrap(Failure(ErrorKind.FORBIDDEN, "nope"))
    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "nope"


def make_upload(filename: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)

def test_stored_name_strips_directories():
    assert stored_name("../../etc/passwd.pdf").endswith("-passwd.pdf")
    assert stored_name("C:\\Users\\me\\range.pdf").endswith("-range.pdf")
    assert stored_name("range.pdf").split("-", 1)[0].isdigit()

def test_save_upload(tmp_path):
    stored = save_upload(make_upload("range.pdf", b"pdf"), "catalogs", CATALOG_EXTENSIONS, "bad", root=tmp_path)

    assert stored.path.parent == tmp_path / "catalogs"
    assert stored.path.read_bytes() == b"pdf"
    assert stored.public_path == f"uploads/catalogs/{stored.path.name}"
    assert resolve_public_path(stored.public_path, root=tmp_path) == stored.path

def test_save_upload_rejects_extension(tmp_path):
    with pytest.raises(UploadError, match="bad type"):
        save_upload(make_upload("range.exe", b"x"), "catalogs", CATALOG_EXTENSIONS, "bad type", root=tmp_path)

def test_save_upload_rejects_large_file(tmp_path):
    with pytest.raises(UploadError, match="File too large"):
        save_upload(
            make_upload("range.pdf", b"x" * 11), "catalogs", CATALOG_EXTENSIONS, "bad", max_size=10, root=tmp_path
        )
    assert list((tmp_path / "catalogs").iterdir()) == []

def test_delete_stored_file(tmp_path):
    stored = save_upload(make_upload("range.pdf", b"pdf"), "catalogs", CATALOG_EXTENSIONS, "bad", root=tmp_path)

    assert delete_stored_file(stored.public_path, root=tmp_path) is True
    assert not stored.path.exists()
    assert delete_stored_file(stored.public_path, root=tmp_path) is False


def test_settings_read_from_environment():
    assert str(settings.config("JWT_SECRET", cast=Secret)) == "test-secret-key"
    assert settings.config("MISSING_SETTING", default="fallback") == "fallback"
