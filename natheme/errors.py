# natheme/errors.py

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Union

from fastapi import HTTPException, status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


# Single place where failure kinds become HTTP statuses.
# Duplicate emails are reported as 400, not 409, to keep the public contract.
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class Failure:
    """A tagged, expected error returned (not raised) by a service operation."""

    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


T = TypeVar("T")
Result = Union[T, Failure]


def unwrap(result: Result[T]) -> T:
    """
    Return the success value of a service call or raise it as an HTTPException.

    Args:
        result: The value returned by a service operation.

    Returns:
        The success payload.

    Raises:
        HTTPException: If the operation returned a Failure.
    """
    if isinstance(result, Failure):
        raise HTTPException(status_code=result.status_code, detail=result.message)
    return result
