# app/api/routers/errors.py
from fastapi import HTTPException

from app.domain.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    InvalidArgumentError,
    NotFoundError,
)

_STATUS = (
    (NotFoundError, 404),
    (InvalidArgumentError, 400),
    (ConflictError, 409),
    (AuthenticationError, 401),
)


def to_http(e: DomainError) -> HTTPException:
    for kind, status in _STATUS:
        if isinstance(e, kind):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))
