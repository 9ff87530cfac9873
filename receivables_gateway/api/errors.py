"""Mapping of domain rejections to HTTP errors"""

from fastapi import HTTPException
from receivables_gateway.domain.exceptions import (
    DomainException,
    InvalidInputError,
    NotFoundError,
    PreconditionError,
    StateConflictError,
)


def to_http_exception(error: DomainException) -> HTTPException:
    """
    - Input and precondition errors: 422
    - Not found: 404
    - State conflicts: 409, with the remaining balance for the caller to display
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, StateConflictError):
        return HTTPException(
            status_code=409,
            detail={"message": str(error), "remaining_cents": error.remaining_cents},
        )
    if isinstance(error, (InvalidInputError, PreconditionError)):
        return HTTPException(status_code=422, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
