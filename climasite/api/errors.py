"""Translate domain errors into HTTP responses"""

from fastapi import HTTPException, status

from ..domain.exceptions import (
    OrderAccessDeniedError,
    OrderDomainError,
    OrderNotFoundError,
)


def to_http_exception(error: OrderDomainError) -> HTTPException:
    if isinstance(error, OrderNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, OrderAccessDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    # InvalidTransitionError and InvalidArgumentError
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
