"""Helper utilities shared across API route handlers."""

from typing import TypeVar

from fastapi import HTTPException, status

from notification_engine.domain.entities import NotFound, Ok, StoreResult

T = TypeVar("T")


def unwrap_result(result: StoreResult[T]) -> T:
    """Return the value of ``result`` or raise the matching HTTP error."""

    if isinstance(result, Ok):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.detail)
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.detail)
