"""Translation of domain exceptions into HTTP errors."""

from fastapi import HTTPException, status

from hostpanel.domain.exceptions import (
    CommandExecutionError,
    DuplicateEntityError,
    EntityNotFoundError,
    InstallationInProgressError,
    ValidationError,
    VPSNotConnectedError,
)

_STATUS_CODES: dict[type[Exception], int] = {
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateEntityError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    VPSNotConnectedError: status.HTTP_409_CONFLICT,
    InstallationInProgressError: status.HTTP_409_CONFLICT,
    CommandExecutionError: status.HTTP_502_BAD_GATEWAY,
}

PANEL_ERRORS = tuple(_STATUS_CODES)


def to_http(exc: Exception) -> HTTPException:
    for exc_type, code in _STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
