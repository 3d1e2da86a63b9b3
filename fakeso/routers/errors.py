"""Translate service-layer errors into HTTP responses."""

from fastapi import HTTPException, status

from fakeso.services.results import ErrorKind, ServiceError

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_IMPLEMENTED: status.HTTP_501_NOT_IMPLEMENTED,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result):
    """Return a successful service result, or raise the matching HTTPException."""
    if isinstance(result, ServiceError):
        raise HTTPException(status_code=STATUS_BY_KIND[result.kind], detail=result.error)
    return result
