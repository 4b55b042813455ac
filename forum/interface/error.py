"""Interface layer errors."""

from fastapi import HTTPException, status

from forum.domain.error import (
    ContentDeletedException,
    DomainError,
    DuplicateVoteError,
    NotAuthorizedError,
    NotFoundError,
    TokenRevokedError,
    ValidationError,
    VoteNotFoundError,
)


class InterfaceError(Exception):
    """Base interface error."""

    pass


def domain_error_to_http(error: DomainError) -> HTTPException:
    """Map a domain error to the HTTP error returned to the client.

    Args:
        error: Domain error raised by a use case

    Returns:
        HTTPException with the matching status code
    """
    if isinstance(error, (NotFoundError, ContentDeletedException, VoteNotFoundError)):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, NotAuthorizedError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, DuplicateVoteError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, TokenRevokedError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(error, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(error))
