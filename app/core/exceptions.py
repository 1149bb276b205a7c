"""
Error taxonomy shared by the services.

Every error is an HTTPException so services raise them the same way they raise
plain HTTPException, and FastAPI renders {"detail": message}.
"""

from contextlib import contextmanager
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class QuotesError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)

    def __str__(self) -> str:
        return str(self.detail)


class ValidationError(QuotesError):
    """Missing or malformed required field"""
    status_code = status.HTTP_400_BAD_REQUEST


class MissingActorError(QuotesError):
    """No authenticated user on the request"""
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(QuotesError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(QuotesError):
    """Referenced document absent, or belongs to another group"""
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(QuotesError):
    status_code = status.HTTP_409_CONFLICT


class Transient(QuotesError):
    """Store timeout or unavailability; the same call may be re-issued"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def ensure_actor(actor_id: str) -> str:
    if not actor_id:
        raise MissingActorError("Missing authenticated user context.")
    return actor_id


@contextmanager
def step(description: str):
    """Prefix store errors raised inside the block with the step that failed"""
    try:
        yield
    except QuotesError as e:
        logger.error(f"{description} failed: {e.detail}")
        raise type(e)(f"{description}: {e.detail}") from e
