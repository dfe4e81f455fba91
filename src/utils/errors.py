"""Service exceptions and database error mapping."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map to a client-visible HTTP status."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, error: str | None = None, details: str | list[str] | None = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.details = details


class InvalidInputError(ServiceError):
    status_code = 400
    error = "Invalid input"


class AuthenticationError(ServiceError):
    status_code = 401
    error = "Authentication required"


class AuthorizationError(ServiceError):
    status_code = 403
    error = "Access denied"


class NotFoundError(ServiceError):
    status_code = 404
    error = "Not found"


class ConflictError(ServiceError):
    status_code = 409
    error = "Conflict"


class RateLimitError(ServiceError):
    status_code = 429
    error = "Too many requests"


class ConfigurationError(ServiceError):
    status_code = 500
    error = "Invalid configuration"


@dataclass(frozen=True)
class MappedError:
    status: int
    message: str
    details: str


def map_database_error(error: SQLAlchemyError, expose_details: bool = False) -> MappedError:
    """Translate a SQLAlchemy error into a stable HTTP-facing shape."""
    if isinstance(error, IntegrityError):
        text = str(error.orig).lower()
        if "unique" in text or "duplicate" in text:
            return MappedError(409, "Record already exists", "Unique constraint violation")
        if "foreign key" in text:
            return MappedError(400, "Invalid reference", "The referenced id does not exist")

    if isinstance(error, NoResultFound):
        return MappedError(404, "Record not found", "The requested item does not exist")

    return MappedError(500, "Internal server error", str(error) if expose_details else "Unexpected error")
