"""
Error taxonomy shared by the services.

Routers translate these into HTTP responses; the services never build
HTTPExceptions themselves.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class JobBoardError(Exception):
    """Base class for errors raised by the job board core"""
    pass


class QueryFailure(JobBoardError):
    """Raised when the store is unreachable or rejects a query"""
    pass


class NotFound(JobBoardError):
    """Raised when an ad does not exist or fails a transition precondition"""
    pass


@contextmanager
def storage_errors(action: str):
    """
    Re-raise database failures inside the block as QueryFailure.

    Usage:
        with storage_errors("approve job ad 42"):
            await db.commit()
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(f"Storage failure while trying to {action}")
        raise QueryFailure(f"Unable to {action}") from e
