from fastapi import HTTPException

from courtplanner.core.logger import setup_logger
from courtplanner.services.errors import SchedulingError

logger = setup_logger(__name__)


def to_http_exception(e: Exception) -> HTTPException:
    """Map a service failure to the response the caller sees."""
    if isinstance(e, SchedulingError):
        return HTTPException(status_code=e.status_code, detail=str(e))
    logger.exception(f"Unexpected error: {e}")
    return HTTPException(status_code=500, detail=f"An unexpected error occurred: {str(e)}")
