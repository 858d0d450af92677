import logging

from fastapi import HTTPException

from wc26.errors import HashGenerationError, PredictionError

logger = logging.getLogger(__name__)


def to_http_exception(error: PredictionError) -> HTTPException:
    """Map a domain error to an HTTPException. Internal errors are logged, not echoed."""
    if isinstance(error, HashGenerationError):
        logger.exception(f"Prediction hash generation failed: {error}")
        return HTTPException(status_code=500, detail="Internal server error")
    if error.status_code >= 500:
        logger.error(f"Prediction error: {error}")
    else:
        logger.warning(f"Client error: {error.code} {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
