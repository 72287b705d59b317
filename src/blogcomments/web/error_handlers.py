import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from blogcomments.errors import AccessDeniedError, InvalidRequestError

logger = logging.getLogger(__name__)


def create_json_error_response(status_code: int, message: str) -> JSONResponse:
    """Create JSON error response in the `{"error": message}` shape."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    # ValidationError, InvalidRequestError and any other UserError are client errors
    status_code = 403 if isinstance(exc, AccessDeniedError) else 400
    return create_json_error_response(status_code=status_code, message=str(exc))


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report unparseable or non-object bodies as invalid JSON, other rejects as bad parameters."""
    logger.debug("Request rejected: %s", exc)
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if any(tuple(error.get("loc", ()))[:1] == ("body",) for error in errors):
        return create_json_error_response(status_code=400, message=str(InvalidRequestError()))
    return create_json_error_response(status_code=400, message="Invalid query parameters")


async def store_error_handler(_: Request, exc: Exception) -> Response:
    """Pass the store's message through as a 500."""
    return create_json_error_response(status_code=500, message=str(exc))


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(status_code=500, message="An unexpected error occurred.")
