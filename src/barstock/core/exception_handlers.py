"""Global exception handlers for FastAPI."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from barstock.core.errors import (
    AppError,
    AuthenticationRequiredError,
    AuthorizationDeniedError,
    ValidationError,
)
from barstock.core.logging import get_logger

logger = get_logger(__name__)

ACCESS_GATE_PATH = "/access-gate"


def _wants_html(request: Request) -> bool:
    """Browser navigations ask for HTML; API clients ask for JSON."""
    return "text/html" in request.headers.get("accept", "")


async def app_error_handler(request: Request, exc: AppError) -> Response:
    """
    Handle all AppError exceptions and convert to JSON response.

    Returns standardized error format:
    {
        "error": "Product with ID xyz not found",
        "code": "NOT_FOUND",
        "details": {"resource": "Product", "resource_id": "xyz"}
    }

    Session and permission failures during a browser navigation redirect to
    the public access gate instead, so no part of a protected view renders.
    """
    if isinstance(exc, (AuthenticationRequiredError, AuthorizationDeniedError)) and _wants_html(
        request
    ):
        reason = "login" if isinstance(exc, AuthenticationRequiredError) else "denied"
        return RedirectResponse(
            url=f"{ACCESS_GATE_PATH}?reason={reason}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "app_error",
        code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
    )

    error_response = exc.to_response()
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed input with field-level messages."""
    fields = {}
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        fields[location or "body"] = err.get("msg", "Invalid value")

    error = ValidationError("Invalid request data", details={"fields": fields})
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(mode="json", exclude_none=True),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render plain HTTP exceptions (unknown routes, bad methods) in the error shape."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
    )


def register_exception_handlers(app) -> None:
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
