"""Centralized exception handlers for the FastAPI application.

Form-style endpoints (login, signup, password reset) answer failures with
field-keyed messages, matching what the storefront's forms render:

    {
        "errors": {"email": ["Invalid email or password"]}
    }

Usage:
    from storefront_api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging
from collections import defaultdict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FormError(Exception):
    """Raised by routes to answer with field-keyed error messages."""

    def __init__(
        self,
        errors: dict[str, list[str]],
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ):
        self.errors = errors
        self.status_code = status_code
        super().__init__(errors)


async def form_error_handler(_: Request, exc: FormError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Flatten pydantic validation errors into field-keyed messages."""
    errors: dict[str, list[str]] = defaultdict(list)
    for error in exc.errors():
        fields = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = fields[-1] if fields else "general"
        errors[field].append(error.get("msg", "Invalid value"))

    logger.debug("Validation failed for %s: %s", request.url.path, sorted(errors))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": dict(errors)},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(FormError, form_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        validation_error_handler,  # type: ignore[arg-type]
    )
