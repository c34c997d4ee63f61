"""
Application error hierarchy and the FastAPI handlers that render it.

    RecipeShareError (base)          -> 500
    ├── ValidationError / BadRequest -> 400
    ├── Unauthenticated              -> 401
    ├── Forbidden                    -> 403
    ├── NotFound                     -> 404
    ├── Conflict                     -> 409
    └── InternalError                -> 500

Application errors render as {"error": message}. Request validation failures
render as {"errors": [{"field": ..., "msg": ...}, ...]} with status 400.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RecipeShareError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecipeShareError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class BadRequest(ValidationError):
    pass


class Unauthenticated(RecipeShareError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(RecipeShareError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(RecipeShareError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"

    def __init__(self, resource: str | None = None):
        super().__init__(f"{resource} not found" if resource else None)


class Conflict(RecipeShareError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(RecipeShareError):
    pass


# Messages for identifier path parameters that fail to parse
PATH_PARAM_MESSAGES = {
    "recipe_id": "Invalid recipe ID",
    "comment_id": "Invalid comment ID",
    "user_id": "Valid userId is required",
}


def _field_label(field: str) -> str:
    # "confirmPassword" -> "Confirm password", "image_url" -> "Image url"
    spaced = "".join(" " + c.lower() if c.isupper() else c for c in field)
    spaced = spaced.replace("_", " ").strip()
    return spaced[:1].upper() + spaced[1:]


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flattens pydantic error dicts into an ordered list of {field, msg} entries.
    Every failing field is reported; nothing is dropped.
    """
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else ""
        # Drop the "body"/"path"/"query" prefix; keep nested list indexes
        field = ".".join(loc[1:]) if len(loc) > 1 else location
        # List items are reported under their parent field's name
        names = [part for part in loc[1:] if not part.isdigit()]
        name = names[-1] if names else field
        err_type = err.get("type")
        ctx = err.get("ctx") or {}

        if location == "path" and name in PATH_PARAM_MESSAGES:
            msg = PATH_PARAM_MESSAGES[name]
        elif err_type == "missing":
            msg = f"{_field_label(name)} is required"
        elif err_type == "string_too_short" and ctx.get("min_length") == 1:
            msg = f"{_field_label(name)} is required"
        elif err_type == "string_too_short":
            msg = f"{_field_label(name)} must be at least {ctx['min_length']} characters long"
        elif err_type == "too_short":
            msg = f"{_field_label(name)} must contain at least {ctx.get('min_length', 1)} item(s)"
        elif err_type == "value_error" and ctx.get("error"):
            msg = str(ctx["error"])
        else:
            msg = err.get("msg", "Invalid value")

        formatted.append({"field": field, "msg": msg})
    return formatted


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        logger.debug(f"Validation failed for {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": errors},
        )

    @app.exception_handler(RecipeShareError)
    async def handle_app_error(request: Request, exc: RecipeShareError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        # Details stay in the server log; the client only sees a generic message
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": InternalError.default_message},
        )
