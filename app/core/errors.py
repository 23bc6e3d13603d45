from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.core.exceptions import MarketplaceError
from app.models.response import ErrorResponse

logger = logging.getLogger(__name__)

def _error_response(status_code: int, message: str, details=None) -> JSONResponse:
    content = ErrorResponse(message=message, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=content)

def add_exception_handlers(app: FastAPI):
    """Render every failure as {error: true, message}"""

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(422, "Input validation failed", jsonable_errors(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={"method": request.method, "url": str(request.url)},
            exc_info=True,
        )
        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return _error_response(500, message)

def jsonable_errors(exc: RequestValidationError):
    # ctx may hold exception instances that are not JSON serializable
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
