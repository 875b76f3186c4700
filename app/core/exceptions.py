import logging
from fastapi.exceptions import RequestValidationError
from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RoadHazardError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(RoadHazardError):
    status_code = 404


class InvalidTransition(RoadHazardError):
    status_code = 400


class InvalidReference(RoadHazardError):
    """Request points at a related record that does not exist."""

    status_code = 400


class StoreFailure(RoadHazardError):
    status_code = 500


class Transient(RoadHazardError):
    """Retryable failure, e.g. the request ran past its timeout."""

    status_code = 503


def register_exception_handlers(app):
    @app.exception_handler(RoadHazardError)
    async def road_hazard_exception_handler(request: Request, exc: RoadHazardError):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        else:
            logger.info("%s: %s", type(exc).__name__, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info("HTTP exception", extra={"status_code": exc.status_code})
        if exc.status_code == 404:
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error", extra={"errors": exc.errors()})
        return JSONResponse(
            {"error": "Validation error", "details": jsonable_errors(exc)},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse({"error": "Internal server error"}, status_code=500)


def jsonable_errors(exc: RequestValidationError):
    # pydantic may put the raw exception object in "ctx"
    out = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        out.append(err)
    return out
