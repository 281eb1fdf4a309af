"""Global error handler middleware."""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.exceptions import InsightsError

logger = structlog.get_logger()


class AppException(Exception):
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_type: str = "about:blank",
        cause: str | None = None,
    ):
        self.status_code = status_code
        self.detail = detail
        self.error_type = error_type
        self.cause = cause


_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def problem_response(
    status: int,
    detail: str,
    *,
    title: str | None = None,
    error_type: str = "about:blank",
    cause: str | None = None,
) -> JSONResponse:
    """RFC 7807 body, with the underlying error message under ``cause`` when known."""
    content = {
        "type": error_type,
        "title": title or _TITLES.get(status, "Error"),
        "status": status,
        "detail": detail,
    }
    if cause:
        content["cause"] = cause
    return JSONResponse(status_code=status, content=content)


def setup_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
        return problem_response(exc.status_code, exc.detail, error_type=exc.error_type, cause=exc.cause)

    @app.exception_handler(InsightsError)
    async def insights_error_handler(request: Request, exc: InsightsError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "insights_error",
            error_class=type(exc).__name__,
            error=exc.message,
            path=request.url.path,
        )
        cause = str(exc.__cause__) if exc.__cause__ else None
        return problem_response(exc.status_code, exc.message, title=exc.title, cause=cause)

    @app.exception_handler(ValueError)
    async def value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
        return problem_response(400, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), exc_info=True)
        return problem_response(500, "An unexpected error occurred.", cause=str(exc) or type(exc).__name__)
