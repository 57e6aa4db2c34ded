import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.response import error_response


class ScanError(Exception):
    """Base class for errors surfaced to scan/report callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(ScanError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidUrl(InvalidInput):
    def __init__(self, message: str = "Invalid URL format"):
        super().__init__(message)


class RateLimited(ScanError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after: int, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)
        self.retry_after = retry_after


class RootFetchFailed(ScanError):
    """The root page could not be fetched or audited; the scan is aborted."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str, timed_out: bool = False):
        self.reason = reason
        self.timed_out = timed_out
        detail = "Request timed out" if timed_out else reason
        super().__init__(f"Could not fetch website: {detail}")


class SubScanFailed(ScanError):
    """Sub-page, PDF, crawl or vendor step failure. Logged, never surfaced."""


class PersistenceFailure(ScanError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ScanNotFound(ScanError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Scan not found. Please run a new scan."):
        super().__init__(message)


def add_exception_handlers(app):
    @app.exception_handler(ScanError)
    async def scan_error_handler(request: Request, exc: ScanError):
        retry_after = getattr(exc, "retry_after", None)
        return error_response(exc.message, status_code=exc.status_code, retry_after=retry_after)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
        return error_response(
            "Validation failed: " + "; ".join(problems),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logging.exception(f"Unhandled exception: {exc}")
        return error_response(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
