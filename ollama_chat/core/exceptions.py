"""Application exception classes and handlers."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Bad input (400) ---


class InputValidationError(AppException):
    """Command input rejected before any state was touched."""

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=400)


# --- Not Found (404) ---


class SessionNotFoundError(AppException):
    """Referenced chat session does not exist."""

    def __init__(self, session_id: int | None = None) -> None:
        self.session_id = session_id
        message = (
            "Chat session not found"
            if session_id is None
            else f"Chat session {session_id} not found"
        )
        super().__init__(
            message=message,
            code="SESSION_NOT_FOUND",
            status_code=404,
        )


# --- Generation lifecycle (409 / 499) ---


class GenerationBusyError(AppException):
    """Another generation is already in flight."""

    def __init__(self) -> None:
        super().__init__(
            message="A response is already being generated",
            code="GENERATION_BUSY",
            status_code=409,
        )


class GenerationCancelledError(AppException):
    """The in-flight generation was aborted by the user."""

    def __init__(self) -> None:
        super().__init__(
            message="Generation was cancelled",
            code="GENERATION_CANCELLED",
            status_code=499,
        )


# --- Upstream (502) ---


class UpstreamError(AppException):
    """Inference endpoint unreachable or returned an invalid response."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message=message, code="UPSTREAM_ERROR", status_code=502)


# --- Storage (500) ---


class PersistenceError(AppException):
    """Local database I/O failed."""

    def __init__(self, message: str = "Failed to access the local database") -> None:
        super().__init__(message=message, code="PERSISTENCE_ERROR", status_code=500)


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.code,
                "message": exc.message,
            },
        },
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies in the AppException envelope."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    detail = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": f"{location}: {detail}" if location else detail,
            },
        },
    )
