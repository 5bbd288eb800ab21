from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AssistantError(Exception):
    """Base error carrying the message that is safe to send to the client.

    The underlying cause stays on ``__cause__`` and only reaches the logs.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, public_message: str) -> None:
        super().__init__(public_message)
        self.public_message = public_message


class RequestValidationFailed(AssistantError):
    status_code = status.HTTP_400_BAD_REQUEST


class MethodNotAllowed(AssistantError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class UpstreamError(AssistantError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ParseError(AssistantError):
    """Structured output could not be decoded; callers degrade instead of failing."""


async def assistant_error_handler(request: Request, exc: AssistantError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)
