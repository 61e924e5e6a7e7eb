import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa
    """
    Renders every HTTP error as {"error": ...}.
    A dict detail is passed through as the body, which lets validation endpoints add fields.
    """
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"error": exc.detail}
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    logger.debug(f"Request validation failed: {messages}")
    return JSONResponse({"error": "; ".join(messages)}, status_code=status.HTTP_400_BAD_REQUEST)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
