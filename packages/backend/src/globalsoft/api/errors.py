"""JSON error responses.

FastAPI reports errors as {"detail": ...}; the SPA reads data.error.
Both keys are sent so either client style works.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        loc = [str(p) for p in errors[0].get("loc", ()) if p != "body"]
        message = f"{'.'.join(loc)}: {errors[0].get('msg')}" if loc else errors[0].get("msg")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors), "error": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
