"""Exception handlers shared by every router.

- Boundary validation failures (bad body, unknown enum token, non-integer
  id, malformed date) answer 400 rather than FastAPI's default 422.
- An unrecoverable concurrency conflict answers 500 after being logged.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from patterns.repository import ConcurrencyConflictError

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def conflict_exception_handler(request: Request, exc: ConcurrencyConflictError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ConcurrencyConflictError, conflict_exception_handler)
