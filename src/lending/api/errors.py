"""HTTP mapping for the lending error categories Protean does not map itself.

Protean's own handlers cover validation (400) and not-found (404). Business
rule rejections and write conflicts get distinct codes so a caller can tell
"this can never succeed as asked" from "retry against fresh data".
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, InvalidOperationError
from protean.integrations.fastapi import register_exception_handlers


async def _precondition_failed(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc)})


async def _write_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": str(exc)})


def register_lending_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(InvalidOperationError, _precondition_failed)
    app.add_exception_handler(ExpectedVersionError, _write_conflict)
