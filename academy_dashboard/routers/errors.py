from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from academy_dashboard.core.response import StorageError
from academy_dashboard.query.client import (
    CONNECTION_ERROR_CODE,
    FOREIGN_KEY_VIOLATION_CODE,
    NOT_FOUND_CODE,
    UNIQUE_VIOLATION_CODE,
)
from academy_dashboard.services.auth_service import AuthError


def storage_error_status(code: str) -> int:
    if code == NOT_FOUND_CODE:
        return 404
    if code in (UNIQUE_VIOLATION_CODE, FOREIGN_KEY_VIOLATION_CODE):
        return 409
    if code == CONNECTION_ERROR_CODE:
        return 502
    return 400


async def storage_error_handler(_: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(status_code=storage_error_status(exc.code), content={'error': exc.payload})


async def auth_error_handler(_: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=401, content={'detail': str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
