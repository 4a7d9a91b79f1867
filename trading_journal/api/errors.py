"""Translate client-side failures into HTTP responses."""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from trading_journal.errors import GENERIC_ERROR_MESSAGE, FormValidationError, JournalAPIError

logger = logging.getLogger(__name__)


async def _journal_api_error(request: Request, exc: JournalAPIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _form_validation_error(request: Request, exc: FormValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "errors": exc.errors},
    )


async def _upstream_unreachable(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.warning("Journal API unreachable for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": GENERIC_ERROR_MESSAGE})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JournalAPIError, _journal_api_error)
    app.add_exception_handler(FormValidationError, _form_validation_error)
    app.add_exception_handler(httpx.HTTPError, _upstream_unreachable)


__all__ = ["register_error_handlers"]
