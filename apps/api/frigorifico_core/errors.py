from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def flush_or_conflict(session: AsyncSession, detail: str) -> None:
    """Flush pending rows; a unique/FK violation becomes a 409 with ``detail``."""
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        logger.info("Integrity conflict: %s (%s)", detail, e.orig)
        raise HTTPException(status_code=409, detail=detail)


async def _unhandled(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Erro interno do servidor"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, _unhandled)
