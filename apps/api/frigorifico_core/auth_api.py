from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core import config
from frigorifico_core.db import get_session
from frigorifico_core.models import Usuario
from frigorifico_core.security import (
    authenticate, create_session, current_user, resolve_session, revoke_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    senha: str = Field(min_length=1, max_length=72)

class UsuarioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cliente_id: int | None
    nome: str
    email: str
    tipo: str
    ativo: bool
    data_cadastro: datetime

class SessionStatus(BaseModel):
    autenticado: bool
    usuario: UsuarioOut | None = None

@router.post("/login", response_model=UsuarioOut)
async def login(req: LoginRequest, response: Response, session: AsyncSession = Depends(get_session)):
    usuario = await authenticate(session, req.email.strip().lower(), req.senha)
    if not usuario:
        logger.warning("Failed login for %s", req.email)
        raise HTTPException(status_code=401, detail="Email ou senha inválidos")

    _, token = await create_session(session, usuario.id)
    await session.commit()

    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=config.COOKIE_SECURE,
    )
    logger.info("Login usuario_id=%s", usuario.id)
    return UsuarioOut.model_validate(usuario)

@router.post("/logout")
async def logout(request: Request, response: Response, session: AsyncSession = Depends(get_session)):
    await revoke_session(session, request.cookies.get(config.SESSION_COOKIE_NAME))
    await session.commit()
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return {"message": "Logout realizado com sucesso"}

@router.get("/session", response_model=SessionStatus)
async def session_status(request: Request, session: AsyncSession = Depends(get_session)):
    ctx = await resolve_session(session, request.cookies.get(config.SESSION_COOKIE_NAME))
    if not ctx:
        return SessionStatus(autenticado=False)
    return SessionStatus(autenticado=True, usuario=UsuarioOut.model_validate(ctx.usuario))

@router.get("/usuarios/me", response_model=UsuarioOut)
async def me(usuario: Usuario = Depends(current_user)):
    return UsuarioOut.model_validate(usuario)
