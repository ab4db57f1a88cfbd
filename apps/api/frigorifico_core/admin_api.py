from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core.auth_api import UsuarioOut
from frigorifico_core.db import get_session
from frigorifico_core.errors import flush_or_conflict
from frigorifico_core.models import Cliente, Usuario
from frigorifico_core.security import hash_password, require_master

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_master)])

class ClienteCreateRequest(BaseModel):
    nome: str = Field(min_length=3, max_length=255)
    cnpj: str = Field(min_length=14, max_length=32)
    telefone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=255)
    endereco: str | None = Field(default=None, max_length=500)

class ClienteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    cnpj: str
    telefone: str | None
    email: str | None
    endereco: str | None
    ativo: bool
    data_cadastro: datetime

class UsuarioCreateRequest(BaseModel):
    nome: str = Field(min_length=3, max_length=255)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    senha: str = Field(min_length=6, max_length=72)
    tipo: Literal["master", "cliente"]
    cliente_id: int | None = None

@router.get("/clientes", response_model=List[ClienteOut])
async def list_clientes(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Cliente).order_by(Cliente.nome))).scalars().all()
    return [ClienteOut.model_validate(r) for r in rows]

@router.post("/clientes", response_model=ClienteOut, status_code=201)
async def create_cliente(req: ClienteCreateRequest, session: AsyncSession = Depends(get_session)):
    cliente = Cliente(
        nome=req.nome,
        cnpj=req.cnpj.strip(),
        telefone=req.telefone,
        email=req.email,
        endereco=req.endereco,
    )
    session.add(cliente)
    await flush_or_conflict(session, "CNPJ já cadastrado")
    await session.commit()
    logger.info("Created cliente id=%s cnpj=%s", cliente.id, cliente.cnpj)
    return ClienteOut.model_validate(cliente)

@router.get("/usuarios", response_model=List[UsuarioOut])
async def list_usuarios(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Usuario).order_by(Usuario.nome))).scalars().all()
    return [UsuarioOut.model_validate(r) for r in rows]

@router.post("/usuarios", response_model=UsuarioOut, status_code=201)
async def create_usuario(req: UsuarioCreateRequest, session: AsyncSession = Depends(get_session)):
    if req.cliente_id is not None:
        cliente = (await session.execute(
            select(Cliente).where(Cliente.id == req.cliente_id)
        )).scalar_one_or_none()
        if not cliente:
            raise HTTPException(status_code=404, detail="Cliente não encontrado")

    usuario = Usuario(
        nome=req.nome,
        email=req.email.strip().lower(),
        senha=hash_password(req.senha),
        tipo=req.tipo,
        cliente_id=req.cliente_id,
    )
    session.add(usuario)
    await flush_or_conflict(session, "Email já cadastrado")
    await session.commit()
    logger.info("Created usuario id=%s tipo=%s", usuario.id, usuario.tipo)
    return UsuarioOut.model_validate(usuario)
