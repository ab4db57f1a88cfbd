from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, condecimal
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from frigorifico_core.cut_catalog import (
    FINAL_STORAGE_TEMPERATURE, category_for, embutido_tipo, expiry_from,
    final_item_code, price_for,
)
from frigorifico_core.db import get_session
from frigorifico_core.errors import flush_or_conflict
from frigorifico_core.final_inventory_api import EstoqueFinalOut
from frigorifico_core.models import Desoca, Corte, EstoqueFinal
from frigorifico_core.security import current_user
from frigorifico_core.time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/desoca", tags=["desoca"], dependencies=[Depends(current_user)])

Kg = condecimal(gt=0, max_digits=12, decimal_places=3)

class CorteIn(BaseModel):
    nome: str = Field(min_length=2, max_length=255)
    tipo: str = Field(min_length=2, max_length=64)
    peso: Kg

class EmbutidoIn(BaseModel):
    nome: str = Field(min_length=2, max_length=255)
    tipo: Literal["frescal", "defumado", "cozido"]
    peso: Kg

class CorteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    desoca_id: int
    nome: str
    tipo: str
    peso: float
    data_criacao: datetime

class DesocaDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    estoque_frio_id: int
    responsavel: str
    data_inicio: datetime
    data_fim: datetime | None
    finalizado: bool
    cortes: List[CorteOut]

class FinalizeResponse(BaseModel):
    desoca: DesocaDetail
    estoque_final: List[EstoqueFinalOut]

async def _load_desoca(session: AsyncSession, desoca_id: int, for_update: bool = False) -> Desoca:
    q = select(Desoca).where(Desoca.id == desoca_id).options(selectinload(Desoca.cortes))
    if for_update:
        q = q.with_for_update()
    desoca = (await session.execute(q)).scalar_one_or_none()
    if not desoca:
        raise HTTPException(status_code=404, detail="Processo de desoça não encontrado")
    return desoca

async def add_corte_txn(session: AsyncSession, desoca_id: int, nome: str, tipo: str, peso) -> Corte:
    desoca = await _load_desoca(session, desoca_id, for_update=True)
    if desoca.finalizado:
        raise HTTPException(status_code=409, detail="Desoça já finalizada; não é possível adicionar cortes")

    corte = Corte(
        desoca_id=desoca.id,
        nome=nome,
        tipo=tipo,
        peso=peso,
        data_criacao=utcnow(),
    )
    session.add(corte)
    await session.flush()

    logger.info("Added corte id=%s tipo=%s peso=%s to desoca_id=%s", corte.id, tipo, peso, desoca.id)
    return corte

async def finalize_txn(session: AsyncSession, desoca_id: int) -> FinalizeResponse:
    """
    Close a boning session and materialize every cut into final inventory.

    Runs inside the caller's transaction: either the session is finalized and
    all cuts are stocked, or nothing changes.
    """
    desoca = await _load_desoca(session, desoca_id, for_update=True)
    if desoca.finalizado:
        raise HTTPException(status_code=409, detail="Desoça já finalizada")

    now = utcnow()
    await session.execute(
        update(Desoca).where(Desoca.id == desoca.id).values(finalizado=True, data_fim=now)
    )

    cortes = (await session.execute(
        select(Corte).where(Corte.desoca_id == desoca.id).order_by(Corte.id)
    )).scalars().all()

    created: List[EstoqueFinal] = []
    for corte in cortes:
        item = EstoqueFinal(
            corte_id=corte.id,
            codigo=final_item_code(corte.tipo, corte.id),
            quantidade=corte.peso,
            preco=price_for(corte.tipo),
            validade=expiry_from(now),
            temperatura=FINAL_STORAGE_TEMPERATURE,
            categoria=category_for(corte.tipo),
            disponivel=True,
        )
        session.add(item)
        created.append(item)

    await flush_or_conflict(session, "Código de estoque final duplicado")

    logger.info("Finalized desoca_id=%s, %s cortes stocked", desoca.id, len(created))

    return FinalizeResponse(
        desoca=DesocaDetail(
            id=desoca.id,
            estoque_frio_id=desoca.estoque_frio_id,
            responsavel=desoca.responsavel,
            data_inicio=desoca.data_inicio,
            data_fim=now,
            finalizado=True,
            cortes=[CorteOut.model_validate(c) for c in cortes],
        ),
        estoque_final=[EstoqueFinalOut.model_validate(i) for i in created],
    )

@router.get("", response_model=List[DesocaDetail])
async def list_desoca(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(
        select(Desoca)
        .where(Desoca.finalizado == False)  # noqa
        .options(selectinload(Desoca.cortes))
        .order_by(Desoca.data_inicio.desc(), Desoca.id.desc())
    )).scalars().all()
    return [DesocaDetail.model_validate(r) for r in rows]

@router.get("/{desoca_id}", response_model=DesocaDetail)
async def get_desoca(desoca_id: int, session: AsyncSession = Depends(get_session)):
    return DesocaDetail.model_validate(await _load_desoca(session, desoca_id))

@router.post("/{desoca_id}/iniciar-cortes")
async def iniciar_cortes(desoca_id: int, session: AsyncSession = Depends(get_session)):
    desoca = await _load_desoca(session, desoca_id)
    return {"message": "Processo de cortes iniciado", "id": desoca.id}

@router.post("/{desoca_id}/cortes", response_model=CorteOut, status_code=201)
async def add_corte(desoca_id: int, req: CorteIn, session: AsyncSession = Depends(get_session)):
    corte = await add_corte_txn(session, desoca_id, req.nome, req.tipo.strip().lower(), req.peso)
    await session.commit()
    return CorteOut.model_validate(corte)

@router.post("/{desoca_id}/embutidos", response_model=CorteOut, status_code=201)
async def add_embutido(desoca_id: int, req: EmbutidoIn, session: AsyncSession = Depends(get_session)):
    corte = await add_corte_txn(session, desoca_id, req.nome, embutido_tipo(req.tipo), req.peso)
    await session.commit()
    return CorteOut.model_validate(corte)

@router.post("/{desoca_id}/finalizar", response_model=FinalizeResponse)
async def finalize(desoca_id: int, session: AsyncSession = Depends(get_session)):
    resp = await finalize_txn(session, desoca_id)
    await session.commit()
    return resp
