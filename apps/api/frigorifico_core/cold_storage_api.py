from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core.db import get_session
from frigorifico_core.models import EstoqueFrio, Desoca
from frigorifico_core.security import current_user
from frigorifico_core.time_utils import days_since, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/estoque-frio", tags=["estoque-frio"], dependencies=[Depends(current_user)])

DEFAULT_RESPONSAVEL = "Operador Sistema"

class EstoqueFrioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    animal_abatido_id: int
    peso_embalado: float
    temperatura: float
    data_entrada: datetime
    disponivel: bool

class EstoqueFrioListItem(EstoqueFrioOut):
    dias_camara: int

class SendToBoningRequest(BaseModel):
    responsavel: str | None = Field(default=None, min_length=3, max_length=255)

class DesocaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    estoque_frio_id: int
    responsavel: str
    data_inicio: datetime
    data_fim: datetime | None
    finalizado: bool

async def _take_available(session: AsyncSession, item_id: int) -> EstoqueFrio:
    """Load a cold-storage item for consumption; 404 if missing, 409 if already gone."""
    item = (await session.execute(
        select(EstoqueFrio).where(EstoqueFrio.id == item_id).with_for_update()
    )).scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item não encontrado")
    if not item.disponivel:
        raise HTTPException(status_code=409, detail="Item já foi vendido ou enviado para desoça")
    return item

async def send_to_boning_txn(session: AsyncSession, item_id: int, responsavel: str | None = None) -> Desoca:
    item = await _take_available(session, item_id)

    await session.execute(
        update(EstoqueFrio).where(EstoqueFrio.id == item.id).values(disponivel=False)
    )

    desoca = Desoca(
        estoque_frio_id=item.id,
        responsavel=responsavel or DEFAULT_RESPONSAVEL,
        data_inicio=utcnow(),
        finalizado=False,
    )
    session.add(desoca)
    await session.flush()

    logger.info("Cold storage item %s sent to boning, desoca_id=%s", item.id, desoca.id)
    return desoca

async def mark_sold_txn(session: AsyncSession, item_id: int) -> EstoqueFrio:
    item = await _take_available(session, item_id)

    await session.execute(
        update(EstoqueFrio).where(EstoqueFrio.id == item.id).values(disponivel=False)
    )
    await session.flush()

    logger.info("Cold storage item %s sold, peso_embalado=%s", item.id, item.peso_embalado)
    return item

@router.get("", response_model=List[EstoqueFrioListItem])
async def list_estoque_frio(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(
        select(EstoqueFrio)
        .where(EstoqueFrio.disponivel == True)  # noqa
        .order_by(EstoqueFrio.data_entrada.desc(), EstoqueFrio.id.desc())
    )).scalars().all()

    now = utcnow()
    return [
        EstoqueFrioListItem(
            **EstoqueFrioOut.model_validate(r).model_dump(),
            dias_camara=days_since(r.data_entrada, now),
        )
        for r in rows
    ]

@router.get("/{item_id}", response_model=EstoqueFrioOut)
async def get_estoque_frio(item_id: int, session: AsyncSession = Depends(get_session)):
    item = (await session.execute(select(EstoqueFrio).where(EstoqueFrio.id == item_id))).scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item não encontrado")
    return EstoqueFrioOut.model_validate(item)

@router.post("/{item_id}/desoca", response_model=DesocaOut, status_code=201)
async def send_to_boning(
    item_id: int,
    req: SendToBoningRequest | None = Body(default=None),
    session: AsyncSession = Depends(get_session),
):
    desoca = await send_to_boning_txn(session, item_id, req.responsavel if req else None)
    await session.commit()
    return DesocaOut.model_validate(desoca)

@router.post("/{item_id}/vender", response_model=EstoqueFrioOut)
async def mark_sold(item_id: int, session: AsyncSession = Depends(get_session)):
    item = await mark_sold_txn(session, item_id)
    await session.commit()
    return EstoqueFrioOut.model_validate(item)
