from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, condecimal
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core.db import get_session
from frigorifico_core.models import EstoqueFinal
from frigorifico_core.security import current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/estoque-final", tags=["estoque-final"], dependencies=[Depends(current_user)])

Kg = condecimal(gt=0, max_digits=12, decimal_places=3)

class EstoqueFinalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    corte_id: int
    codigo: str
    quantidade: float
    preco: float
    validade: datetime
    temperatura: float
    categoria: str
    disponivel: bool

class RegistrarSaidaRequest(BaseModel):
    quantidade: Kg

async def registrar_saida_txn(session: AsyncSession, item_id: int, quantidade: Decimal) -> EstoqueFinal:
    """
    Deduct ``quantidade`` from a final-inventory item.

    Taking the whole stock delists the item (disponivel=False) and leaves the
    recorded quantity as it was; anything less decrements the stock.
    Once an item is delisted its ``quantidade`` is historical, not stock on hand.
    """
    item = (await session.execute(
        select(EstoqueFinal).where(EstoqueFinal.id == item_id).with_for_update()
    )).scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item não encontrado")

    if not item.disponivel:
        raise HTTPException(status_code=409, detail=f"Item {item.codigo} não está mais disponível")

    current = Decimal(item.quantidade)
    if quantidade > current:
        raise HTTPException(
            status_code=400,
            detail=f"Quantidade de saída maior que a disponível. disponivel={float(current):.3f} solicitado={float(quantidade):.3f}",
        )

    if quantidade == current:
        await session.execute(
            update(EstoqueFinal).where(EstoqueFinal.id == item.id).values(disponivel=False)
        )
    else:
        await session.execute(
            update(EstoqueFinal).where(EstoqueFinal.id == item.id).values(quantidade=current - quantidade)
        )
    await session.flush()

    logger.info(
        "Exit registered for %s: %s of %s (disponivel=%s)",
        item.codigo, quantidade, current, item.disponivel,
    )
    return item

@router.get("", response_model=List[EstoqueFinalOut])
async def list_estoque_final(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(
        select(EstoqueFinal)
        .where(EstoqueFinal.disponivel == True)  # noqa
        .order_by(EstoqueFinal.categoria.desc(), EstoqueFinal.validade.desc(), EstoqueFinal.id)
    )).scalars().all()
    return [EstoqueFinalOut.model_validate(r) for r in rows]

@router.get("/{item_id}", response_model=EstoqueFinalOut)
async def get_estoque_final(item_id: int, session: AsyncSession = Depends(get_session)):
    item = (await session.execute(select(EstoqueFinal).where(EstoqueFinal.id == item_id))).scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item não encontrado")
    return EstoqueFinalOut.model_validate(item)

@router.post("/{item_id}/registrar-saida", response_model=EstoqueFinalOut)
async def registrar_saida(item_id: int, req: RegistrarSaidaRequest, session: AsyncSession = Depends(get_session)):
    item = await registrar_saida_txn(session, item_id, req.quantidade)
    await session.commit()
    return EstoqueFinalOut.model_validate(item)
