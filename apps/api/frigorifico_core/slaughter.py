from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, condecimal
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core.db import get_session
from frigorifico_core.errors import flush_or_conflict
from frigorifico_core.models import AnimalVivo, AnimalAbatido, EstoqueFrio
from frigorifico_core.security import current_user
from frigorifico_core.time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/animais-abatidos", tags=["abate"], dependencies=[Depends(current_user)])

Kg = condecimal(gt=0, max_digits=12, decimal_places=3)

# Carcass loses ~2% to packaging trim before cold storage.
PACKAGING_FACTOR = Decimal("0.98")
COLD_STORAGE_TEMPERATURE = Decimal("2")

class SlaughterRequest(BaseModel):
    animal_vivo_id: int
    peso_abatido: Kg
    observacoes: str | None = Field(default=None, max_length=2000)

class AnimalAbatidoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    animal_vivo_id: int
    peso_vivo: float
    peso_abatido: float
    rendimento: float
    data_abate: datetime
    observacoes: str | None

class SlaughterResponse(AnimalAbatidoOut):
    estoque_frio_id: int
    peso_embalado: float

def calcular_rendimento(peso_vivo: float, peso_abatido: float) -> float:
    """Dressed-to-live yield, in percent. 0 when either weight is missing."""
    if not peso_vivo or not peso_abatido:
        return 0.0
    return (float(peso_abatido) / float(peso_vivo)) * 100

async def slaughter_txn(req: SlaughterRequest, session: AsyncSession) -> SlaughterResponse:
    """Slaughter + cold-storage intake without committing (caller controls transaction)."""
    animal = (await session.execute(
        select(AnimalVivo).where(AnimalVivo.id == req.animal_vivo_id).with_for_update()
    )).scalar_one_or_none()
    if not animal:
        raise HTTPException(status_code=404, detail="Animal não encontrado")

    if not animal.disponivel:
        raise HTTPException(status_code=409, detail=f"Animal {animal.brinco} já foi abatido ou não está disponível")

    peso_vivo = Decimal(animal.peso)
    if req.peso_abatido > peso_vivo:
        raise HTTPException(
            status_code=400,
            detail=f"Peso abatido não pode exceder o peso vivo. peso_vivo={float(peso_vivo):.3f} peso_abatido={float(req.peso_abatido):.3f}",
        )

    now = utcnow()
    rendimento = calcular_rendimento(peso_vivo, req.peso_abatido)

    abatido = AnimalAbatido(
        animal_vivo_id=animal.id,
        peso_vivo=peso_vivo,
        peso_abatido=req.peso_abatido,
        rendimento=rendimento,
        data_abate=now,
        observacoes=req.observacoes,
    )
    session.add(abatido)
    await flush_or_conflict(session, "Animal já possui registro de abate")

    await session.execute(
        update(AnimalVivo).where(AnimalVivo.id == animal.id).values(disponivel=False)
    )

    frio = EstoqueFrio(
        animal_abatido_id=abatido.id,
        peso_embalado=req.peso_abatido * PACKAGING_FACTOR,
        temperatura=COLD_STORAGE_TEMPERATURE,
        data_entrada=now,
        disponivel=True,
    )
    session.add(frio)
    await session.flush()

    logger.info(
        "Slaughtered animal_vivo_id=%s peso_vivo=%s peso_abatido=%s rendimento=%.2f estoque_frio_id=%s",
        animal.id, peso_vivo, req.peso_abatido, rendimento, frio.id,
    )

    return SlaughterResponse(
        id=abatido.id,
        animal_vivo_id=animal.id,
        peso_vivo=peso_vivo,
        peso_abatido=req.peso_abatido,
        rendimento=rendimento,
        data_abate=now,
        observacoes=req.observacoes,
        estoque_frio_id=frio.id,
        peso_embalado=frio.peso_embalado,
    )

@router.get("", response_model=List[AnimalAbatidoOut])
async def list_animais_abatidos(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(
        select(AnimalAbatido).order_by(AnimalAbatido.data_abate.desc(), AnimalAbatido.id.desc())
    )).scalars().all()
    return [AnimalAbatidoOut.model_validate(r) for r in rows]

@router.post("", response_model=SlaughterResponse, status_code=201)
async def slaughter(req: SlaughterRequest, session: AsyncSession = Depends(get_session)):
    resp = await slaughter_txn(req=req, session=session)
    await session.commit()
    return resp
