from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, condecimal
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core.db import get_session
from frigorifico_core.errors import flush_or_conflict
from frigorifico_core.models import AnimalVivo
from frigorifico_core.security import current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/animais-vivos", tags=["animais-vivos"], dependencies=[Depends(current_user)])

Kg = condecimal(gt=0, max_digits=12, decimal_places=3)

class AnimalVivoCreateRequest(BaseModel):
    gta: str = Field(min_length=5, max_length=64)
    brinco: str = Field(min_length=3, max_length=64)
    fornecedor: str = Field(min_length=3, max_length=255)
    especie: str = Field(min_length=3, max_length=64)
    raca: str = Field(min_length=2, max_length=64)
    sexo: str = Field(min_length=1, max_length=16)
    idade_aproximada: int = Field(gt=0)
    peso: Kg

class AnimalVivoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    gta: str
    brinco: str
    fornecedor: str
    especie: str
    raca: str
    sexo: str
    idade_aproximada: int
    peso: float
    data_cadastro: datetime
    disponivel: bool

async def list_available(session: AsyncSession) -> List[AnimalVivo]:
    return (await session.execute(
        select(AnimalVivo)
        .where(AnimalVivo.disponivel == True)  # noqa
        .order_by(AnimalVivo.data_cadastro.desc(), AnimalVivo.id.desc())
    )).scalars().all()

@router.get("", response_model=List[AnimalVivoOut])
async def list_animais_vivos(session: AsyncSession = Depends(get_session)):
    return [AnimalVivoOut.model_validate(r) for r in await list_available(session)]

@router.get("/disponiveis", response_model=List[AnimalVivoOut])
async def list_disponiveis(session: AsyncSession = Depends(get_session)):
    return [AnimalVivoOut.model_validate(r) for r in await list_available(session)]

@router.get("/{animal_id}", response_model=AnimalVivoOut)
async def get_animal_vivo(animal_id: int, session: AsyncSession = Depends(get_session)):
    animal = (await session.execute(select(AnimalVivo).where(AnimalVivo.id == animal_id))).scalar_one_or_none()
    if not animal:
        raise HTTPException(status_code=404, detail="Animal não encontrado")
    return AnimalVivoOut.model_validate(animal)

@router.post("", response_model=AnimalVivoOut, status_code=201)
async def create_animal_vivo(req: AnimalVivoCreateRequest, session: AsyncSession = Depends(get_session)):
    animal = AnimalVivo(
        gta=req.gta,
        brinco=req.brinco.strip(),
        fornecedor=req.fornecedor,
        especie=req.especie,
        raca=req.raca,
        sexo=req.sexo,
        idade_aproximada=req.idade_aproximada,
        peso=req.peso,
        disponivel=True,
    )
    session.add(animal)
    await flush_or_conflict(session, f"Brinco {animal.brinco} já cadastrado")
    await session.commit()
    logger.info("Registered live animal id=%s brinco=%s peso=%s", animal.id, animal.brinco, animal.peso)
    return AnimalVivoOut.model_validate(animal)
