from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from frigorifico_core import config
from frigorifico_core.cut_catalog import FINAL_STORAGE_TEMPERATURE, expiry_from
from frigorifico_core.db import get_session
from frigorifico_core.models import (
    AnimalVivo, AnimalAbatido, EstoqueFrio, Desoca, Corte, EstoqueFinal,
)
from frigorifico_core.security import require_master
from frigorifico_core.slaughter import (
    COLD_STORAGE_TEMPERATURE, PACKAGING_FACTOR, calcular_rendimento,
)
from frigorifico_core.time_utils import utcnow

router = APIRouter(prefix="/debug", tags=["debug"])

def _require_seed_enabled():
    if not config.DEBUG_SEED_ENABLED:
        raise HTTPException(status_code=404, detail="Not Found")

def _at(y, m, d):
    return datetime(y, m, d, 12, 0, tzinfo=timezone.utc)

@router.post("/seed-all", dependencies=[Depends(_require_seed_enabled), Depends(require_master)])
async def seed_all(session: AsyncSession = Depends(get_session)):
    for tbl in [
        "estoque_final", "cortes", "desoca",
        "estoque_frio", "animais_abatidos", "animais_vivos",
    ]:
        await session.execute(text(f"DELETE FROM {tbl}"))

    live = [
        AnimalVivo(gta="GTA-85467932", brinco="BR-2305", fornecedor="Fazenda Boa Vista", especie="Bovino",
                   raca="Nelore", sexo="Macho", idade_aproximada=36, peso=Decimal("450"), data_cadastro=_at(2023, 6, 1)),
        AnimalVivo(gta="GTA-85467932", brinco="BR-2306", fornecedor="Fazenda Boa Vista", especie="Bovino",
                   raca="Nelore", sexo="Macho", idade_aproximada=24, peso=Decimal("410"), data_cadastro=_at(2023, 6, 1)),
        AnimalVivo(gta="GTA-85467932", brinco="BR-2307", fornecedor="Fazenda Boa Vista", especie="Bovino",
                   raca="Angus", sexo="Macho", idade_aproximada=30, peso=Decimal("480"), data_cadastro=_at(2023, 6, 2)),
        AnimalVivo(gta="GTA-85467932", brinco="BR-2308", fornecedor="Fazenda Boa Vista", especie="Bovino",
                   raca="Nelore", sexo="Macho", idade_aproximada=28, peso=Decimal("425"), data_cadastro=_at(2023, 6, 2)),
    ]
    processed = [
        AnimalVivo(gta="GTA-85467930", brinco="BR-2293", fornecedor="Fazenda Alto Verde", especie="Bovino",
                   raca="Nelore", sexo="Macho", idade_aproximada=32, peso=Decimal("460"),
                   data_cadastro=_at(2023, 6, 10), disponivel=False),
        AnimalVivo(gta="GTA-85467930", brinco="BR-2294", fornecedor="Fazenda Alto Verde", especie="Bovino",
                   raca="Nelore", sexo="Macho", idade_aproximada=30, peso=Decimal("425"),
                   data_cadastro=_at(2023, 6, 10), disponivel=False),
    ]
    session.add_all(live + processed)
    await session.flush()

    abatidos = []
    for animal, peso_abatido in zip(processed, (Decimal("345"), Decimal("318"))):
        abatidos.append(AnimalAbatido(
            animal_vivo_id=animal.id,
            peso_vivo=animal.peso,
            peso_abatido=peso_abatido,
            rendimento=calcular_rendimento(animal.peso, peso_abatido),
            data_abate=_at(2023, 6, 12),
            observacoes="Abate padrão",
        ))
    session.add_all(abatidos)
    await session.flush()

    # one carcass still in the chamber, one already forwarded to boning
    frio_disponivel = EstoqueFrio(
        animal_abatido_id=abatidos[0].id,
        peso_embalado=abatidos[0].peso_abatido * PACKAGING_FACTOR,
        temperatura=COLD_STORAGE_TEMPERATURE,
        data_entrada=_at(2023, 6, 12),
    )
    frio_desossado = EstoqueFrio(
        animal_abatido_id=abatidos[1].id,
        peso_embalado=abatidos[1].peso_abatido * PACKAGING_FACTOR,
        temperatura=COLD_STORAGE_TEMPERATURE,
        data_entrada=_at(2023, 6, 12),
        disponivel=False,
    )
    session.add_all([frio_disponivel, frio_desossado])
    await session.flush()

    desoca = Desoca(estoque_frio_id=frio_desossado.id, responsavel="Carlos Silva", data_inicio=_at(2023, 6, 13))
    session.add(desoca)
    await session.flush()

    cortes = [
        Corte(desoca_id=desoca.id, nome=nome, tipo=tipo, peso=Decimal(peso), data_criacao=_at(2023, 6, 13))
        for nome, tipo, peso in [
            ("Picanha", "picanha", "12"),
            ("Contra-filé", "contrafile", "28"),
            ("Alcatra", "alcatra", "18"),
            ("Patinho", "patinho", "22"),
            ("Costela", "costela", "35"),
        ]
    ]
    session.add_all(cortes)
    await session.flush()

    finais = [
        EstoqueFinal(corte_id=cortes[0].id, codigo="PCH-001", quantidade=Decimal("45"), preco=Decimal("79.90"),
                     validade=expiry_from(utcnow()),
                     temperatura=FINAL_STORAGE_TEMPERATURE, categoria="Premium"),
        EstoqueFinal(corte_id=cortes[1].id, codigo="CTF-002", quantidade=Decimal("68"), preco=Decimal("49.90"),
                     validade=utcnow() + timedelta(days=28),
                     temperatura=FINAL_STORAGE_TEMPERATURE, categoria="Extra"),
    ]
    session.add_all(finais)

    await session.commit()
    return {
        "animais_vivos": [a.id for a in live],
        "animais_abatidos": [a.id for a in abatidos],
        "estoque_frio": [frio_disponivel.id, frio_desossado.id],
        "desoca": [desoca.id],
        "cortes": [c.id for c in cortes],
        "estoque_final": [f.id for f in finais],
    }
