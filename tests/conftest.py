"""
Shared fixtures for the API tests.

Each test gets its own SQLite file (aiosqlite) with the schema created from
the ORM metadata, and an httpx client talking to the app in-process with
``get_session`` pointed at that database.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-frigorifico.sqlite3")
os.environ.setdefault("BCRYPT_ROUNDS", "4")


import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from frigorifico_core.db import get_session
from frigorifico_core.models import Base, Usuario
from frigorifico_core.security import TIPO_CLIENTE, TIPO_MASTER, hash_password
from main import app

MASTER_EMAIL = "master@frigorifico.test"
MASTER_PASSWORD = "master123"
CLIENTE_EMAIL = "cliente@frigorifico.test"
CLIENTE_PASSWORD = "cliente123"


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(session_factory):
    async with session_factory() as session:
        session.add_all([
            Usuario(nome="Master", email=MASTER_EMAIL, senha=hash_password(MASTER_PASSWORD), tipo=TIPO_MASTER),
            Usuario(nome="Cliente", email=CLIENTE_EMAIL, senha=hash_password(CLIENTE_PASSWORD), tipo=TIPO_CLIENTE),
        ])
        await session.commit()


@pytest.fixture
async def client(session_factory, users):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


async def login(client, email, senha):
    resp = await client.post("/api/login", json={"email": email, "senha": senha})
    assert resp.status_code == 200, resp.text
    return resp


@pytest.fixture
async def master_client(client):
    await login(client, MASTER_EMAIL, MASTER_PASSWORD)
    return client


@pytest.fixture
async def cliente_client(client):
    await login(client, CLIENTE_EMAIL, CLIENTE_PASSWORD)
    return client


# -----------------------------------------------------------------------------
# Pipeline helpers
# -----------------------------------------------------------------------------

_brinco_seq = iter(range(1000, 100000))


async def create_animal(client, peso=450, **overrides):
    payload = {
        "gta": "GTA-85467932",
        "brinco": f"BR-{next(_brinco_seq)}",
        "fornecedor": "Fazenda Boa Vista",
        "especie": "Bovino",
        "raca": "Nelore",
        "sexo": "Macho",
        "idade_aproximada": 36,
        "peso": peso,
    }
    payload.update(overrides)
    resp = await client.post("/api/animais-vivos", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def slaughter(client, animal_id, peso_abatido=345, observacoes=None):
    resp = await client.post("/api/animais-abatidos", json={
        "animal_vivo_id": animal_id,
        "peso_abatido": peso_abatido,
        "observacoes": observacoes,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def open_boning(client, peso=450, peso_abatido=345):
    animal = await create_animal(client, peso=peso)
    abate = await slaughter(client, animal["id"], peso_abatido)
    resp = await client.post(f"/api/estoque-frio/{abate['estoque_frio_id']}/desoca")
    assert resp.status_code == 201, resp.text
    return resp.json()


async def add_corte(client, desoca_id, nome, tipo, peso):
    resp = await client.post(f"/api/desoca/{desoca_id}/cortes", json={"nome": nome, "tipo": tipo, "peso": peso})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def stocked_item(client, tipo="picanha", peso=45):
    desoca = await open_boning(client)
    await add_corte(client, desoca["id"], tipo.capitalize(), tipo, peso)
    resp = await client.post(f"/api/desoca/{desoca['id']}/finalizar")
    assert resp.status_code == 200, resp.text
    return resp.json()["estoque_final"][0]
