"""Cold storage: listing, direct sale, and forwarding to boning."""

from datetime import timedelta

from sqlalchemy import select, update

from frigorifico_core.models import Desoca, EstoqueFrio
from frigorifico_core.time_utils import utcnow
from tests.conftest import create_animal, slaughter


async def _cold_item(client, peso=450, peso_abatido=345):
    animal = await create_animal(client, peso=peso)
    abate = await slaughter(client, animal["id"], peso_abatido)
    return abate["estoque_frio_id"]


class TestListColdStorage:

    async def test_lists_available_items_with_chamber_days(self, master_client, db):
        item_id = await _cold_item(master_client)
        await db.execute(
            update(EstoqueFrio)
            .where(EstoqueFrio.id == item_id)
            .values(data_entrada=utcnow() - timedelta(days=3, hours=1))
        )
        await db.commit()

        rows = (await master_client.get("/api/estoque-frio")).json()
        assert len(rows) == 1
        assert rows[0]["id"] == item_id
        assert rows[0]["peso_embalado"] == 338.1
        assert rows[0]["temperatura"] == 2
        assert rows[0]["dias_camara"] == 4

    async def test_consumed_items_hidden(self, master_client):
        sold = await _cold_item(master_client)
        boned = await _cold_item(master_client)
        kept = await _cold_item(master_client)
        await master_client.post(f"/api/estoque-frio/{sold}/vender")
        await master_client.post(f"/api/estoque-frio/{boned}/desoca")

        ids = [r["id"] for r in (await master_client.get("/api/estoque-frio")).json()]
        assert ids == [kept]

    async def test_get_item(self, master_client):
        item_id = await _cold_item(master_client)
        resp = await master_client.get(f"/api/estoque-frio/{item_id}")
        assert resp.status_code == 200
        assert resp.json()["disponivel"] is True

        assert (await master_client.get("/api/estoque-frio/999")).status_code == 404


class TestMarkSold:

    async def test_sell(self, master_client):
        item_id = await _cold_item(master_client)
        resp = await master_client.post(f"/api/estoque-frio/{item_id}/vender")
        assert resp.status_code == 200
        assert resp.json()["disponivel"] is False

    async def test_sell_twice_conflicts(self, master_client):
        item_id = await _cold_item(master_client)
        await master_client.post(f"/api/estoque-frio/{item_id}/vender")
        resp = await master_client.post(f"/api/estoque-frio/{item_id}/vender")
        assert resp.status_code == 409

    async def test_unknown_item(self, master_client):
        assert (await master_client.post("/api/estoque-frio/999/vender")).status_code == 404


class TestSendToBoning:

    async def test_default_responsavel(self, master_client, db):
        item_id = await _cold_item(master_client)
        resp = await master_client.post(f"/api/estoque-frio/{item_id}/desoca")
        assert resp.status_code == 201
        body = resp.json()
        assert body["estoque_frio_id"] == item_id
        assert body["responsavel"] == "Operador Sistema"
        assert body["finalizado"] is False
        assert body["data_fim"] is None

        frio = (await db.execute(select(EstoqueFrio).where(EstoqueFrio.id == item_id))).scalar_one()
        assert frio.disponivel is False

    async def test_named_responsavel(self, master_client):
        item_id = await _cold_item(master_client)
        resp = await master_client.post(f"/api/estoque-frio/{item_id}/desoca", json={"responsavel": "Carlos Silva"})
        assert resp.status_code == 201
        assert resp.json()["responsavel"] == "Carlos Silva"

    async def test_sold_item_cannot_be_boned(self, master_client, db):
        item_id = await _cold_item(master_client)
        await master_client.post(f"/api/estoque-frio/{item_id}/vender")

        resp = await master_client.post(f"/api/estoque-frio/{item_id}/desoca")
        assert resp.status_code == 409
        assert (await db.execute(select(Desoca))).scalars().all() == []

    async def test_forward_twice_creates_one_session(self, master_client, db):
        item_id = await _cold_item(master_client)
        assert (await master_client.post(f"/api/estoque-frio/{item_id}/desoca")).status_code == 201
        assert (await master_client.post(f"/api/estoque-frio/{item_id}/desoca")).status_code == 409
        assert len((await db.execute(select(Desoca))).scalars().all()) == 1

    async def test_unknown_item(self, master_client):
        assert (await master_client.post("/api/estoque-frio/999/desoca")).status_code == 404
