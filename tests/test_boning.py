"""
Boning sessions (desoça) and the finalize fan-out into final inventory.

Verifies:
- Cuts and sausages are recorded against an open session
- Finalizing creates exactly one final-inventory item per cut
- Codes, prices, categories, expiry and temperature of the created items
- A finalized session accepts no more cuts and cannot be finalized again
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from frigorifico_core.models import EstoqueFinal
from tests.conftest import add_corte, open_boning


def _parse(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestCuts:

    async def test_add_cut(self, master_client):
        desoca = await open_boning(master_client)
        corte = await add_corte(master_client, desoca["id"], "Picanha", "Picanha", 12)
        assert corte["desoca_id"] == desoca["id"]
        assert corte["tipo"] == "picanha"
        assert corte["peso"] == 12

        detail = (await master_client.get(f"/api/desoca/{desoca['id']}")).json()
        assert [c["id"] for c in detail["cortes"]] == [corte["id"]]

    async def test_add_embutido(self, master_client):
        desoca = await open_boning(master_client)
        resp = await master_client.post(f"/api/desoca/{desoca['id']}/embutidos", json={
            "nome": "Linguiça defumada", "tipo": "defumado", "peso": 8.5,
        })
        assert resp.status_code == 201
        assert resp.json()["tipo"] == "embutido_defumado"

    async def test_unknown_embutido_kind(self, master_client):
        desoca = await open_boning(master_client)
        resp = await master_client.post(f"/api/desoca/{desoca['id']}/embutidos", json={
            "nome": "Salame", "tipo": "curado", "peso": 3,
        })
        assert resp.status_code == 422

    @pytest.mark.parametrize("payload", [
        {"nome": "Picanha", "tipo": "picanha", "peso": 0},
        {"nome": "Picanha", "tipo": "picanha"},
        {"tipo": "picanha", "peso": 10},
    ])
    async def test_cut_validation(self, master_client, payload):
        desoca = await open_boning(master_client)
        resp = await master_client.post(f"/api/desoca/{desoca['id']}/cortes", json=payload)
        assert resp.status_code == 422

    async def test_unknown_session(self, master_client):
        resp = await master_client.post("/api/desoca/999/cortes", json={"nome": "Picanha", "tipo": "picanha", "peso": 1})
        assert resp.status_code == 404
        assert (await master_client.get("/api/desoca/999")).status_code == 404

    async def test_iniciar_cortes(self, master_client):
        desoca = await open_boning(master_client)
        resp = await master_client.post(f"/api/desoca/{desoca['id']}/iniciar-cortes")
        assert resp.status_code == 200
        assert resp.json()["id"] == desoca["id"]

        assert (await master_client.post("/api/desoca/999/iniciar-cortes")).status_code == 404


class TestListSessions:

    async def test_only_open_sessions(self, master_client):
        open_one = await open_boning(master_client)
        closed = await open_boning(master_client)
        await master_client.post(f"/api/desoca/{closed['id']}/finalizar")

        ids = [d["id"] for d in (await master_client.get("/api/desoca")).json()]
        assert ids == [open_one["id"]]


class TestFinalize:

    async def test_fan_out(self, master_client, db):
        desoca = await open_boning(master_client)
        picanha = await add_corte(master_client, desoca["id"], "Picanha", "picanha", 12)
        contra = await add_corte(master_client, desoca["id"], "Contra-filé", "contrafile", 28)
        await master_client.post(f"/api/desoca/{desoca['id']}/embutidos", json={
            "nome": "Linguiça frescal", "tipo": "frescal", "peso": 6,
        })

        resp = await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")
        assert resp.status_code == 200
        body = resp.json()

        assert body["desoca"]["finalizado"] is True
        assert body["desoca"]["data_fim"] is not None
        assert len(body["desoca"]["cortes"]) == 3

        items = {i["corte_id"]: i for i in body["estoque_final"]}
        assert len(items) == 3

        pic = items[picanha["id"]]
        assert pic["codigo"] == f"PIC-{picanha['id']:03d}"
        assert pic["quantidade"] == 12
        assert pic["preco"] == 79.90
        assert pic["categoria"] == "Premium"
        assert pic["temperatura"] == -5
        assert pic["disponivel"] is True

        ctf = items[contra["id"]]
        assert ctf["codigo"].startswith("CON-")
        assert ctf["preco"] == 49.90
        assert ctf["categoria"] == "Extra"

        emb = [i for i in body["estoque_final"] if i["codigo"].startswith("EMB-")]
        assert len(emb) == 1
        assert emb[0]["preco"] == 32.90
        assert emb[0]["categoria"] == "Embutidos"

        stored = (await db.execute(select(EstoqueFinal))).scalars().all()
        assert len(stored) == 3

    async def test_expiry_is_thirty_days_out(self, master_client):
        desoca = await open_boning(master_client)
        await add_corte(master_client, desoca["id"], "Picanha", "picanha", 12)
        body = (await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")).json()

        data_fim = _parse(body["desoca"]["data_fim"])
        validade = _parse(body["estoque_final"][0]["validade"])
        assert validade - data_fim == timedelta(days=30)

    async def test_unknown_cut_type_uses_fallbacks(self, master_client):
        desoca = await open_boning(master_client)
        await add_corte(master_client, desoca["id"], "Fraldinha", "fraldinha", 9)
        item = (await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")).json()["estoque_final"][0]
        assert item["codigo"].startswith("FRA-")
        assert item["preco"] == 29.90
        assert item["categoria"] == "Padrão"

    async def test_empty_session_finalizes_without_stock(self, master_client):
        desoca = await open_boning(master_client)
        body = (await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")).json()
        assert body["desoca"]["finalizado"] is True
        assert body["estoque_final"] == []

    async def test_finalize_twice_conflicts(self, master_client, db):
        desoca = await open_boning(master_client)
        await add_corte(master_client, desoca["id"], "Picanha", "picanha", 12)
        assert (await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")).status_code == 200

        resp = await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")
        assert resp.status_code == 409
        assert len((await db.execute(select(EstoqueFinal))).scalars().all()) == 1

    async def test_no_cuts_after_finalize(self, master_client):
        desoca = await open_boning(master_client)
        await master_client.post(f"/api/desoca/{desoca['id']}/finalizar")

        resp = await master_client.post(f"/api/desoca/{desoca['id']}/cortes", json={
            "nome": "Picanha", "tipo": "picanha", "peso": 3,
        })
        assert resp.status_code == 409
        resp = await master_client.post(f"/api/desoca/{desoca['id']}/embutidos", json={
            "nome": "Linguiça", "tipo": "cozido", "peso": 3,
        })
        assert resp.status_code == 409

    async def test_unknown_session(self, master_client):
        assert (await master_client.post("/api/desoca/999/finalizar")).status_code == 404
